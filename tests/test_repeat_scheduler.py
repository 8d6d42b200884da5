"""
Unit Tests for DynamicRepeatScheduler

Tests for:
- Arming and disarming the timer
- Shuffle ticks keeping the pending entries as a permutation
- Stale tick suppression after disarm or re-arm
"""

import asyncio
import random

import pytest

from node_player.application.services.repeat_scheduler import (
    Armed,
    Disarmed,
    DynamicRepeatScheduler,
)
from node_player.domain.player.entities import Queue
from node_player.domain.shared.exceptions import RangeError


@pytest.fixture
def queue(sample_tracks):
    q = Queue()
    q.add(sample_tracks)
    return q


@pytest.fixture
def active():
    return {"value": True}


@pytest.fixture
def scheduler(queue, active):
    return DynamicRepeatScheduler(
        room_id="G1",
        queue=queue,
        is_active=lambda: active["value"],
        rng=random.Random(3),
    )


def identifiers(queue):
    return [track.identifier for track in queue]


class TestSchedulerState:
    """Unit tests for arm / disarm."""

    def test_starts_disarmed(self, scheduler):
        assert isinstance(scheduler.state, Disarmed)
        assert not scheduler.is_armed

    @pytest.mark.asyncio
    async def test_arm(self, scheduler):
        token = scheduler.arm(5000)

        assert scheduler.is_armed
        assert isinstance(scheduler.state, Armed)
        assert scheduler.state.token is token
        assert scheduler.state.interval_ms == 5000
        scheduler.disarm()

    @pytest.mark.asyncio
    async def test_disarm(self, scheduler):
        token = scheduler.arm(5000)
        task = scheduler.state.task

        assert scheduler.disarm() is True
        await asyncio.sleep(0)

        assert not token.active
        assert task.cancelled()
        assert not scheduler.is_armed

    def test_disarm_when_idle(self, scheduler):
        assert scheduler.disarm() is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("interval_ms", [0, -5])
    async def test_arm_rejects_sub_millisecond_interval(self, scheduler, interval_ms):
        with pytest.raises(RangeError):
            scheduler.arm(interval_ms)

        assert isinstance(scheduler.state, Disarmed)

    @pytest.mark.asyncio
    async def test_rearm_replaces_timer(self, scheduler):
        first = scheduler.arm(5000)
        second = scheduler.arm(2000)

        assert not first.active
        assert scheduler.state.token is second
        scheduler.disarm()


class TestSchedulerTick:
    """Unit tests for the shuffle tick."""

    @pytest.mark.asyncio
    async def test_tick_shuffles_pending(self, scheduler, queue):
        current = queue.current
        before = identifiers(queue)
        token = scheduler.arm(60_000)

        assert scheduler.tick(token) is True

        assert sorted(identifiers(queue)) == sorted(before)
        assert queue.current is current
        scheduler.disarm()

    @pytest.mark.asyncio
    async def test_stale_token_ignored(self, scheduler, queue):
        token = scheduler.arm(60_000)
        scheduler.disarm()
        before = identifiers(queue)

        assert scheduler.tick(token) is False
        assert identifiers(queue) == before

    @pytest.mark.asyncio
    async def test_superseded_token_ignored(self, scheduler):
        old = scheduler.arm(60_000)
        scheduler.arm(60_000)

        assert scheduler.tick(old) is False
        scheduler.disarm()

    @pytest.mark.asyncio
    async def test_inactive_mode_ignored(self, scheduler, queue, active):
        token = scheduler.arm(60_000)
        active["value"] = False
        before = identifiers(queue)

        assert scheduler.tick(token) is False
        assert identifiers(queue) == before
        scheduler.disarm()

    @pytest.mark.asyncio
    async def test_timer_ticks(self, queue, active):
        """A real timer should reshuffle the queue on its own."""
        rng = random.Random(0)
        rng.shuffle = lambda items: items.sort(key=lambda t: t.identifier, reverse=True)
        scheduler = DynamicRepeatScheduler(
            room_id="G1", queue=queue, is_active=lambda: active["value"], rng=rng
        )
        before = identifiers(queue)

        scheduler.arm(10)
        await asyncio.sleep(0.05)
        scheduler.disarm()

        assert identifiers(queue) == sorted(before, reverse=True)

    @pytest.mark.asyncio
    async def test_no_shuffle_after_disarm(self, scheduler, queue):
        before = identifiers(queue)

        scheduler.arm(10)
        scheduler.disarm()
        await asyncio.sleep(0.05)

        assert identifiers(queue) == before
