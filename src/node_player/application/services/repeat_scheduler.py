"""Timer that reshuffles a player's queue while dynamic repeat is on."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ...domain.shared.exceptions import RangeError
from ...domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ...domain.player.entities import Queue

logger = logging.getLogger(__name__)

MIN_INTERVAL_MS = 1


class RepeatToken:
    """Handle returned by ``arm``; a tick only runs while its token is active."""

    __slots__ = ("_active", "interval_ms")

    def __init__(self, interval_ms: int) -> None:
        self.interval_ms = interval_ms
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def invalidate(self) -> None:
        self._active = False


@dataclass(frozen=True, slots=True)
class Armed:
    token: RepeatToken
    task: asyncio.Task[None]

    @property
    def interval_ms(self) -> int:
        return self.token.interval_ms


@dataclass(frozen=True, slots=True)
class Disarmed:
    pass


SchedulerState = Armed | Disarmed

_DISARMED = Disarmed()


class DynamicRepeatScheduler:
    """Periodically shuffles the pending entries of one queue.

    Only one timer exists per scheduler. Each tick runs to completion without
    yielding, so a shuffle can never overlap another. A tick checks that its
    token is still the armed one and that ``is_active`` still holds before it
    touches the queue; that guard covers a tick already woken when ``disarm``
    is called.
    """

    def __init__(
        self,
        *,
        room_id: str,
        queue: Queue,
        is_active: Callable[[], bool],
        rng: random.Random | None = None,
    ) -> None:
        self._room_id = room_id
        self._queue = queue
        self._is_active = is_active
        self._rng = rng or random.Random()
        self._state: SchedulerState = _DISARMED

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def is_armed(self) -> bool:
        return isinstance(self._state, Armed)

    def arm(self, interval_ms: int) -> RepeatToken:
        """Start ticking every ``interval_ms``, replacing any running timer."""
        if interval_ms < MIN_INTERVAL_MS:
            raise RangeError(
                ErrorMessages.INTERVAL_NOT_POSITIVE, value=interval_ms, limit=MIN_INTERVAL_MS
            )
        self.disarm()

        token = RepeatToken(interval_ms)
        task = asyncio.get_running_loop().create_task(
            self._run(token), name=f"dynamic-repeat-{self._room_id}"
        )
        self._state = Armed(token=token, task=task)
        logger.debug(LogTemplates.DYNAMIC_REPEAT_ARMED, self._room_id, interval_ms)
        return token

    def disarm(self) -> bool:
        """Stop the timer. Returns False if it was not armed."""
        state = self._state
        if not isinstance(state, Armed):
            return False

        state.token.invalidate()
        state.task.cancel()
        self._state = _DISARMED
        logger.debug(LogTemplates.DYNAMIC_REPEAT_DISARMED, self._room_id)
        return True

    async def _run(self, token: RepeatToken) -> None:
        interval = token.interval_ms / 1000
        while token.active:
            await asyncio.sleep(interval)
            try:
                self.tick(token)
            except Exception:
                logger.exception(LogTemplates.DYNAMIC_REPEAT_TICK_FAILED, self._room_id)

    def _is_current(self, token: RepeatToken) -> bool:
        state = self._state
        return token.active and isinstance(state, Armed) and state.token is token

    def tick(self, token: RepeatToken) -> bool:
        """Shuffle once on behalf of ``token``. Returns False for a stale token."""
        if not self._is_current(token) or not self._is_active():
            logger.debug(LogTemplates.DYNAMIC_REPEAT_STALE, self._room_id)
            return False

        self._queue.shuffle(self._rng)
        logger.debug(LogTemplates.DYNAMIC_REPEAT_SHUFFLED, self._queue.size, self._room_id)
        return True
