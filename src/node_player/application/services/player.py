"""Player - the session state machine for one room.

The player owns connection state, the queue, repeat mode, volume and position,
and decides what should be playing. Playing it is delegated to a remote node.

All operations on one player must be called from a single task on the running
event loop. Apart from ``play`` and ``flush``, operations are synchronous: they
validate their arguments before mutating anything, apply the change locally,
and dispatch the matching node call as a background task. Local state is
optimistic and is not rolled back when a dispatched call fails; failures are
logged.
"""

from __future__ import annotations

import asyncio
import logging
import math
import numbers
from collections.abc import Awaitable, Callable, Mapping
from functools import partial
from typing import TYPE_CHECKING, Any

import pydantic

from ...domain.player.entities import Queue, QueueEntry, Track
from ...domain.player.snapshot import PlayerSnapshot
from ...domain.player.value_objects import (
    ConnectionState,
    PlayerOptions,
    PlayerUpdate,
    PlayOptions,
    RepeatMode,
    VoiceStateFrame,
)
from ...domain.shared.events import PlayerDestroyed, StateUpdated, TrackError
from ...domain.shared.exceptions import ConfigurationError, RangeError, StateError, ValidationError
from ...domain.shared.messages import ErrorMessages, LogTemplates
from .repeat_scheduler import MIN_INTERVAL_MS, DynamicRepeatScheduler

if TYPE_CHECKING:
    import random

    from ...domain.shared.events import EventBus
    from ..interfaces.remote_node import RemoteNode
    from ..interfaces.track_resolver import TrackResolver
    from ..interfaces.voice_signaler import VoiceSignaler

logger = logging.getLogger(__name__)

DEFAULT_DYNAMIC_REPEAT_INTERVAL_MS = 3000


def _is_real(value: object) -> bool:
    return (
        isinstance(value, numbers.Real)
        and not isinstance(value, bool)
        and not math.isnan(value)
    )


def _is_number(value: object) -> bool:
    return _is_real(value) and math.isfinite(value)  # type: ignore[arg-type]


def _require_non_empty_str(value: object, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(ErrorMessages.CHANNEL_REQUIRED, field=field)
    return value


class Player:
    """Playback controller for a single room, backed by a remote node."""

    def __init__(
        self,
        *,
        options: PlayerOptions,
        node: RemoteNode,
        voice_signaler: VoiceSignaler,
        track_resolver: TrackResolver,
        event_bus: EventBus,
        on_destroy: Callable[[str], Any] | None = None,
        dynamic_repeat_interval_ms: int = DEFAULT_DYNAMIC_REPEAT_INTERVAL_MS,
        rng: random.Random | None = None,
    ) -> None:
        self.options = options
        self.room_id = options.room_id
        self.node = node
        self.voice_channel_id: str | None = options.voice_channel_id
        self.text_channel_id: str | None = options.text_channel_id
        self.now_playing_message: Any = None

        self.state = ConnectionState.DISCONNECTED
        self.queue = Queue()
        self.repeat_mode = RepeatMode.NONE
        self.playing = False
        self.paused = False
        self.position = 0
        self.volume: float = 0
        self.data: dict[str, Any] = {}

        self._voice = voice_signaler
        self._resolver = track_resolver
        self._events = event_bus
        self._on_destroy = on_destroy
        self._default_interval_ms = dynamic_repeat_interval_ms
        self._scheduler = DynamicRepeatScheduler(
            room_id=self.room_id,
            queue=self.queue,
            is_active=lambda: self.repeat_mode is RepeatMode.DYNAMIC,
            rng=rng,
        )
        self._remote_calls: set[asyncio.Task[Any]] = set()

    def __repr__(self) -> str:
        return f"<Player room={self.room_id!r} state={self.state} node={self.node.identifier!r}>"

    # === Derived state ===

    @property
    def track_repeat(self) -> bool:
        return self.repeat_mode is RepeatMode.TRACK

    @property
    def queue_repeat(self) -> bool:
        return self.repeat_mode is RepeatMode.QUEUE

    @property
    def dynamic_repeat(self) -> bool:
        return self.repeat_mode is RepeatMode.DYNAMIC

    @property
    def is_connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED

    @property
    def is_destroyed(self) -> bool:
        return self.state.is_terminal

    @property
    def repeat_scheduler(self) -> DynamicRepeatScheduler:
        return self._scheduler

    def snapshot(self) -> PlayerSnapshot:
        current, previous = self.queue.current, self.queue.previous
        return PlayerSnapshot(
            room_id=self.room_id,
            state=self.state,
            voice_channel_id=self.voice_channel_id,
            text_channel_id=self.text_channel_id,
            node=self.node.identifier,
            playing=self.playing,
            paused=self.paused,
            position=self.position,
            volume=self.volume,
            repeat_mode=self.repeat_mode,
            current_track=_entry_label(current),
            previous_track=_entry_label(previous),
            queue_size=self.queue.size,
        )

    # === Custom data ===

    def set_data(self, key: str, value: Any) -> None:
        self.data[key] = value

    def get_data(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    # === Connection lifecycle ===

    def connect(self) -> Player:
        """Join the bound voice channel."""
        if self.is_destroyed:
            raise StateError("connect", ErrorMessages.PLAYER_DESTROYED)
        if not self.voice_channel_id:
            raise ConfigurationError(ErrorMessages.NO_VOICE_CHANNEL, setting="voice_channel_id")

        self._transition(ConnectionState.CONNECTING)
        self._voice.send_voice_state(
            self.room_id,
            VoiceStateFrame(
                channel_id=self.voice_channel_id,
                self_mute=self.options.self_mute,
                self_deafen=self.options.self_deafen,
            ),
        )
        logger.debug(LogTemplates.VOICE_JOIN_SENT, self.room_id, self.voice_channel_id)
        self._transition(ConnectionState.CONNECTED)
        return self

    def disconnect(self) -> Player:
        """Leave the voice channel, pausing playback first."""
        if self.voice_channel_id is None:
            return self

        self._transition(ConnectionState.DISCONNECTING)
        self.pause(True)
        self._voice.send_voice_state(self.room_id, VoiceStateFrame())
        logger.debug(LogTemplates.VOICE_LEAVE_SENT, self.room_id)
        self.voice_channel_id = None
        self._transition(ConnectionState.DISCONNECTED)
        return self

    def destroy(self, disconnect: bool = True) -> None:
        """Tear the player down. Calling it again on a destroyed player does nothing."""
        if self.is_destroyed:
            logger.debug(LogTemplates.PLAYER_ALREADY_DESTROYED, self.room_id)
            return

        self._transition(ConnectionState.DESTROYING)
        self._scheduler.disarm()
        self.repeat_mode = RepeatMode.NONE

        if disconnect:
            self.disconnect()

        self._dispatch("destroy_player", self.node.destroy_player(self.room_id))
        self._events.emit(PlayerDestroyed(room_id=self.room_id, snapshot=self.snapshot()))
        if self._on_destroy is not None:
            self._on_destroy(self.room_id)
        logger.info(LogTemplates.PLAYER_DESTROYED, self.room_id)

    def set_voice_channel(self, channel_id: str) -> Player:
        _require_non_empty_str(channel_id, "channel_id")
        if self.is_destroyed:
            raise StateError("set_voice_channel", ErrorMessages.PLAYER_DESTROYED)

        self.voice_channel_id = channel_id
        return self.connect()

    def set_text_channel(self, channel_id: str) -> Player:
        self.text_channel_id = _require_non_empty_str(channel_id, "channel_id")
        return self

    def set_now_playing_message(self, message: Any) -> Any:
        if not message:
            raise ValidationError(ErrorMessages.NOW_PLAYING_REQUIRED, field="message")
        self.now_playing_message = message
        return message

    # === Playback ===

    async def play(
        self,
        track_or_options: QueueEntry | PlayOptions | Mapping[str, Any] | None = None,
        options: PlayOptions | Mapping[str, Any] | None = None,
    ) -> Player | None:
        """Send the current track, or ``track_or_options`` when it is a track, to the node.

        An unresolved current track is resolved first. If that fails, a
        ``TrackError`` is emitted and the next pending entry is played instead;
        with nothing pending the call returns None.
        """
        play_options = self._parse_play_options(track_or_options, options)
        before = self.snapshot()

        if track_or_options is not None and self._resolver.validate(track_or_options):
            if self.queue.current is not None:
                self.queue.previous = self.queue.current
            self.queue.current = track_or_options  # type: ignore[assignment]

        current = self.queue.current
        if current is None:
            raise StateError("play", ErrorMessages.NO_CURRENT_TRACK)

        if self._resolver.is_unresolved(current):
            logger.debug(LogTemplates.TRACK_RESOLVING, current.title, self.room_id)
            try:
                resolved = await self._resolver.resolve(current)  # type: ignore[arg-type]
            except Exception as error:
                logger.warning(LogTemplates.TRACK_RESOLVE_FAILED, current.title, self.room_id, error)
                self._events.emit(TrackError.from_exception(self.room_id, current, error))
                self.queue.current = None
                next_entry = self.queue.dequeue()
                if next_entry is None:
                    return None
                logger.info(LogTemplates.TRACK_FALLBACK, self.room_id)
                return await self.play(next_entry)
            self.queue.current = resolved
            current = resolved

        update: dict[str, Any] = {"encoded_track": current.encoded}
        if play_options.start_time is not None:
            update["position"] = play_options.start_time
        if play_options.end_time is not None:
            update["end_time"] = play_options.end_time

        accepted = await self.node.update_player(
            self.room_id, PlayerUpdate(**update), no_replace=play_options.no_replace
        )
        if not accepted:
            logger.warning(LogTemplates.PLAYBACK_REJECTED, current.title, self.room_id)
            return self

        self.position = 0
        self.playing = True
        self._emit_state(before)
        logger.info(LogTemplates.PLAYBACK_STARTED, current.title, self.room_id)
        return self

    def _parse_play_options(
        self, track_or_options: object, options: PlayOptions | Mapping[str, Any] | None
    ) -> PlayOptions:
        try:
            if options is not None:
                return PlayOptions.model_validate(options)
            return PlayOptions.extract(track_or_options) or PlayOptions()
        except pydantic.ValidationError as e:
            raise ValidationError(str(e), field="options") from e

    def set_volume(self, volume: float) -> Player:
        if not _is_number(volume):
            raise ValidationError(ErrorMessages.VOLUME_NOT_NUMBER, field="volume")
        if volume < 0:
            raise RangeError(ErrorMessages.VOLUME_NEGATIVE, value=volume, limit=0)

        self._update("volume", PlayerUpdate(volume=int(volume)))
        self.volume = volume
        return self

    def restart(self) -> Player:
        """Play the current track from the start, or the next pending one if nothing is current."""
        current = self.queue.current
        if current is None:
            if self.queue.size:
                self.queue.current = self.queue.dequeue()
                self._dispatch("play", self.play())
            return self

        if not isinstance(current, Track):
            self._dispatch("play", self.play())
            return self

        logger.debug(LogTemplates.PLAYBACK_RESTART, self.room_id)
        self.position = 0
        self._update("restart", PlayerUpdate(position=0, encoded_track=current.encoded))
        return self

    def stop(self, skip_count: int | None = None) -> Player:
        """Stop the current track, optionally dropping pending entries.

        ``stop(n)`` with ``n > 1`` removes the ``n - 1`` leading pending
        entries so the ``n``-th one plays next.
        """
        skipped = 0
        if _is_real(skip_count) and skip_count > 1:  # type: ignore[operator]
            if skip_count > self.queue.size:  # type: ignore[operator]
                raise RangeError(
                    ErrorMessages.SKIP_EXCEEDS_QUEUE, value=skip_count, limit=self.queue.size
                )
            skipped = len(self.queue.remove_range(0, int(skip_count) - 1))  # type: ignore[arg-type]

        self._update("stop", PlayerUpdate(encoded_track=None))
        logger.debug(LogTemplates.PLAYBACK_STOPPED, self.room_id, skipped)
        return self

    def pause(self, pause: bool) -> Player:
        if not isinstance(pause, bool):
            raise ValidationError(ErrorMessages.PAUSE_NOT_BOOL, field="pause")
        if self.paused == pause or not self.queue.total_size:
            return self

        before = self.snapshot()
        self.playing = not pause
        self.paused = pause
        self._update("pause", PlayerUpdate(paused=pause))
        self._emit_state(before)
        logger.debug(LogTemplates.PLAYBACK_PAUSED, pause, self.room_id)
        return self

    def previous(self) -> Player:
        """Requeue the previous track at the front and stop the current one."""
        previous = self.queue.previous
        if previous is None:
            raise StateError("previous", ErrorMessages.NO_PREVIOUS_TRACK)

        self.queue.insert_front(previous)
        return self.stop()

    def seek(self, position: float) -> Player | None:
        """Move to ``position`` ms, clamped to the current track. None if nothing is current."""
        current = self.queue.current
        if current is None:
            return None
        if not _is_real(position):
            raise ValidationError(ErrorMessages.POSITION_NOT_NUMBER, field="position")

        duration = current.duration or 0
        clamped = int(max(0, min(position, duration)))

        before = self.snapshot()
        self.position = clamped
        self._update("seek", PlayerUpdate(position=clamped))
        self._emit_state(before)
        logger.debug(LogTemplates.PLAYBACK_SEEK, clamped, self.room_id)
        return self

    # === Repeat ===

    def set_track_repeat(self, repeat: bool) -> Player:
        return self._set_repeat_mode(RepeatMode.TRACK, repeat)

    def set_queue_repeat(self, repeat: bool) -> Player:
        return self._set_repeat_mode(RepeatMode.QUEUE, repeat)

    def set_dynamic_repeat(self, repeat: bool, interval_ms: int | None = None) -> Player:
        """Repeat the queue and reshuffle its pending entries every ``interval_ms``."""
        if not isinstance(repeat, bool):
            raise ValidationError(ErrorMessages.REPEAT_NOT_BOOL, field="repeat")

        if self.queue.size <= 1:
            raise RangeError(ErrorMessages.QUEUE_TOO_SMALL, value=self.queue.size, limit=1)

        interval = self._default_interval_ms if interval_ms is None else interval_ms
        if not repeat:
            return self._set_repeat_mode(RepeatMode.DYNAMIC, False)

        if not _is_number(interval):
            raise ValidationError(ErrorMessages.INTERVAL_NOT_NUMBER, field="interval_ms")
        whole_ms = int(interval)  # type: ignore[arg-type]
        if whole_ms < MIN_INTERVAL_MS:
            raise RangeError(
                ErrorMessages.INTERVAL_NOT_POSITIVE, value=interval, limit=MIN_INTERVAL_MS
            )
        return self._set_repeat_mode(RepeatMode.DYNAMIC, True, interval_ms=whole_ms)

    def _set_repeat_mode(self, mode: RepeatMode, enabled: bool, interval_ms: int = 0) -> Player:
        if not isinstance(enabled, bool):
            raise ValidationError(ErrorMessages.REPEAT_NOT_BOOL, field="repeat")

        before = self.snapshot()
        new_mode = mode if enabled else RepeatMode.NONE

        self._scheduler.disarm()
        self.repeat_mode = new_mode
        if new_mode is RepeatMode.DYNAMIC:
            self._scheduler.arm(interval_ms)

        logger.debug(LogTemplates.REPEAT_MODE_CHANGED, self.room_id, before.repeat_mode, new_mode)
        self._emit_state(before)
        return self

    # === Remote calls ===

    async def flush(self) -> None:
        """Wait for every dispatched node call to finish."""
        while self._remote_calls:
            await asyncio.gather(*list(self._remote_calls), return_exceptions=True)

    def _update(self, operation: str, update: PlayerUpdate) -> None:
        self._dispatch(operation, self.node.update_player(self.room_id, update))

    def _dispatch(self, operation: str, call: Awaitable[Any]) -> None:
        task = asyncio.get_running_loop().create_task(call)  # type: ignore[arg-type]
        self._remote_calls.add(task)
        task.add_done_callback(partial(self._on_remote_call_done, operation))

    def _on_remote_call_done(self, operation: str, task: asyncio.Task[Any]) -> None:
        self._remote_calls.discard(task)
        if task.cancelled():
            return

        error = task.exception()
        if error is not None:
            logger.error(
                LogTemplates.REMOTE_CALL_FAILED, operation, self.room_id, exc_info=error
            )
        elif task.result() is False:
            logger.warning(LogTemplates.REMOTE_CALL_REJECTED, operation, self.room_id)

    # === Internals ===

    def _transition(self, new_state: ConnectionState) -> None:
        if self.state.is_terminal:
            return
        logger.debug(LogTemplates.PLAYER_STATE_CHANGED, self.room_id, self.state, new_state)
        self.state = new_state

    def _emit_state(self, before: PlayerSnapshot) -> None:
        self._events.emit(StateUpdated.between(before, self.snapshot()))


def _entry_label(entry: QueueEntry | None) -> str | None:
    if entry is None:
        return None
    if isinstance(entry, Track):
        return entry.identifier
    return entry.search_query
