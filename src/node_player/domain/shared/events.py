"""Player events and the ordered event bus that delivers them."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from node_player.domain.player.entities import QueueEntry
from node_player.domain.player.snapshot import FieldChange, PlayerSnapshot, diff_snapshots
from node_player.domain.shared.messages import LogTemplates
from node_player.domain.shared.types import NonEmptyStr, RoomId

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="DomainEvent")
EventHandler = Callable[[T], Awaitable[None] | None]


class DomainEvent(BaseModel):
    """Something that happened to a player, identified by a random id."""

    model_config = ConfigDict(frozen=True)

    event_id: NonEmptyStr = Field(default_factory=lambda: str(uuid4()))


class PlayerEvent(DomainEvent):
    room_id: RoomId


class PlayerCreated(PlayerEvent):
    snapshot: PlayerSnapshot


class PlayerDestroyed(PlayerEvent):
    snapshot: PlayerSnapshot


class StateUpdated(PlayerEvent):
    before: PlayerSnapshot
    after: PlayerSnapshot
    changes: dict[str, FieldChange] = Field(default_factory=dict)

    @classmethod
    def between(cls, before: PlayerSnapshot, after: PlayerSnapshot) -> StateUpdated:
        return cls(
            room_id=after.room_id,
            before=before,
            after=after,
            changes=diff_snapshots(before, after),
        )


class TrackError(PlayerEvent):
    track: QueueEntry
    error: str
    error_type: str = "Exception"

    @classmethod
    def from_exception(cls, room_id: str, track: QueueEntry, error: BaseException) -> TrackError:
        return cls(
            room_id=room_id,
            track=track,
            error=str(error) or error.__class__.__name__,
            error_type=error.__class__.__name__,
        )


class EventBus:
    """In-memory pub/sub bus that preserves emission order.

    Handlers subscribed to a base class also receive its subclasses, so
    subscribing to ``DomainEvent`` yields the whole feed. Synchronous handlers
    run inline during ``emit``; coroutine handlers are scheduled on the running
    loop in emission order. Handler exceptions are logged and never reach the
    emitter.
    """

    def __init__(self) -> None:
        self._handlers: dict[type[DomainEvent], list[EventHandler[Any]]] = defaultdict(list)
        self._tasks: set[asyncio.Task[None]] = set()

    def subscribe(self, event_type: type[T], handler: EventHandler[T]) -> None:
        self._handlers[event_type].append(handler)
        logger.debug(LogTemplates.EVENT_SUBSCRIBED, event_type.__name__)

    def unsubscribe(self, event_type: type[T], handler: EventHandler[T]) -> None:
        handlers = self._handlers[event_type]
        if handler in handlers:
            handlers.remove(handler)
            logger.debug(LogTemplates.EVENT_UNSUBSCRIBED, event_type.__name__)

    def _handlers_for(self, event_type: type[DomainEvent]) -> list[EventHandler[Any]]:
        handlers: list[EventHandler[Any]] = []
        for klass in event_type.__mro__:
            if isinstance(klass, type) and issubclass(klass, DomainEvent):
                handlers.extend(self._handlers.get(klass, ()))
        return handlers

    def emit(self, event: DomainEvent) -> None:
        event_name = type(event).__name__
        handlers = self._handlers_for(type(event))

        if not handlers:
            logger.debug(LogTemplates.EVENT_NO_HANDLERS, event_name)
            return

        logger.debug(LogTemplates.EVENT_DISPATCH, event_name, len(handlers))
        for handler in handlers:
            try:
                result = handler(event)
            except Exception:
                logger.exception(LogTemplates.EVENT_HANDLER_ERROR, event_name)
                continue
            if inspect.isawaitable(result):
                self._schedule(result, event_name)

    async def publish(self, event: DomainEvent) -> None:
        """Deliver an event and wait for every handler, one after another."""
        event_name = type(event).__name__
        for handler in self._handlers_for(type(event)):
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(LogTemplates.EVENT_HANDLER_ERROR, event_name)

    def _schedule(self, awaitable: Awaitable[None], event_name: str) -> None:
        async def run() -> None:
            try:
                await awaitable
            except Exception:
                logger.exception(LogTemplates.EVENT_HANDLER_ERROR, event_name)

        task = asyncio.get_running_loop().create_task(run())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait for scheduled coroutine handlers to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def clear(self) -> None:
        """Drop every subscription. Scheduled handlers keep running."""
        self._handlers.clear()
        logger.debug(LogTemplates.EVENT_HANDLERS_CLEARED)
