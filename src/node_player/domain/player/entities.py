"""Core domain entities for the player bounded context."""

from __future__ import annotations

import random
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from node_player.domain.shared.messages import ErrorMessages
from node_player.domain.shared.types import DurationMs, EncodedTrack, NonEmptyStr


class Track(BaseModel):
    """Immutable descriptor of a track the remote node can play."""

    model_config = ConfigDict(frozen=True)

    encoded: EncodedTrack
    identifier: NonEmptyStr
    title: str = ""
    author: str = ""
    duration: DurationMs = 0
    uri: str | None = None
    is_seekable: bool = True
    is_stream: bool = False
    artwork_url: str | None = None
    source_name: str | None = None

    # Opaque reference to whoever queued the track
    requester: Any = None

    @classmethod
    def from_node_payload(cls, payload: Mapping[str, Any], requester: Any = None) -> Track:
        """Build a track from the node's ``{"encoded": ..., "info": {...}}`` JSON."""
        info = payload.get("info", {})
        return cls(
            encoded=payload["encoded"],
            identifier=info.get("identifier") or payload["encoded"],
            title=info.get("title", ""),
            author=info.get("author", ""),
            duration=info.get("length", 0),
            uri=info.get("uri"),
            is_seekable=info.get("isSeekable", True),
            is_stream=info.get("isStream", False),
            artwork_url=info.get("artworkUrl"),
            source_name=info.get("sourceName"),
            requester=requester,
        )

    @property
    def duration_formatted(self) -> str:
        """Format duration as MM:SS or HH:MM:SS."""
        if self.is_stream:
            return "LIVE"

        hours, remainder = divmod(self.duration // 1000, 3600)
        minutes, seconds = divmod(remainder, 60)

        if hours > 0:
            return f"{hours}:{minutes:02d}:{seconds:02d}"
        return f"{minutes}:{seconds:02d}"


class UnresolvedTrack(BaseModel):
    """Placeholder that must be resolved to a Track before it can be played."""

    model_config = ConfigDict(frozen=True)

    title: NonEmptyStr
    author: str | None = None
    duration: DurationMs | None = None
    uri: str | None = None
    requester: Any = None

    @property
    def search_query(self) -> str:
        return " - ".join(part for part in (self.author, self.title) if part)


QueueEntry = Track | UnresolvedTrack


class Queue(BaseModel):
    """Ordered pending tracks plus the current and previous slots.

    ``size`` counts pending entries only; ``total_size`` also counts the
    current track when there is one.
    """

    model_config = ConfigDict(validate_assignment=True)

    current: QueueEntry | None = None
    previous: QueueEntry | None = None
    pending: list[QueueEntry] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.pending)

    def __iter__(self) -> Iterator[QueueEntry]:  # type: ignore[override]
        return iter(self.pending)

    def __getitem__(self, index: int) -> QueueEntry:
        return self.pending[index]

    @property
    def size(self) -> int:
        return len(self.pending)

    @property
    def total_size(self) -> int:
        return self.size + (1 if self.current is not None else 0)

    @property
    def duration(self) -> int:
        """Sum of known durations, current track included, in milliseconds."""
        entries = [self.current, *self.pending] if self.current is not None else self.pending
        return sum(entry.duration or 0 for entry in entries)

    def add(self, tracks: QueueEntry | Iterable[QueueEntry], offset: int | None = None) -> None:
        """Append tracks, or insert them at ``offset`` within the pending list.

        When nothing is current yet, the first added track becomes current.
        """
        batch = [tracks] if isinstance(tracks, Track | UnresolvedTrack) else list(tracks)
        if not batch:
            return

        if offset is not None and not 0 <= offset <= len(self.pending):
            raise IndexError(ErrorMessages.INVALID_QUEUE_OFFSET.format(size=len(self.pending)))

        if self.current is None:
            self.current = batch.pop(0)

        if offset is None:
            self.pending.extend(batch)
        else:
            self.pending[offset:offset] = batch

    def insert_front(self, track: QueueEntry) -> None:
        self.pending.insert(0, track)

    def remove_at(self, index: int) -> QueueEntry:
        if not 0 <= index < len(self.pending):
            raise IndexError(ErrorMessages.INVALID_QUEUE_INDEX.format(index=index))
        return self.pending.pop(index)

    def remove_range(self, start: int, count: int) -> list[QueueEntry]:
        """Remove ``count`` entries starting at ``start`` and return them."""
        if count <= 0:
            return []
        removed = self.pending[start : start + count]
        del self.pending[start : start + count]
        return removed

    def clear(self) -> int:
        """Clear pending entries (current and previous are kept) and return the count removed."""
        count = len(self.pending)
        self.pending.clear()
        return count

    def dequeue(self) -> QueueEntry | None:
        return self.pending.pop(0) if self.pending else None

    def peek(self) -> QueueEntry | None:
        return self.pending[0] if self.pending else None

    def shuffle(self, rng: random.Random | None = None) -> None:
        (rng or random).shuffle(self.pending)
