"""Point-in-time views of player state and the differences between them."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from node_player.domain.player.value_objects import ConnectionState, RepeatMode
from node_player.domain.shared.types import DurationMs, NonNegativeInt, RoomId


class PlayerSnapshot(BaseModel):
    """Frozen copy of the observable state of a player."""

    model_config = ConfigDict(frozen=True)

    room_id: RoomId
    state: ConnectionState
    voice_channel_id: str | None = None
    text_channel_id: str | None = None
    node: str | None = None
    playing: bool = False
    paused: bool = False
    position: DurationMs = 0
    volume: float = 0
    repeat_mode: RepeatMode = RepeatMode.NONE
    current_track: str | None = None
    previous_track: str | None = None
    queue_size: NonNegativeInt = 0

    @property
    def track_repeat(self) -> bool:
        return self.repeat_mode is RepeatMode.TRACK

    @property
    def queue_repeat(self) -> bool:
        return self.repeat_mode is RepeatMode.QUEUE

    @property
    def dynamic_repeat(self) -> bool:
        return self.repeat_mode is RepeatMode.DYNAMIC


class FieldChange(BaseModel):
    model_config = ConfigDict(frozen=True)

    old: Any
    new: Any


def diff_snapshots(before: PlayerSnapshot, after: PlayerSnapshot) -> dict[str, FieldChange]:
    """Return the fields whose values differ between two snapshots, keyed by field name."""
    changes: dict[str, FieldChange] = {}
    for name in PlayerSnapshot.model_fields:
        old, new = getattr(before, name), getattr(after, name)
        if old != new:
            changes[name] = FieldChange(old=old, new=new)
    return changes
