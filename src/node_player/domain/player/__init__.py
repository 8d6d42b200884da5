"""
Player Bounded Context

Tracks, the per-room queue and the values exchanged with a remote node.
"""

from node_player.domain.player.entities import Queue, QueueEntry, Track, UnresolvedTrack
from node_player.domain.player.snapshot import FieldChange, PlayerSnapshot, diff_snapshots
from node_player.domain.player.value_objects import (
    ConnectionState,
    PlayerOptions,
    PlayerUpdate,
    PlayOptions,
    RepeatMode,
    VoiceStateFrame,
)

__all__ = [
    # Entities
    "Track",
    "UnresolvedTrack",
    "QueueEntry",
    "Queue",
    # Value Objects
    "ConnectionState",
    "RepeatMode",
    "PlayOptions",
    "PlayerUpdate",
    "PlayerOptions",
    "VoiceStateFrame",
    # Snapshots
    "PlayerSnapshot",
    "FieldChange",
    "diff_snapshots",
]
