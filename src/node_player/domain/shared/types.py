"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used across the package is defined here once,
so models can simply annotate their fields::

    from node_player.domain.shared.types import RoomId, DurationMs

    class MyModel(BaseModel):
        room_id: RoomId
        duration: DurationMs
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

# ── Identifiers ─────────────────────────────────────────────────────

RoomId = Annotated[str, Field(min_length=1)]
"""Guild/room identifier, the unique key of a player."""

ChannelId = Annotated[str, Field(min_length=1)]
"""Voice or text channel identifier."""

NodeIdentifier = Annotated[str, Field(min_length=1)]
"""Name of a registered remote node."""

EncodedTrack = Annotated[str, Field(min_length=1)]
"""Opaque track identity produced by the remote node."""

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""


# ── Numeric constraints ─────────────────────────────────────────────

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer >= 0."""

DurationMs = Annotated[int, Field(ge=0)]
"""Track duration or playback offset in milliseconds."""

Volume = Annotated[float, Field(ge=0.0)]
"""Player volume, 100 being unity gain on the node."""

IntervalMs = Annotated[int, Field(gt=0, le=86_400_000)]
"""Timer interval in milliseconds: 1 ms … 24 hours."""

PortNumber = Annotated[int, Field(gt=0, lt=65536)]
"""TCP port."""

TimeoutSeconds = Annotated[float, Field(gt=0.0, le=120.0)]
"""HTTP request timeout in seconds."""
