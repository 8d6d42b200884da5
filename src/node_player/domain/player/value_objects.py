"""Immutable value objects for the player bounded context."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

from node_player.domain.shared.types import (
    ChannelId,
    DurationMs,
    EncodedTrack,
    NodeIdentifier,
    NonNegativeInt,
    RoomId,
    Volume,
)


class ConnectionState(StrEnum):
    """Voice connection state of a player.

    Transitions:
    - DISCONNECTED -> CONNECTING -> CONNECTED (connect)
    - CONNECTED -> DISCONNECTING -> DISCONNECTED (disconnect)
    - Any -> DESTROYING (destroy, terminal)
    """

    DISCONNECTED = "DISCONNECTED"
    CONNECTING = "CONNECTING"
    CONNECTED = "CONNECTED"
    DISCONNECTING = "DISCONNECTING"
    DESTROYING = "DESTROYING"

    @property
    def is_terminal(self) -> bool:
        return self is ConnectionState.DESTROYING


class RepeatMode(StrEnum):
    """Mutually exclusive repeat modes."""

    NONE = "none"
    TRACK = "track"  # Repeat the current track
    QUEUE = "queue"  # Repeat the whole queue
    DYNAMIC = "dynamic"  # Repeat the queue and reshuffle it on a timer


_PLAY_OPTION_KEYS = frozenset({"start_time", "end_time", "no_replace"})


class PlayOptions(BaseModel):
    """Optional parameters for starting a track on the node."""

    model_config = ConfigDict(frozen=True)

    start_time: DurationMs | None = None
    end_time: DurationMs | None = None
    no_replace: bool = False

    @model_validator(mode="after")
    def _check_window(self) -> PlayOptions:
        if (
            self.start_time is not None
            and self.end_time is not None
            and self.end_time < self.start_time
        ):
            raise ValueError("end_time must not be before start_time")
        return self

    @classmethod
    def extract(cls, candidate: object) -> PlayOptions | None:
        """Best-effort read of play options from an argument shaped like them.

        Accepts a PlayOptions instance or a mapping that carries every one of
        ``start_time``, ``end_time`` and ``no_replace``.
        """
        if isinstance(candidate, PlayOptions):
            return candidate
        if isinstance(candidate, Mapping) and _PLAY_OPTION_KEYS <= set(candidate):
            return cls.model_validate({key: candidate[key] for key in _PLAY_OPTION_KEYS})
        return None


class PlayerUpdate(BaseModel):
    """Payload of an update-player call.

    Only explicitly set fields are serialized, so ``encoded_track=None``
    (stop the current track) differs from leaving the track untouched.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    encoded_track: EncodedTrack | None = None
    position: DurationMs | None = None
    end_time: DurationMs | None = None
    paused: bool | None = None
    volume: NonNegativeInt | None = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)


class VoiceStateFrame(BaseModel):
    """Voice state sent to the gateway to join (channel set) or leave (channel None)."""

    model_config = ConfigDict(frozen=True)

    channel_id: ChannelId | None = None
    self_mute: bool = False
    self_deafen: bool = False

    @property
    def is_leave(self) -> bool:
        return self.channel_id is None


class PlayerOptions(BaseModel):
    """Options a player is created with."""

    model_config = ConfigDict(frozen=True)

    room_id: RoomId
    voice_channel_id: ChannelId | None = None
    text_channel_id: ChannelId | None = None
    node: NodeIdentifier | None = None
    volume: Volume | None = None
    self_mute: bool = False
    self_deafen: bool = False
