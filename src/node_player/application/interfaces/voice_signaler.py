"""Port interface for voice channel join/leave signalling."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.player.value_objects import VoiceStateFrame


class VoiceSignaler(ABC):
    """Sends voice state frames on behalf of a player.

    Sending is fire-and-forget: the call returns once the frame is handed
    off, without waiting for the gateway to acknowledge it.
    """

    @abstractmethod
    def send_voice_state(self, room_id: str, frame: VoiceStateFrame) -> None:
        ...
