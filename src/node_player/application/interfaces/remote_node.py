"""Port interface for the remote node that decodes and streams audio."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.player.value_objects import PlayerUpdate


class RemoteNode(ABC):
    """Interface for session-scoped commands sent to a remote audio node.

    Implementations report failure by returning ``False`` rather than raising,
    since most callers dispatch these calls without awaiting them.
    """

    @property
    @abstractmethod
    def identifier(self) -> str:
        """Name the node is registered under."""
        ...

    @abstractmethod
    async def update_player(
        self, room_id: str, update: PlayerUpdate, *, no_replace: bool = False
    ) -> bool:
        """Apply a partial playback update for a room."""
        ...

    @abstractmethod
    async def destroy_player(self, room_id: str) -> bool:
        """Discard the node-side player for a room."""
        ...
