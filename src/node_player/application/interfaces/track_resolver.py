"""Port interface for validating tracks and resolving placeholders."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ...domain.player.entities import Track, UnresolvedTrack


class TrackResolver(ABC):
    """Decides what counts as a playable track and resolves placeholders."""

    def validate(self, candidate: object) -> bool:
        """Return True if ``candidate`` is a track or an unresolved placeholder."""
        return isinstance(candidate, Track | UnresolvedTrack)

    def is_unresolved(self, track: object) -> bool:
        return isinstance(track, UnresolvedTrack)

    @abstractmethod
    async def resolve(self, track: UnresolvedTrack) -> Track:
        """Find the playable track closest to ``track``.

        Raises:
            TrackResolutionError: If no match exists.
        """
        ...
