"""Resolves placeholder tracks by searching on a remote node."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from node_player.application.interfaces.track_resolver import TrackResolver
from node_player.domain.shared.exceptions import TrackResolutionError
from node_player.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from node_player.domain.player.entities import Track, UnresolvedTrack

    from .rest_node import RestNode

logger = logging.getLogger(__name__)

# How far a candidate's duration may be from the placeholder's to count as the same recording
DURATION_TOLERANCE_MS = 1500


class NodeTrackResolver(TrackResolver):
    """Picks the search result closest to an unresolved track.

    Preference order: same author (or the author's auto-generated "Topic"
    channel) or same title, then a duration within ``DURATION_TOLERANCE_MS``,
    then the first result.
    """

    def __init__(self, node: RestNode, search_prefix: str = "ytsearch") -> None:
        self._node = node
        self._search_prefix = search_prefix

    async def resolve(self, track: UnresolvedTrack) -> Track:
        query = track.search_query
        candidates = await self._node.load_tracks(f"{self._search_prefix}:{query}")
        if not candidates:
            raise TrackResolutionError(query)

        match = self._closest(track, candidates)
        logger.debug(LogTemplates.TRACK_RESOLVED, query, match.identifier)
        return match.model_copy(update={"requester": track.requester})

    @staticmethod
    def _closest(track: UnresolvedTrack, candidates: list[Track]) -> Track:
        if track.author:
            names = {track.author.casefold(), f"{track.author} - Topic".casefold()}
            title = track.title.casefold()
            for candidate in candidates:
                if candidate.author.casefold() in names or candidate.title.casefold() == title:
                    return candidate

        if track.duration is not None:
            for candidate in candidates:
                if abs(candidate.duration - track.duration) <= DURATION_TOLERANCE_MS:
                    return candidate

        return candidates[0]
