# ruff: noqa: N999
"""
Domain Layer

Contains pure player state logic:
- shared/: Cross-cutting types, exceptions, messages and events
- player/: Tracks, queue, player value objects and snapshots
"""

from node_player.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
