"""
Shared Domain Kernel

Contains exceptions and events shared across the player domain.
"""

from node_player.domain.shared.exceptions import (
    ConfigurationError,
    DomainError,
    NodeRequestError,
    RangeError,
    StateError,
    TrackResolutionError,
    ValidationError,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "ConfigurationError",
    "RangeError",
    "StateError",
    "NodeRequestError",
    "TrackResolutionError",
]
