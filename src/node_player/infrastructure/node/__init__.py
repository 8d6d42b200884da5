"""Remote audio node adapters."""

from node_player.infrastructure.node.rest_node import RestNode
from node_player.infrastructure.node.track_resolver import NodeTrackResolver

__all__ = ["RestNode", "NodeTrackResolver"]
