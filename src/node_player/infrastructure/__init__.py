"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Node (REST client and search based track resolution)
- Discord (gateway voice state signalling)
"""

from node_player.infrastructure.discord.voice_signaler import DiscordVoiceSignaler
from node_player.infrastructure.node import NodeTrackResolver, RestNode

__all__ = [
    "DiscordVoiceSignaler",
    "NodeTrackResolver",
    "RestNode",
]
