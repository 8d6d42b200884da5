"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from node_player.application.interfaces.remote_node import RemoteNode
from node_player.application.interfaces.track_resolver import TrackResolver
from node_player.application.interfaces.voice_signaler import VoiceSignaler

__all__ = [
    "RemoteNode",
    "TrackResolver",
    "VoiceSignaler",
]
