"""Registry of live players, keyed by room id."""

from __future__ import annotations

import logging
import random
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

import pydantic

from ...domain.player.value_objects import PlayerOptions
from ...domain.shared.events import PlayerCreated
from ...domain.shared.exceptions import ConfigurationError, ValidationError
from ...domain.shared.messages import ErrorMessages, LogTemplates
from .player import DEFAULT_DYNAMIC_REPEAT_INTERVAL_MS, Player

if TYPE_CHECKING:
    from ...domain.shared.events import EventBus
    from ..interfaces.remote_node import RemoteNode
    from ..interfaces.track_resolver import TrackResolver
    from ..interfaces.voice_signaler import VoiceSignaler

logger = logging.getLogger(__name__)

DEFAULT_VOLUME = 100


class PlayerRegistry:
    """Owns the players of one process and the nodes they can be bound to.

    Registries are plain objects passed to whoever needs them; nothing is
    stored at module level, so tests can build as many isolated registries as
    they like. ``get_or_create`` never creates a second player for a room id.
    """

    def __init__(
        self,
        *,
        voice_signaler: VoiceSignaler,
        track_resolver: TrackResolver,
        event_bus: EventBus,
        nodes: Mapping[str, RemoteNode] | None = None,
        default_volume: float = DEFAULT_VOLUME,
        self_mute: bool = False,
        self_deafen: bool = False,
        dynamic_repeat_interval_ms: int = DEFAULT_DYNAMIC_REPEAT_INTERVAL_MS,
        rng: random.Random | None = None,
    ) -> None:
        self._voice_signaler = voice_signaler
        self._track_resolver = track_resolver
        self._event_bus = event_bus
        self._nodes: dict[str, RemoteNode] = dict(nodes or {})
        self._players: dict[str, Player] = {}
        self._default_volume = default_volume
        self._voice_defaults = {"self_mute": self_mute, "self_deafen": self_deafen}
        self._dynamic_repeat_interval_ms = dynamic_repeat_interval_ms
        self._rng = rng

    def __contains__(self, room_id: object) -> bool:
        return room_id in self._players

    def __len__(self) -> int:
        return len(self._players)

    def __iter__(self) -> Iterator[Player]:
        return iter(list(self._players.values()))

    # === Nodes ===

    def register_node(self, node: RemoteNode) -> None:
        self._nodes[node.identifier] = node
        logger.info(LogTemplates.NODE_REGISTERED, node.identifier)

    def resolve_node(self, identifier: str | None = None) -> RemoteNode:
        """Return the named node, or the first registered one when no name is given."""
        if identifier is not None:
            node = self._nodes.get(identifier)
            if node is None:
                raise ConfigurationError(
                    ErrorMessages.UNKNOWN_NODE.format(identifier=identifier), setting="node"
                )
            return node

        node = next(iter(self._nodes.values()), None)
        if node is None:
            raise ConfigurationError(ErrorMessages.NO_AVAILABLE_NODES, setting="nodes")
        return node

    # === Players ===

    def get(self, room_id: str) -> Player | None:
        return self._players.get(room_id)

    def get_or_create(self, options: PlayerOptions | Mapping[str, Any]) -> Player:
        """Return the player for ``options.room_id``, creating it on first request.

        A new player emits ``PlayerCreated`` and then sends its initial volume
        to the node. Options passed for an existing room are ignored. Mute and
        deafen preferences missing from a mapping fall back to the registry defaults.

        Raises:
            ConfigurationError: If no node can be bound to a new player.
        """
        if not isinstance(options, PlayerOptions):
            try:
                options = PlayerOptions.model_validate({**self._voice_defaults, **options})
            except pydantic.ValidationError as e:
                raise ValidationError(
                    ErrorMessages.INVALID_PLAYER_OPTIONS.format(errors=e.error_count()), field="options"
                ) from e

        existing = self._players.get(options.room_id)
        if existing is not None:
            logger.debug(LogTemplates.PLAYER_REUSED, options.room_id)
            return existing

        node = self.resolve_node(options.node)
        player = Player(
            options=options,
            node=node,
            voice_signaler=self._voice_signaler,
            track_resolver=self._track_resolver,
            event_bus=self._event_bus,
            on_destroy=self.remove,
            dynamic_repeat_interval_ms=self._dynamic_repeat_interval_ms,
            rng=self._rng,
        )
        self._players[options.room_id] = player
        logger.info(LogTemplates.PLAYER_CREATED, options.room_id, node.identifier)

        self._event_bus.emit(PlayerCreated(room_id=player.room_id, snapshot=player.snapshot()))
        player.set_volume(self._default_volume if options.volume is None else options.volume)
        return player

    def remove(self, room_id: str) -> Player | None:
        """Forget a player without destroying it. Returns None if it was not registered."""
        player = self._players.pop(room_id, None)
        if player is not None:
            logger.debug(LogTemplates.PLAYER_REMOVED, room_id)
        return player

    async def destroy_all(self) -> int:
        """Destroy every player and wait for their node calls. Returns how many were destroyed."""
        players = list(self._players.values())
        for player in players:
            player.destroy()
        for player in players:
            await player.flush()
        return len(players)
