"""Dependency Injection Container

Builds the node client, resolver, event bus, voice signaler and player
registry from settings. Components are created on first access and cached.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    import discord

    from ..application.interfaces.voice_signaler import VoiceSignaler
    from ..application.services.player_registry import PlayerRegistry
    from ..domain.shared.events import EventBus
    from ..infrastructure.node.rest_node import RestNode
    from ..infrastructure.node.track_resolver import NodeTrackResolver
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    The voice signaler needs a Discord client, so ``set_bot`` (or
    ``set_voice_signaler``) must be called before the registry is built.
    """

    settings: Settings
    _bot: discord.Client | None = None

    _event_bus: EventBus | None = None
    _node: RestNode | None = None
    _track_resolver: NodeTrackResolver | None = None
    _voice_signaler: VoiceSignaler | None = None
    _player_registry: PlayerRegistry | None = None

    def set_bot(self, bot: discord.Client) -> None:
        """Set the Discord client used for voice signalling."""
        self._bot = bot

    def set_voice_signaler(self, signaler: VoiceSignaler) -> None:
        """Use a custom voice signaler instead of the Discord one."""
        self._voice_signaler = signaler

    @property
    def bot(self) -> discord.Client:
        if self._bot is None:
            raise RuntimeError(ErrorMessages.BOT_NOT_INITIALIZED)
        return self._bot

    @property
    def event_bus(self) -> EventBus:
        if self._event_bus is None:
            from ..domain.shared.events import EventBus

            self._event_bus = EventBus()
        return self._event_bus

    @property
    def node(self) -> RestNode:
        if self._node is None:
            from ..infrastructure.node.rest_node import RestNode

            self._node = RestNode(self.settings.node)
        return self._node

    @property
    def track_resolver(self) -> NodeTrackResolver:
        if self._track_resolver is None:
            from ..infrastructure.node.track_resolver import NodeTrackResolver

            self._track_resolver = NodeTrackResolver(
                self.node, search_prefix=self.settings.node.search_prefix
            )
        return self._track_resolver

    @property
    def voice_signaler(self) -> VoiceSignaler:
        if self._voice_signaler is None:
            from ..infrastructure.discord.voice_signaler import DiscordVoiceSignaler

            self._voice_signaler = DiscordVoiceSignaler(self.bot)
        return self._voice_signaler

    @property
    def player_registry(self) -> PlayerRegistry:
        if self._player_registry is None:
            from ..application.services.player_registry import PlayerRegistry

            self._player_registry = PlayerRegistry(
                voice_signaler=self.voice_signaler,
                track_resolver=self.track_resolver,
                event_bus=self.event_bus,
                nodes={self.node.identifier: self.node},
                default_volume=self.settings.player.default_volume,
                self_mute=self.settings.player.self_mute,
                self_deafen=self.settings.player.self_deafen,
                dynamic_repeat_interval_ms=self.settings.player.dynamic_repeat_interval_ms,
            )
        return self._player_registry

    async def shutdown(self) -> None:
        """Destroy all players, flush pending events and close the node client."""
        if self._player_registry is not None:
            await self._player_registry.destroy_all()
        if self._voice_signaler is not None:
            from ..infrastructure.discord.voice_signaler import DiscordVoiceSignaler

            if isinstance(self._voice_signaler, DiscordVoiceSignaler):
                await self._voice_signaler.wait_sent()
        if self._event_bus is not None:
            await self._event_bus.drain()
        if self._node is not None:
            await self._node.close()
        logger.info(LogTemplates.CONTAINER_SHUTDOWN)


def create_container(settings: Settings | None = None, *, configure_logging: bool = True) -> Container:
    """Create a container, loading settings from the environment when none are given."""
    if settings is None:
        from .settings import get_settings

        settings = get_settings()

    if configure_logging:
        from ..utils.logging import setup_logging

        setup_logging(settings.log_level)

    container = Container(settings=settings)
    logger.info(LogTemplates.CONTAINER_CREATED, settings.environment)
    return container
