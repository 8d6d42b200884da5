"""
Unit Tests for Dependency Injection Container

Tests for:
- Lazy initialization and caching of components
- Bot instance management (set_bot, bot property, error when not set)
- Registry wiring from settings
- Shutdown
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from node_player.application.services.player_registry import PlayerRegistry
from node_player.config.container import Container, create_container
from node_player.config.settings import Settings
from node_player.domain.shared.events import EventBus
from node_player.infrastructure.discord.voice_signaler import DiscordVoiceSignaler
from node_player.infrastructure.node.rest_node import RestNode
from node_player.infrastructure.node.track_resolver import NodeTrackResolver


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        node={"identifier": "eu-1", "host": "node.local"},
        player={"default_volume": 60, "self_deafen": True},
    )


@pytest.fixture
def container(settings):
    return Container(settings=settings)


class TestContainerComponents:
    """Unit tests for lazily created components."""

    def test_event_bus_cached(self, container):
        assert isinstance(container.event_bus, EventBus)
        assert container.event_bus is container.event_bus

    def test_node_from_settings(self, container):
        node = container.node

        assert isinstance(node, RestNode)
        assert node.identifier == "eu-1"
        assert node.base_url == "http://node.local:2333"
        assert container.node is node

    def test_track_resolver_uses_node(self, container):
        resolver = container.track_resolver

        assert isinstance(resolver, NodeTrackResolver)
        assert resolver._node is container.node

    def test_bot_not_set(self, container):
        with pytest.raises(RuntimeError, match="Bot not initialized"):
            _ = container.bot

    def test_voice_signaler_uses_bot(self, container):
        bot = MagicMock()
        container.set_bot(bot)

        signaler = container.voice_signaler

        assert isinstance(signaler, DiscordVoiceSignaler)
        assert container.bot is bot

    def test_custom_voice_signaler(self, container):
        signaler = MagicMock()
        container.set_voice_signaler(signaler)

        assert container.voice_signaler is signaler


class TestContainerRegistry:
    """Unit tests for the player registry wiring."""

    @pytest.mark.asyncio
    async def test_registry_wiring(self, container):
        container.set_voice_signaler(MagicMock())

        registry = container.player_registry

        assert isinstance(registry, PlayerRegistry)
        assert registry.resolve_node("eu-1") is container.node
        assert container.player_registry is registry

    @pytest.mark.asyncio
    async def test_registry_applies_player_defaults(self, container):
        signaler = MagicMock()
        container.set_voice_signaler(signaler)
        container._node = MagicMock(identifier="eu-1")
        container._node.update_player = AsyncMock(return_value=True)

        player = container.player_registry.get_or_create({"room_id": "G1", "voice_channel_id": "C1"})
        await player.flush()
        player.connect()

        assert player.volume == 60
        assert signaler.send_voice_state.call_args.args[1].self_deafen is True

    @pytest.mark.asyncio
    async def test_shutdown(self, container):
        container.set_voice_signaler(MagicMock())
        node = MagicMock(identifier="eu-1")
        node.update_player = AsyncMock(return_value=True)
        node.destroy_player = AsyncMock(return_value=True)
        node.close = AsyncMock()
        container._node = node
        container.player_registry.get_or_create({"room_id": "G1"})

        await container.shutdown()

        assert len(container.player_registry) == 0
        node.destroy_player.assert_awaited_once_with("G1")
        node.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_shutdown_sends_leave_frames(self, container):
        guild = MagicMock()
        guild.change_voice_state = AsyncMock()
        bot = MagicMock()
        bot.get_guild = MagicMock(return_value=guild)
        container.set_bot(bot)
        node = MagicMock(identifier="eu-1")
        node.update_player = AsyncMock(return_value=True)
        node.destroy_player = AsyncMock(return_value=True)
        node.close = AsyncMock()
        container._node = node
        container.player_registry.get_or_create({"room_id": "123", "voice_channel_id": "456"})

        await container.shutdown()

        guild.change_voice_state.assert_awaited_once()
        assert guild.change_voice_state.await_args.kwargs["channel"] is None

    @pytest.mark.asyncio
    async def test_shutdown_before_use(self, container):
        await container.shutdown()


class TestCreateContainer:
    def test_with_settings(self, settings):
        container = create_container(settings, configure_logging=False)

        assert container.settings is settings

    def test_loads_settings(self, monkeypatch):
        from node_player.config.settings import clear_settings_cache

        monkeypatch.setenv("NODE__HOST", "from-env")
        clear_settings_cache()
        try:
            container = create_container(configure_logging=False)
        finally:
            clear_settings_cache()

        assert container.settings.node.host == "from-env"
