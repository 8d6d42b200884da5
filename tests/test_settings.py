"""
Unit Tests for Application Settings Configuration

Tests for:
- Default values for node and player settings
- Aliases and validation bounds
- Loading nested settings from environment variables
- Log level validation
- Settings caching and clearing
"""

import pytest
from pydantic import SecretStr, ValidationError

from node_player.config.settings import (
    NodeSettings,
    PlayerSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

# =============================================================================
# NodeSettings Tests
# =============================================================================


class TestNodeSettings:
    """Unit tests for NodeSettings configuration."""

    def test_create_with_defaults(self):
        node = NodeSettings()

        assert node.identifier == "main"
        assert node.host == "localhost"
        assert node.port == 2333
        assert node.password.get_secret_value() == "youshallnotpass"
        assert node.secure is False
        assert node.session_id == ""
        assert node.request_timeout_s == 10.0
        assert node.search_prefix == "ytsearch"

    def test_password_is_secret(self):
        node = NodeSettings(password="hunter2")

        assert isinstance(node.password, SecretStr)
        assert "hunter2" not in repr(node)

    def test_aliases(self):
        node = NodeSettings(name="eu-1", auth="pw", session="abc", timeout=3)

        assert node.identifier == "eu-1"
        assert node.password.get_secret_value() == "pw"
        assert node.session_id == "abc"
        assert node.request_timeout_s == 3

    @pytest.mark.parametrize("port", [0, 65536])
    def test_port_bounds(self, port):
        with pytest.raises(ValidationError):
            NodeSettings(port=port)

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            NodeSettings(request_timeout_s=0)

    def test_immutability(self):
        node = NodeSettings()

        with pytest.raises(ValidationError):
            node.host = "other"


# =============================================================================
# PlayerSettings Tests
# =============================================================================


class TestPlayerSettings:
    """Unit tests for PlayerSettings configuration."""

    def test_create_with_defaults(self):
        player = PlayerSettings()

        assert player.default_volume == 100.0
        assert player.self_mute is False
        assert player.self_deafen is False
        assert player.dynamic_repeat_interval_ms == 3000

    def test_volume_alias(self):
        assert PlayerSettings(volume=40).default_volume == 40

    def test_self_deaf_alias(self):
        assert PlayerSettings(self_deaf=True).self_deafen is True

    def test_negative_volume_rejected(self):
        with pytest.raises(ValidationError):
            PlayerSettings(default_volume=-1)

    def test_interval_must_be_positive(self):
        with pytest.raises(ValidationError):
            PlayerSettings(dynamic_repeat_interval_ms=0)


# =============================================================================
# Settings Tests
# =============================================================================


class TestSettings:
    """Unit tests for the root Settings object."""

    def test_create_with_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.environment == "development"
        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert isinstance(settings.node, NodeSettings)
        assert isinstance(settings.player, PlayerSettings)

    def test_nested_env_vars(self, monkeypatch):
        monkeypatch.setenv("NODE__HOST", "lava.internal")
        monkeypatch.setenv("NODE__PORT", "8080")
        monkeypatch.setenv("NODE__SECURE", "true")
        monkeypatch.setenv("PLAYER__DYNAMIC_REPEAT_INTERVAL_MS", "1500")

        settings = Settings(_env_file=None)

        assert settings.node.host == "lava.internal"
        assert settings.node.port == 8080
        assert settings.node.secure is True
        assert settings.player.dynamic_repeat_interval_ms == 1500

    def test_log_level_uppercased(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError, match="Invalid log level"):
            Settings(_env_file=None, log_level="LOUD")

    def test_invalid_environment(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, environment="staging")


class TestSettingsCache:
    """Unit tests for get_settings caching."""

    def test_cached_instance(self):
        clear_settings_cache()
        try:
            assert get_settings() is get_settings()
        finally:
            clear_settings_cache()

    def test_clear_cache(self, monkeypatch):
        clear_settings_cache()
        try:
            first = get_settings()
            monkeypatch.setenv("LOG_LEVEL", "ERROR")
            clear_settings_cache()

            second = get_settings()

            assert second is not first
            assert second.log_level == "ERROR"
        finally:
            clear_settings_cache()
