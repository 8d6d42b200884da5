"""Player and Node Settings

Node connection details and player defaults, read from the environment or a
.env file. Nested sections use a double underscore (NODE__HOST=...). Section
models are frozen once loaded.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import IntervalMs, NodeIdentifier, PortNumber, TimeoutSeconds, Volume


class NodeSettings(BaseModel):
    """Connection details of the remote audio node."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    identifier: NodeIdentifier = Field(
        default="main", validation_alias=AliasChoices("identifier", "name")
    )
    host: str = Field(default="localhost", min_length=1)
    port: PortNumber = 2333
    password: SecretStr = Field(
        default=SecretStr("youshallnotpass"),
        validation_alias=AliasChoices("password", "auth", "authorization"),
    )
    secure: bool = False
    session_id: str = Field(default="", validation_alias=AliasChoices("session_id", "session"))
    request_timeout_s: TimeoutSeconds = Field(
        default=10.0,
        validation_alias=AliasChoices("request_timeout_s", "request_timeout", "timeout"),
    )
    search_prefix: str = Field(default="ytsearch", min_length=1)


class PlayerSettings(BaseModel):
    """Defaults applied to newly created players."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    default_volume: Volume = Field(
        default=100.0, validation_alias=AliasChoices("default_volume", "volume")
    )
    self_mute: bool = False
    self_deafen: bool = Field(
        default=False, validation_alias=AliasChoices("self_deafen", "self_deaf")
    )
    dynamic_repeat_interval_ms: IntervalMs = Field(
        default=3000,
        validation_alias=AliasChoices("dynamic_repeat_interval_ms", "dynamic_repeat_interval"),
    )


class Settings(BaseSettings):
    """Root settings object.

    Variables:
    - ENVIRONMENT, DEBUG, LOG_LEVEL
    - NODE__HOST, NODE__PORT, NODE__PASSWORD, NODE__SESSION_ID, ... (nested)
    - PLAYER__DEFAULT_VOLUME, PLAYER__DYNAMIC_REPEAT_INTERVAL_MS, ... (nested)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    node: NodeSettings = Field(default_factory=NodeSettings)
    player: PlayerSettings = Field(default_factory=PlayerSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels)
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once per process.

    Environment variables win over .env entries, which win over defaults.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Forget the cached settings so the next get_settings() reloads them."""
    get_settings.cache_clear()
