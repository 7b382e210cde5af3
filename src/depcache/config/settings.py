"""depcache settings models.

Settings are plain pydantic models grouped under a ``Settings`` facade
that also reads ``DEPCACHE_`` environment variables, e.g.
``DEPCACHE_CACHE__COALESCE_MISSES=true``.
"""

from __future__ import annotations

from pathlib import Path

import toml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from depcache.shared.constants import Cache, Config, Logging


class CacheSettings(BaseModel):
    """Cache behavior configuration."""

    short_circuit_reads: bool = Field(
        default=Cache.SHORT_CIRCUIT_READS,
        description="Stop probing storage tiers after the first hit",
    )
    coalesce_misses: bool = Field(
        default=Cache.COALESCE_MISSES,
        description="Share one in-flight computation between concurrent calls with the same key",
    )
    key_prefix: str = Field(
        default=Cache.KEY_PREFIX,
        description="Prefix prepended to every cache key",
    )


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: str = Field(default=Logging.DEFAULT_LEVEL, description="Log level name")
    file: str | None = Field(default=None, description="Optional JSON-lines log file")
    use_rich_console: bool = Field(
        default=True,
        description="Render console logs with Rich instead of JSON",
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in Logging.VALID_LEVELS:
            msg = f"level must be one of {', '.join(Logging.VALID_LEVELS)}, got {v!r}"
            raise ValueError(msg)
        return level


class Settings(BaseSettings):
    """Top-level settings facade."""

    model_config = SettingsConfigDict(
        env_prefix=Config.ENV_PREFIX,
        env_nested_delimiter=Config.ENV_NESTED_DELIMITER,
        env_ignore_empty=True,
        extra="ignore",
    )

    cache: CacheSettings = Field(default_factory=CacheSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_toml_file(cls, file_path: str | Path) -> Settings:
        """Load settings from a TOML file.

        Values from the file take precedence over environment variables;
        sections missing from the file still come from the environment.
        """
        file_path = Path(file_path)
        if not file_path.exists():
            msg = f"Configuration file not found: {file_path}"
            raise FileNotFoundError(msg)

        raw_config = toml.load(file_path)
        return cls(**raw_config)


__all__ = ["CacheSettings", "LoggingSettings", "Settings"]
