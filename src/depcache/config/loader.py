"""Settings loading.

Resolution order:
1. An explicit TOML path passed by the caller
2. ``depcache.toml`` in the current working directory
3. Environment variables only

Values read from a TOML file take precedence over environment variables.
"""

from __future__ import annotations

import logging
from pathlib import Path

import toml
from pydantic import ValidationError

from depcache.config.settings import Settings
from depcache.shared.constants import Config
from depcache.shared.errors import ErrorCode, create_config_error
from depcache.shared.logging import log_operation_error

logger = logging.getLogger(__name__)


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from a TOML configuration file or the environment.

    Args:
        config_path: Optional path to a TOML configuration file.

    Returns:
        Validated Settings instance.

    Raises:
        ApplicationError: CONFIG_MISSING if ``config_path`` does not exist,
            CONFIG_INVALID if the file cannot be parsed or fails validation.
    """
    if config_path is None:
        default_path = Path(Config.DEFAULT_FILENAME)
        if not default_path.exists():
            return _build(None)
        config_path = default_path

    return _build(Path(config_path))


def _build(config_path: Path | None) -> Settings:
    source = str(config_path) if config_path is not None else None
    try:
        if config_path is None:
            return Settings()
        settings = Settings.from_toml_file(config_path)
    except FileNotFoundError as e:
        error = create_config_error(
            f"Configuration file not found: {source}",
            code=ErrorCode.CONFIG_MISSING,
            config_path=source,
            operation="load_settings",
            original_error=e,
        )
        log_operation_error(logger, error)
        raise error from e
    except (toml.TomlDecodeError, ValidationError) as e:
        error = create_config_error(
            f"Invalid configuration: {e}",
            code=ErrorCode.CONFIG_INVALID,
            config_path=source,
            operation="load_settings",
            original_error=e,
        )
        log_operation_error(logger, error)
        raise error from e

    logger.debug("Loaded settings from %s", source)
    return settings


__all__ = ["load_settings"]
