"""Core configuration - centralized config for the trustkeep package.

All environment-based configuration should flow through this module.
This provides a single source of truth and consistent defaults.

Usage:
    from trustkeep.core.config import get_config
    config = get_config()

    # Access settings
    cache_size = config.cache_size
    trusts_dir = config.trusts_dir
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATA_DIR = Path.home() / ".trustkeep"


class CoreSettings(BaseSettings):
    """Core configuration settings for TrustKeep.

    Settings can be configured via TRUSTKEEP_ prefixed environment variables
    or a .env file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # ==========================================================================
    # STORAGE SETTINGS
    # ==========================================================================

    data_dir: Path = Field(
        default=DEFAULT_DATA_DIR,
        description="Root directory for trust files and locale overrides",
        validation_alias="TRUSTKEEP_DATA_DIR",
    )
    directory_path: str | None = Field(
        default=None,
        description="Path to the principal directory JSON file",
        validation_alias="TRUSTKEEP_DIRECTORY",
    )

    # ==========================================================================
    # CACHE SETTINGS
    # ==========================================================================

    cache_size: int = Field(
        default=1000,
        gt=0,
        description="Maximum resident owners in each trust cache",
        validation_alias="TRUSTKEEP_CACHE_SIZE",
    )

    # ==========================================================================
    # COMMAND SETTINGS
    # ==========================================================================

    confirm_action: bool = Field(
        default=True,
        description="Require confirm/cancel before trustees are added",
        validation_alias="TRUSTKEEP_CONFIRM_ACTION",
    )
    locale: str = Field(
        default="en",
        description="Locale code for user-facing messages",
        validation_alias="TRUSTKEEP_LOCALE",
    )

    # ==========================================================================
    # LOGGING SETTINGS
    # ==========================================================================

    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
        validation_alias="TRUSTKEEP_LOG_LEVEL",
    )
    log_format: str = Field(
        default="",
        description="Log format: 'json', 'text', or '' (auto-detect)",
        validation_alias="TRUSTKEEP_LOG_FORMAT",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (optional)",
        validation_alias="TRUSTKEEP_LOG_FILE",
    )

    # ==========================================================================
    # COMPUTED PROPERTIES
    # ==========================================================================

    @property
    def trusts_dir(self) -> Path:
        """Directory holding one trust file per owner."""
        return self.data_dir / "trusts"


# ==========================================================================
# GLOBAL CONFIG INSTANCE (lazy loaded)
# ==========================================================================

_config: CoreSettings | None = None


def get_config() -> CoreSettings:
    """Get the global configuration instance.

    Returns:
        The singleton CoreSettings instance.
    """
    global _config
    if _config is None:
        _config = CoreSettings()
    return _config


def clear_config_cache() -> None:
    """Clear the config cache. Useful for testing."""
    global _config
    _config = None
