"""Global settings instance for Traquila.

This module provides a settings object wrapping the structured configuration
loaded from config.toml and environment variable overrides, with a flat
property interface for the values the application reads most.
"""

import logging
from pathlib import Path

from traquila.config.loader import load_config
from traquila.config.schema import TraquilaConfig
from traquila.models import VolumeUnit
from traquila.schemas.insights import ExperienceTimeRange

logger = logging.getLogger(__name__)


class Settings:
    """Unified settings object over a TraquilaConfig."""

    def __init__(self, config: TraquilaConfig | None = None):
        """Initialize settings.

        Args:
            config: Optional TraquilaConfig instance. If not provided, loads from file.
        """
        self._config = config or load_config()

    @property
    def config(self) -> TraquilaConfig:
        return self._config

    @property
    def app_name(self) -> str:
        return self._config.app_name

    @property
    def debug(self) -> bool:
        return self._config.server.debug

    # Server
    @property
    def host(self) -> str:
        return self._config.server.host

    @property
    def port(self) -> int:
        return self._config.server.port

    @property
    def cors_origins(self) -> list[str]:
        return self._config.server.cors_origins

    # Journal
    @property
    def default_bottle_size_ml(self) -> int:
        return self._config.journal.default_bottle_size_ml

    @property
    def low_fill_threshold(self) -> float:
        return self._config.journal.low_fill_threshold

    @property
    def max_photos_per_bottle(self) -> int:
        return self._config.journal.max_photos_per_bottle

    @property
    def volume_unit(self) -> VolumeUnit:
        return self._config.journal.volume_unit

    # Insights
    @property
    def default_time_range(self) -> ExperienceTimeRange:
        return self._config.insights.default_time_range

    @property
    def top_limit(self) -> int:
        return self._config.insights.top_limit

    @property
    def note_preview_length(self) -> int:
        return self._config.insights.note_preview_length

    @property
    def trend_min_rated(self) -> int:
        return self._config.insights.trend_min_rated

    @property
    def keyword_limit(self) -> int:
        return self._config.insights.keyword_limit

    # Logging
    @property
    def log_level(self) -> str:
        return self._config.logging.level

    @property
    def log_file(self) -> Path:
        return self._config.logging.log_file

    @property
    def log_to_file(self) -> bool:
        return self._config.logging.log_to_file

    def __repr__(self) -> str:
        return f"<Settings(app_name={self.app_name}, debug={self.debug})>"


# Global settings instance - lazily initialized
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance.

    The settings are loaded once and cached for subsequent calls.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the global settings instance.

    This is primarily useful for testing to reload configuration.
    """
    global _settings
    _settings = None


class _SettingsProxy:
    """Proxy object that lazily loads settings on first access."""

    def __getattr__(self, name: str):
        return getattr(get_settings(), name)

    def __repr__(self) -> str:
        return repr(get_settings())


settings = _SettingsProxy()
