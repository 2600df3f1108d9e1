"""Traquila configuration module.

This module provides TOML-based configuration with environment variable overrides.

Configuration is loaded from the following locations (in order of priority):
1. Environment variables (highest priority)
2. ./config.toml (project root - for development)
3. ~/.config/traquila/config.toml (user config)
4. /etc/traquila/config.toml (system config)
"""

from traquila.config.schema import (
    InsightsConfig,
    JournalConfig,
    LoggingConfig,
    ServerConfig,
    TraquilaConfig,
)
from traquila.config.settings import get_settings, reset_settings, settings

__all__ = [
    "InsightsConfig",
    "JournalConfig",
    "LoggingConfig",
    "ServerConfig",
    "TraquilaConfig",
    "get_settings",
    "reset_settings",
    "settings",
]
