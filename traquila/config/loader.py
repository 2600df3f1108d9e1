"""Configuration loader for Traquila.

Loads configuration from TOML files. Environment variables can override any
configuration value.
"""

import logging
import os
from pathlib import Path
from typing import Any

from traquila.config.schema import TraquilaConfig

logger = logging.getLogger(__name__)

# Try to import tomllib (Python 3.11+) or fall back to tomli
try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[import-not-found,no-redef]

ENV_PREFIX = "TRAQUILA"

_INT_KEYS = (
    "port",
    "default_bottle_size_ml",
    "max_photos_per_bottle",
    "top_limit",
    "note_preview_length",
    "trend_min_rated",
    "keyword_limit",
)
_FLOAT_KEYS = ("low_fill_threshold",)
_BOOL_KEYS = ("debug", "log_to_file")
_LIST_KEYS = ("cors_origins",)


def get_config_search_paths() -> list[Path]:
    """Get the list of paths to search for configuration files.

    Returns paths in priority order (first found wins):
    1. ./config.toml (project root - for development)
    2. ~/.config/traquila/config.toml (user config)
    3. /etc/traquila/config.toml (system config)
    """
    return [
        Path.cwd() / "config.toml",
        Path.home() / ".config" / "traquila" / "config.toml",
        Path("/etc/traquila/config.toml"),
    ]


def find_config_file() -> Path | None:
    """Find the first existing config file from search paths."""
    for path in get_config_search_paths():
        if path.exists() and path.is_file():
            logger.debug("Found config file: %s", path)
            return path
    return None


def load_toml_file(path: Path) -> dict[str, Any]:
    """Load a TOML file and return its contents as a dictionary."""
    with open(path, "rb") as f:
        return tomllib.load(f)


def _convert(key: str, value: str) -> Any:
    if key in _INT_KEYS:
        return int(value)
    if key in _FLOAT_KEYS:
        return float(value)
    if key in _BOOL_KEYS:
        return value.lower() in ("true", "1", "yes")
    if key in _LIST_KEYS:
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


def apply_env_overrides(config_dict: dict[str, Any], prefix: str = ENV_PREFIX) -> None:
    """Apply environment variable overrides to configuration dictionary.

    Environment variables are mapped as follows:
    - TRAQUILA_SERVER_HOST -> config_dict["server"]["host"]
    - TRAQUILA_INSIGHTS_TOP_LIMIT -> config_dict["insights"]["top_limit"]
    - etc.

    Note: This modifies config_dict in place.
    """
    env_mappings = {
        # Server
        f"{prefix}_SERVER_HOST": ("server", "host"),
        f"{prefix}_SERVER_PORT": ("server", "port"),
        f"{prefix}_SERVER_DEBUG": ("server", "debug"),
        f"{prefix}_SERVER_CORS_ORIGINS": ("server", "cors_origins"),
        f"{prefix}_DEBUG": ("server", "debug"),  # Shorthand
        f"{prefix}_HOST": ("server", "host"),  # Shorthand
        f"{prefix}_PORT": ("server", "port"),  # Shorthand
        # Journal
        f"{prefix}_JOURNAL_DEFAULT_BOTTLE_SIZE_ML": ("journal", "default_bottle_size_ml"),
        f"{prefix}_JOURNAL_LOW_FILL_THRESHOLD": ("journal", "low_fill_threshold"),
        f"{prefix}_JOURNAL_MAX_PHOTOS_PER_BOTTLE": ("journal", "max_photos_per_bottle"),
        f"{prefix}_JOURNAL_VOLUME_UNIT": ("journal", "volume_unit"),
        # Insights
        f"{prefix}_INSIGHTS_DEFAULT_TIME_RANGE": ("insights", "default_time_range"),
        f"{prefix}_INSIGHTS_TOP_LIMIT": ("insights", "top_limit"),
        f"{prefix}_INSIGHTS_NOTE_PREVIEW_LENGTH": ("insights", "note_preview_length"),
        f"{prefix}_INSIGHTS_TREND_MIN_RATED": ("insights", "trend_min_rated"),
        f"{prefix}_INSIGHTS_KEYWORD_LIMIT": ("insights", "keyword_limit"),
        # Logging
        f"{prefix}_LOGGING_LEVEL": ("logging", "level"),
        f"{prefix}_LOGGING_LOG_DIR": ("logging", "log_dir"),
        f"{prefix}_LOGGING_LOG_TO_FILE": ("logging", "log_to_file"),
        f"{prefix}_LOG_LEVEL": ("logging", "level"),  # Shorthand
    }

    for env_var, path in env_mappings.items():
        value = os.environ.get(env_var)
        if value is None:
            continue

        section, key = path
        config_dict.setdefault(section, {})
        if key == "level":
            value = value.upper()
        elif key == "volume_unit":
            value = value.lower()
        config_dict[section][key] = _convert(key, value)


def load_config(config_file: Path | None = None) -> TraquilaConfig:
    """Load configuration from TOML file with environment variable overrides.

    Args:
        config_file: Optional path to config file. If not provided,
                     searches default locations.

    Returns:
        TraquilaConfig instance with all settings loaded.
    """
    config_dict: dict[str, Any] = {}

    if config_file is None:
        config_file = find_config_file()

    if config_file and config_file.exists():
        logger.info("Loading config from: %s", config_file)
        config_dict = load_toml_file(config_file)
    else:
        logger.info("No config file found, using defaults with env overrides")

    apply_env_overrides(config_dict)

    return TraquilaConfig(**config_dict)
