"""Pydantic models for Traquila configuration.

These models define the structure of config.toml.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from traquila.models import VolumeUnit
from traquila.schemas.insights import ExperienceTimeRange


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    # CORS configuration - empty list means same-origin only
    cors_origins: list[str] = []


class JournalConfig(BaseModel):
    """Cellar and pour-entry settings."""

    default_bottle_size_ml: int = Field(default=750, gt=0)
    low_fill_threshold: float = Field(default=25.0, ge=0, le=100)
    max_photos_per_bottle: int = Field(default=3, ge=0)
    volume_unit: VolumeUnit = VolumeUnit.OZ


class InsightsConfig(BaseModel):
    """Dashboard pipeline settings."""

    default_time_range: ExperienceTimeRange = ExperienceTimeRange.D90
    top_limit: int = Field(default=10, ge=1)
    note_preview_length: int = Field(default=80, ge=1)
    trend_min_rated: int = Field(default=3, ge=1)
    keyword_limit: int = Field(default=3, ge=0)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_dir: Path = Field(default_factory=lambda: Path("data/logs"))
    log_to_file: bool = False

    @property
    def log_file(self) -> Path:
        """Get the log file path."""
        return self.log_dir / "traquila.log"


class TraquilaConfig(BaseModel):
    """Main Traquila configuration loaded from config.toml."""

    app_name: str = "Traquila"
    server: ServerConfig = Field(default_factory=ServerConfig)
    journal: JournalConfig = Field(default_factory=JournalConfig)
    insights: InsightsConfig = Field(default_factory=InsightsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
