"""Application configuration."""

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)


class ForecastConfig(BaseModel):
    """Forecast confidence tuning."""

    full_confidence_points: int = Field(default=8, ge=2)
    recency_horizon_days: int = Field(
        default_factory=lambda: int(os.environ.get("MIGTRACKER_RECENCY_HORIZON_DAYS", "60")),
        ge=1,
    )


class DashboardConfig(BaseModel):
    """Dashboard settings."""

    active_phase_limit: int = Field(
        default_factory=lambda: int(os.environ.get("MIGTRACKER_ACTIVE_PHASE_LIMIT", "100")),
        ge=1,
    )
    recent_activity_limit: int = Field(
        default_factory=lambda: int(os.environ.get("MIGTRACKER_RECENT_ACTIVITY_LIMIT", "10")),
        ge=1,
    )


class AppConfig(BaseModel):
    """Main application configuration."""

    forecast: ForecastConfig = Field(default_factory=ForecastConfig)
    dashboard: DashboardConfig = Field(default_factory=DashboardConfig)
    log_level: str = Field(
        default_factory=lambda: os.environ.get("MIGTRACKER_LOG_LEVEL", "INFO")
    )

    @classmethod
    def load(cls, config_path: Path | None = None) -> "AppConfig":
        """Load configuration from file or defaults."""
        if config_path is None:
            config_path = Path.home() / ".migtracker" / "config.toml"

        if config_path.exists():
            try:
                with open(config_path, "rb") as f:
                    data = tomllib.load(f)
                return cls.model_validate(data)
            except (OSError, tomllib.TOMLDecodeError, ValidationError) as e:
                logger.warning(f"Ignoring invalid config file {config_path}: {e}")

        return cls()


def configure_logging(config: AppConfig) -> None:
    """Apply the configured log level to the root logger."""
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Global config instance
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = AppConfig.load()
    return _config
