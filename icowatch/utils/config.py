"""
Configuration management for the SVG -> ICO exporter.

Uses pydantic-settings to load configuration from ICOWATCH_* environment
variables. There is no configuration file; the defaults are the exporter's
fixed behaviour.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # File formats
    source_extension: str = ".svg"
    output_extension: str = ".ico"
    icon_sizes: str = "256,128,64,48,32,16"

    # Scheduling
    debounce_seconds: float = 0.5
    retry_delay_seconds: float = 0.3
    max_attempts: int = 5

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="ICOWATCH_",
        case_sensitive=False,
        extra="ignore"
    )

    def get_icon_sizes(self) -> list[int]:
        """Parse icon sizes into a descending list of ints."""
        sizes = {
            int(s.strip())
            for s in self.icon_sizes.split(',')
            if s.strip()
        }
        return sorted(sizes, reverse=True)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
