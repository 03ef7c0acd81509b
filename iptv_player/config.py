"""
Configuration management for the IPTV player.
Uses pydantic-settings for environment variable loading.
"""
import logging
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_name: str = "IPTV Player"
    debug: bool = False
    log_level: str = "INFO"

    # Playlist download
    request_timeout: float = 120.0
    connect_timeout: float = 30.0
    # Retried once through this proxy when the direct fetch fails; {url} is replaced
    fallback_proxy: Optional[str] = "https://api.allorigins.win/raw?url={url}"

    # Playback
    autoplay: bool = True
    default_volume: float = Field(default=1.0, ge=0.0, le=1.0)
    skip_seconds: float = 10.0

    # Browse screen
    page_size: int = 50

    model_config = SettingsConfigDict(env_prefix="IPTV_", env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(settings: Settings) -> None:
    """Configure root logging once at start-up."""
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
