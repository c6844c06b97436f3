"""Runtime settings for the slot marketplace.

Values come from environment variables prefixed with ``SLOTMARKET_``. The
defaults keep a local SQLite database and a ``./var/media`` tree so the
service starts without any external infrastructure.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_media_root() -> Path:
    return Path("./var/media")


class Settings(BaseSettings):
    """Pydantic settings container for the service layer."""

    model_config = SettingsConfigDict(env_prefix="SLOTMARKET_")

    database_url: str = Field(
        default="sqlite:///slotmarket.db",
        description="SQLAlchemy URL of the database holding the slot records.",
    )
    media_root: Path = Field(
        default_factory=_default_media_root,
        description="Filesystem root for product images (product-images/slot-N).",
    )
    default_duration_days: int = Field(
        default=7,
        ge=1,
        le=90,
        description="Listing duration applied by approve when none is given.",
    )
    stats_cache_ttl_seconds: int = Field(
        default=30,
        ge=0,
        description="TTL for the slot counters cache; 0 disables caching.",
    )
    expiry_sweep_interval_seconds: int = Field(
        default=300,
        ge=1,
        description="Interval between sweeps retiring listings past end_time.",
    )
    default_page_size: int = Field(default=25, ge=1, le=100)
    max_page_size: int = Field(default=100, ge=1)

    @classmethod
    def build_default(cls) -> "Settings":
        """Construct settings from the current environment."""

        return cls()


__all__ = ["Settings"]
