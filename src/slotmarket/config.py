"""Application configuration builder."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .core.config import Settings
from .db.db_init import init_db


@dataclass(slots=True)
class MediaPaths:
    root: Path
    product_images: Path


@dataclass(slots=True)
class AppConfig:
    settings: Settings
    media_paths: MediaPaths
    database_url: str
    engine: Engine
    session_factory: sessionmaker[Session]


def _ensure_media_paths(paths: MediaPaths) -> None:
    paths.root.mkdir(parents=True, exist_ok=True)
    paths.product_images.mkdir(parents=True, exist_ok=True)


def build_engine(database_url: str) -> Engine:
    """Create an engine; SQLite connections may be shared across threads."""
    connect_args: dict = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, future=True, connect_args=connect_args)


def load_config(settings: Settings | None = None) -> AppConfig:
    """Load configuration from environment (SQLite by default)."""
    settings = settings or Settings.build_default()
    root = Path(settings.media_root)
    media_paths = MediaPaths(root=root, product_images=root / "product-images")
    _ensure_media_paths(media_paths)

    engine = build_engine(settings.database_url)
    session_factory: sessionmaker[Session] = sessionmaker(bind=engine, expire_on_commit=False)

    init_db(engine, session_factory)

    return AppConfig(
        settings=settings,
        media_paths=media_paths,
        database_url=settings.database_url,
        engine=engine,
        session_factory=session_factory,
    )


__all__ = ["AppConfig", "MediaPaths", "build_engine", "load_config"]
