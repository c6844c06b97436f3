"""Filesystem storage of per-slot product images."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .. import SLOT_COUNT
from ..config import MediaPaths

logger = logging.getLogger(__name__)

FOLDER_MARKER = ".folder"


class ImageCleanupError(Exception):
    """Raised when a slot's image namespace could not be cleared."""


class ImageCleanup(Protocol):
    """Collaborator clearing the images that belong to a slot."""

    def clear_namespace(self, slot_id: int) -> int:
        """Delete the slot's images and return how many were removed."""


@dataclass(slots=True)
class LocalImageStore:
    """Keep images under ``product-images/slot-<id>/`` below the media root."""

    paths: MediaPaths

    def namespace_dir(self, slot_id: int) -> Path:
        if not 1 <= slot_id <= SLOT_COUNT:
            raise ValueError(f"slot id must be between 1 and {SLOT_COUNT}")
        return self.paths.product_images / f"slot-{slot_id}"

    def ensure_namespaces(self) -> int:
        """Create every slot folder with its marker file; return how many exist."""
        created = 0
        for slot_id in range(1, SLOT_COUNT + 1):
            directory = self.namespace_dir(slot_id)
            directory.mkdir(parents=True, exist_ok=True)
            (directory / FOLDER_MARKER).touch(exist_ok=True)
            created += 1
        return created

    def list_images(self, slot_id: int) -> list[Path]:
        directory = self.namespace_dir(slot_id)
        if not directory.exists():
            return []
        return sorted(
            path for path in directory.iterdir() if path.name != FOLDER_MARKER
        )

    def clear_namespace(self, slot_id: int) -> int:
        """Remove everything in the slot folder except the marker file."""
        removed = 0
        try:
            for path in self.list_images(slot_id):
                if path.is_dir():
                    shutil.rmtree(path)
                else:
                    path.unlink()
                removed += 1
        except OSError as exc:
            raise ImageCleanupError(
                f"failed to clear images of slot {slot_id}: {exc}"
            ) from exc
        logger.info(
            "media.cleanup.removed",
            extra={"slot_id": slot_id, "removed": removed},
        )
        return removed


__all__ = [
    "FOLDER_MARKER",
    "ImageCleanup",
    "ImageCleanupError",
    "LocalImageStore",
]
