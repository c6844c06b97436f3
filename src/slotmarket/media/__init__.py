"""Product image storage."""

from .image_store import ImageCleanup, ImageCleanupError, LocalImageStore

__all__ = ["ImageCleanup", "ImageCleanupError", "LocalImageStore"]
