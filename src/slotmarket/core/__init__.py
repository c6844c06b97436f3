"""Core configuration primitives."""

from .config import Settings

__all__ = ["Settings"]
