"""Core package exposing shared configuration helpers."""

from .config import get_settings, Settings

__all__ = ["get_settings", "Settings"]
