"""Scout settings package."""

from scout.settings.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
