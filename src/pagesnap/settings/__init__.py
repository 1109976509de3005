"""pagesnap configuration."""

from pagesnap.settings.config import APISettings, BrowserSettings, Settings, get_settings

__all__ = ["APISettings", "BrowserSettings", "Settings", "get_settings"]
