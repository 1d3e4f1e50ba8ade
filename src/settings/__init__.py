"""Environment-driven settings for the request layer."""

from src.settings.app import AppSettings, get_settings


__all__ = ["AppSettings", "get_settings"]
