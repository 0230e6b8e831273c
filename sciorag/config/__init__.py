"""Configuration module -- exports Settings, the provider allow-list and load_settings."""

from sciorag.config.loader import load_settings
from sciorag.config.settings import ALLOWED_PROVIDERS, Settings

__all__ = ["ALLOWED_PROVIDERS", "Settings", "load_settings"]
