"""Core configuration, credentials, tokens and database plumbing."""

from warden.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
