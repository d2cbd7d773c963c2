"""Core: settings and process-wide configuration."""

from review_engine.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
