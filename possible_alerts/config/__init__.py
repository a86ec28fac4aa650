"""Configuration and logging setup."""

from possible_alerts.config.log_setup import configure_logging
from possible_alerts.config.settings import Settings, get_settings, settings

__all__ = ["Settings", "configure_logging", "get_settings", "settings"]
