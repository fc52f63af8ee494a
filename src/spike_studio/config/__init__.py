"""Configuration and settings management."""

from spike_studio.config.constants import Limits, Scoring
from spike_studio.config.logging import get_logger, setup_logging
from spike_studio.config.settings import Settings, clear_settings_cache, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "clear_settings_cache",
    "setup_logging",
    "get_logger",
    "Limits",
    "Scoring",
]
