"""
Configuration module for the Anomaly Detector client.

This module provides centralized configuration management.
"""

from mad_client.infrastructure.config.settings import (
    Settings,
    get_settings,
    parse_backoff,
    reload_settings,
)


__all__ = [
    "Settings",
    "get_settings",
    "parse_backoff",
    "reload_settings",
]
