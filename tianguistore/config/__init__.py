"""Configuration package for runtime settings and startup validation."""

from .settings import (
    REQUIRED_SETTING_FIELDS,
    AppSettings,
    ConfigurationError,
    config_collect_warnings,
    config_load_settings,
)

__all__ = [
    "REQUIRED_SETTING_FIELDS",
    "AppSettings",
    "ConfigurationError",
    "config_collect_warnings",
    "config_load_settings",
]
