"""Config – 12-factor settings, loaders and pool assembly."""

from cachepool.config.settings import (
    CachePoolSettings,
    DotenvSettingsLoader,
    EnvSettingsLoader,
    Settings,
    SettingsLoader,
    build_backend,
    build_pool,
)
from cachepool.config.validation import ConfigError, InvalidSettingValueError, MissingRequiredSettingError

__all__ = [
    "CachePoolSettings",
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsLoader",
    "build_backend",
    "build_pool",
]
