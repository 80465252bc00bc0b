"""Config settings – 12-factor env-based configuration."""
from cachepool.config.settings.base import Settings
from cachepool.config.settings.factory import build_backend, build_pool
from cachepool.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader
from cachepool.config.settings.pool import BACKENDS, CODECS, CachePoolSettings

__all__ = [
    "BACKENDS",
    "CODECS",
    "CachePoolSettings",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "Settings",
    "SettingsLoader",
    "build_backend",
    "build_pool",
]
