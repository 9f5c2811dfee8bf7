"""Configuration management for ftpfs."""

from .base import Config, BaseRemoteConfig, ConfigError, RemoteNotFoundError, ValidationError
from .remotes import FtpConfig

__all__ = [
    "Config",
    "BaseRemoteConfig",
    "ConfigError",
    "RemoteNotFoundError",
    "ValidationError",
    "FtpConfig",
]
