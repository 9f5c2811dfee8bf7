import os
import tomllib
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Any, Type, Optional, IO, List

from ftpfs.exceptions import ConfigError, RemoteNotFoundError, ValidationError

__all__ = [
    "ConfigError",
    "RemoteNotFoundError",
    "ValidationError",
    "BaseRemoteConfig",
    "Config",
    "DEFAULT_CONFIG_PATH",
]

DEFAULT_CONFIG_PATH = os.path.join("~", ".ftpfsconf.toml")


@dataclass
class BaseRemoteConfig(ABC):
    name: str
    type: str

    @classmethod
    @abstractmethod
    def from_dict(cls, name: str, data: Dict[str, Any]) -> "BaseRemoteConfig":
        """Build a remote from its TOML table.

        Raises:
            ValidationError: If a required field is missing
        """

    @abstractmethod
    def validate(self) -> None:
        """
        Raises:
            ValidationError: If a field holds an invalid value
        """


@dataclass
class Config:
    """Named remotes read from a TOML file, one table per remote::

        [mirror]
        type = "ftp"
        host = "ftp.example.com"
        tls = true
    """

    remotes: Dict[str, BaseRemoteConfig]
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def from_file(cls, config_file: Optional[IO[bytes]]) -> "Config":
        """Load configuration from an open TOML file.

        Remotes that cannot be loaded are skipped and reported in
        ``warnings``.

        Raises:
            ConfigError: If the file is missing or is not valid TOML
            ValidationError: If no usable remote is left
        """
        if config_file is None:
            raise ConfigError("Configuration file not provided")

        try:
            config_data = tomllib.load(config_file)
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
            raise ConfigError(f"Failed to parse TOML configuration: {e}")

        return cls.from_dict(config_data)

    @classmethod
    def from_path(cls, path: str) -> "Config":
        path = os.path.expanduser(path)
        try:
            with open(path, "rb") as fp:
                return cls.from_file(fp)
        except FileNotFoundError:
            raise ConfigError(f"Configuration file not found at {path}")

    @classmethod
    def from_dict(cls, config_data: Dict[str, Any]) -> "Config":
        remotes: Dict[str, BaseRemoteConfig] = {}
        warnings: List[str] = []

        for remote_name, remote_data in config_data.items():
            if not isinstance(remote_data, dict):
                warnings.append(
                    f"Remote '{remote_name}' configuration must be a table - skipping"
                )
                continue

            remote_type = remote_data.get("type")
            if remote_type is None:
                warnings.append(
                    f"Remote '{remote_name}' missing required 'type' field - skipping"
                )
                continue

            config_class = cls._get_config_class(remote_type)
            if config_class is None:
                warnings.append(
                    f"Unknown remote type '{remote_type}' for remote '{remote_name}' - skipping"
                )
                continue

            try:
                remote_config = config_class.from_dict(remote_name, remote_data)
                remote_config.validate()
            except ValidationError as e:
                warnings.append(
                    f"Invalid configuration for remote '{remote_name}': {e} - skipping"
                )
                continue

            remotes[remote_name] = remote_config

        config = cls(remotes=remotes, warnings=warnings)
        config.validate()
        return config

    @staticmethod
    def _get_config_class(remote_type: str) -> Optional[Type[BaseRemoteConfig]]:
        from .remotes import FtpConfig

        type_mapping: Dict[str, Type[BaseRemoteConfig]] = {
            "ftp": FtpConfig,
        }

        return type_mapping.get(remote_type)

    def get_remote(self, name: str) -> BaseRemoteConfig:
        """
        Raises:
            RemoteNotFoundError: If no remote is called ``name``
        """
        if name not in self.remotes:
            available = ", ".join(self.remotes.keys())
            raise RemoteNotFoundError(
                f"Remote '{name}' not found in configuration. "
                f"Available remotes: {available}"
            )

        return self.remotes[name]

    def validate(self) -> None:
        if not self.remotes:
            raise ValidationError("Configuration must contain at least one remote")

        for remote_name, remote_config in self.remotes.items():
            try:
                remote_config.validate()
            except ValidationError as e:
                raise ValidationError(f"Remote '{remote_name}': {e}")

    def list_remotes(self) -> Dict[str, str]:
        return {name: config.type for name, config in self.remotes.items()}

    def get_warnings(self) -> List[str]:
        return self.warnings.copy()
