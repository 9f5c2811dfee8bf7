from dataclasses import dataclass
from typing import Dict, Any

from .base import BaseRemoteConfig, ValidationError


@dataclass
class FtpConfig(BaseRemoteConfig):
    host: str
    port: int = 21
    username: str = "anonymous"
    password: str = "anonymous@"
    tls: bool = False
    timeout: float = 30.0
    max_idle: int = 4

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any]) -> "FtpConfig":
        if "host" not in data:
            raise ValidationError("FTP configuration requires 'host' field")

        return cls(
            name=name,
            type="ftp",
            host=data["host"],
            port=data.get("port", 21),
            username=data.get("username", "anonymous"),
            password=data.get("password", "anonymous@"),
            tls=data.get("tls", False),
            timeout=data.get("timeout", 30.0),
            max_idle=data.get("max_idle", 4),
        )

    def validate(self) -> None:
        if self.type != "ftp":
            raise ValidationError(f"Expected type 'ftp', got '{self.type}'")

        if not self.host:
            raise ValidationError("FTP host cannot be empty")

        if not isinstance(self.port, int) or self.port < 1 or self.port > 65535:
            raise ValidationError("FTP port must be an integer between 1 and 65535")

        if not isinstance(self.tls, bool):
            raise ValidationError("TLS setting must be a boolean")

        if isinstance(self.timeout, bool) or not isinstance(self.timeout, (int, float)) or self.timeout <= 0:
            raise ValidationError("FTP timeout must be a positive number of seconds")

        if isinstance(self.max_idle, bool) or not isinstance(self.max_idle, int) or self.max_idle < 0:
            raise ValidationError("max_idle must be a non-negative integer")
