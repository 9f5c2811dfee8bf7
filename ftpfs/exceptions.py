"""Centralized exception definitions for ftpfs."""

from enum import Enum
from typing import Optional


class FtpfsError(Exception):
    """Base exception for all ftpfs errors."""


# Configuration Exceptions


class ConfigError(FtpfsError):
    """Base exception for configuration errors."""


class RemoteNotFoundError(ConfigError):
    """Exception raised when a remote configuration is not found."""


class ValidationError(ConfigError):
    """Exception raised when configuration validation fails."""


# Client/Connection Exceptions


class ClientError(FtpfsError):
    """Base exception for client operation errors."""


class ClientConnectionError(ClientError):
    """Failed to connect to remote server."""


class AuthenticationError(ClientError):
    """Authentication failed."""


# FTP transaction Exceptions


class FtpError(ClientError):
    """Base exception for errors raised while talking to an FTP server.

    ``temporary`` tells callers whether retrying the operation on a fresh
    connection may succeed.
    """

    temporary: bool = False


class ProtocolError(FtpError):
    """The server answered with an unexpected reply code."""

    def __init__(self, code: int, message: str, command: Optional[str] = None) -> None:
        self.code = code
        self.message = message
        self.command = command
        if command:
            super().__init__(f"unexpected response to {command}: {code}-{message}")
        else:
            super().__init__(f"unexpected response: {code}-{message}")

    @property
    def temporary(self) -> bool:  # type: ignore[override]
        """True for 4xx (transient negative) replies, which may succeed on retry."""
        return 400 <= self.code < 500


class DecodeKind(Enum):
    MALFORMED = "malformed"
    INCOMPLETE = "incomplete"


class DecodeError(FtpError):
    """A server response could not be decoded."""

    def __init__(self, kind: DecodeKind, detail: str) -> None:
        self.kind = kind
        self.detail = detail
        super().__init__(detail)


class TransientError(FtpError):
    """A retryable failure, such as a broken data channel."""

    temporary = True

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)
