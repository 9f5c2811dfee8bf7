"""Connection and pool implementations on top of the standard ftplib."""

import logging
import socket
import ssl
import threading
from ftplib import FTP, FTP_TLS, Error, error_perm, error_temp, error_reply
from types import TracebackType
from typing import Any, Callable, Iterator, List, Optional, TextIO, Union
from typing_extensions import Self

from ftpfs.clients.connection import Connection, Pool
from ftpfs.config.remotes import FtpConfig
from ftpfs.exceptions import (
    AuthenticationError,
    ClientConnectionError,
    DecodeError,
    ProtocolError,
)
from ftpfs.replies import Reply

logger = logging.getLogger(__name__)


class SocketDataStream:
    """Line reader over a data channel socket.

    TLS, when needed, is negotiated on first read: servers only start the
    handshake once they have accepted the transfer command.
    """

    def __init__(
        self,
        sock: socket.socket,
        encoding: str,
        wrap: Optional[Callable[[socket.socket], socket.socket]] = None,
    ) -> None:
        self._sock = sock
        self._encoding = encoding
        self._wrap = wrap
        self._file: Optional[TextIO] = None

    def _reader(self) -> TextIO:
        if self._file is None:
            if self._wrap is not None:
                self._sock = self._wrap(self._sock)
                self._wrap = None
            self._file = self._sock.makefile("r", encoding=self._encoding)  # type: ignore[assignment]
        assert self._file is not None
        return self._file

    def __iter__(self) -> Iterator[str]:
        return iter(self._reader())

    def close(self) -> None:
        try:
            if self._file is not None:
                self._file.close()
            if isinstance(self._sock, ssl.SSLSocket):
                self._sock.unwrap()
        finally:
            self._sock.close()


class FtplibConnection(Connection):
    """Control connection backed by an ``ftplib.FTP`` session."""

    def __init__(self, ftp: Union[FTP, FTP_TLS]) -> None:
        self.ftp = ftp
        self.broken = False

    def send_line(self, line: str) -> None:
        try:
            self.ftp.putcmd(line)
        except (OSError, EOFError):
            self.broken = True
            raise

    def read_reply_line(self) -> str:
        try:
            return self.ftp.getline()
        except (OSError, EOFError, Error):
            self.broken = True
            raise

    def read_response(self) -> Reply:
        # leftover lines of an unparsable reply would be read by the next user
        try:
            return super().read_response()
        except DecodeError:
            self.broken = True
            raise

    def open_data_channel(self) -> SocketDataStream:
        try:
            host, port = self.ftp.makepasv()
        except (error_perm, error_temp, error_reply) as e:
            raise _protocol_error(e, "PASV") from e
        except (OSError, EOFError):
            self.broken = True
            raise

        sock = socket.create_connection(
            (host, port), self.ftp.timeout, source_address=self.ftp.source_address
        )

        wrap = None
        if isinstance(self.ftp, FTP_TLS) and self.ftp._prot_p:  # type: ignore[attr-defined]
            context = self.ftp.context
            server_hostname = self.ftp.host

            def wrap(s: socket.socket) -> socket.socket:
                return context.wrap_socket(s, server_hostname=server_hostname)

        return SocketDataStream(sock, self.ftp.encoding, wrap)

    def debug(self, fmt: str, *args: Any) -> None:
        logger.debug("%s: " + fmt, self.ftp.host, *args)

    def close(self) -> None:
        try:
            self.ftp.quit()
        except (error_perm, error_temp, error_reply, OSError, EOFError):
            # If quit fails (e.g., connection already closed), force close
            self.ftp.close()


def _protocol_error(e: Error, command: str) -> ProtocolError:
    resp = str(e)
    code = int(resp[:3]) if resp[:3].isdigit() else 0
    return ProtocolError(code, resp[4:], command=command)


class FtplibPool(Pool):
    """Pool of ftplib control connections to one server.

    Connections are dialed on demand; up to ``config.max_idle`` healthy
    connections are kept for reuse after ``release``.
    """

    def __init__(self, config: FtpConfig) -> None:
        self.config = config
        self._idle: List[FtplibConnection] = []
        self._lock = threading.Lock()
        self._closed = False

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        self.close()

    def acquire(self) -> FtplibConnection:
        with self._lock:
            if self._closed:
                raise ClientConnectionError("connection pool is closed")
            if self._idle:
                return self._idle.pop()
        return self._dial()

    def release(self, conn: Connection) -> None:
        assert isinstance(conn, FtplibConnection)
        with self._lock:
            keep = (
                not self._closed
                and not conn.broken
                and len(self._idle) < self.config.max_idle
            )
            if keep:
                self._idle.append(conn)
                return
        conn.close()

    def close(self) -> None:
        with self._lock:
            self._closed = True
            idle, self._idle = self._idle, []
        for conn in idle:
            conn.close()

    def _create_client(self) -> Union[FTP, FTP_TLS]:
        """Create an FTP client based on the TLS setting.

        Note: Does not connect to the server.
        """
        return FTP_TLS() if self.config.tls else FTP()

    def _dial(self) -> FtplibConnection:
        ftp = self._create_client()
        try:
            ftp.connect(self.config.host, self.config.port, timeout=self.config.timeout)
            if self.config.tls:
                ftp.auth()  # type: ignore[union-attr]
            ftp.login(user=self.config.username, passwd=self.config.password)
            if self.config.tls:
                ftp.prot_p()  # type: ignore[union-attr]
        except error_perm as e:
            ftp.close()
            error_str = str(e)
            if "530" in error_str:
                raise AuthenticationError(f"Authentication failed: {error_str}") from e
            raise ClientConnectionError(f"FTP error: {error_str}") from e
        except (error_temp, error_reply) as e:
            ftp.close()
            raise ClientConnectionError(f"FTP error: {e}") from e
        except (OSError, EOFError) as e:
            ftp.close()
            raise ClientConnectionError(f"Failed to connect to {self.config.host}: {e}") from e

        ftp.set_pasv(True)
        logger.debug("connected to %s:%d", self.config.host, self.config.port)
        return FtplibConnection(ftp)
