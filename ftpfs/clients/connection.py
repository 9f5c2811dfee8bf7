from abc import abstractmethod, ABCMeta
from contextlib import contextmanager
from typing import Any, Iterator, Protocol, Tuple, Union

from ftpfs.exceptions import ProtocolError
from ftpfs.replies import Reply, ReplyCategory, category, parse_reply_line


class DataStream(Protocol):
    """Text stream of a data channel: iterating it yields received lines."""

    def __iter__(self) -> Iterator[str]: ...

    def close(self) -> None: ...


class Connection(metaclass=ABCMeta):
    """A control connection to an FTP server.

    Implementations provide the line-level primitives; the command/reply
    transaction logic is shared and lives here.
    """

    @abstractmethod
    def send_line(self, line: str) -> None:
        """
        Send one line on the control channel.

        Args:
            line: The command line, without terminator. The connection
                appends CRLF.
        """

    @abstractmethod
    def read_reply_line(self) -> str:
        """
        Read one line from the control channel.

        Returns:
            The line with its terminator stripped
        """

    @abstractmethod
    def open_data_channel(self) -> DataStream:
        """
        Open a data channel for the next transfer command.

        Returns:
            A stream yielding the lines sent by the server
        """

    @abstractmethod
    def debug(self, fmt: str, *args: Any) -> None:
        """Log a debug message tagged with this connection."""

    def read_response(self) -> Reply:
        """Read a complete, possibly multi-line, reply."""
        first = self.read_reply_line()
        code, sep, text = parse_reply_line(first)
        lines = [first]
        texts = [text]

        if sep == "-":
            terminator = f"{code:03d} "
            while True:
                line = self.read_reply_line()
                lines.append(line)
                if line.startswith(terminator) or line == str(code):
                    texts.append(line[4:])
                    break
                if line.startswith(f"{code:03d}-"):
                    texts.append(line[4:])
                else:
                    texts.append(line)

        reply = Reply(code=code, message="\n".join(texts), lines=lines)
        self.debug("got %d-%s", reply.code, reply.message)
        return reply

    def send_command(self, command: str, *args: Any) -> Tuple[int, str]:
        """Send a command and read its reply.

        Args:
            command: Command template, %-formatted with ``args`` if any

        Returns:
            The reply code and message

        Raises:
            ValueError: If the command contains a line break
        """
        cmd = command % args if args else command
        if "\r" in cmd or "\n" in cmd:
            raise ValueError("an illegal newline character should not be contained")

        self.debug("sending command %s", _censor(cmd))
        self.send_line(cmd)

        reply = self.read_response()
        return reply.code, reply.message

    def send_command_expected(
        self, expected: Union[ReplyCategory, int], command: str, *args: Any
    ) -> None:
        """Send a command and check its reply code.

        Args:
            expected: A ``ReplyCategory`` any code of which is accepted, or
                one exact reply code

        Raises:
            ProtocolError: If the reply does not match ``expected``
        """
        code, msg = self.send_command(command, *args)

        if isinstance(expected, ReplyCategory):
            ok = category(code) == expected
        else:
            ok = code == expected

        if not ok:
            cmd = command % args if args else command
            raise ProtocolError(code, msg, command=_censor(cmd))


def _censor(cmd: str) -> str:
    if cmd[:5].upper() == "PASS ":
        return "PASS ******"
    return cmd


class Pool(metaclass=ABCMeta):
    """A source of control connections."""

    @abstractmethod
    def acquire(self) -> Connection:
        """
        Get a connection, dialing a new one if none is idle.

        Raises:
            ClientError: If no connection could be established
        """

    @abstractmethod
    def release(self, conn: Connection) -> None:
        """Give back a connection obtained from ``acquire``."""

    @contextmanager
    def connection(self) -> Iterator[Connection]:
        """Acquire a connection for the duration of a ``with`` block.

        The connection is released on every exit path.
        """
        conn = self.acquire()
        try:
            yield conn
        finally:
            self.release(conn)
