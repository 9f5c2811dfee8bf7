import logging
from pathlib import PurePath
from typing import Any, List, Optional, Union

from ftpfs.clients.connection import Connection, DataStream, Pool
from ftpfs.exceptions import (
    DecodeError,
    DecodeKind,
    FtpError,
    ProtocolError,
    TransientError,
)
from ftpfs.filemetadata import FileMetadata
from ftpfs.mlsx import extract_dir_name, parse_mlst
from ftpfs.replies import ReplyCategory, ReplyCode, positive_completion

logger = logging.getLogger(__name__)

RemotePath = Union[str, PurePath]


def _posix(path: RemotePath) -> str:
    if isinstance(path, PurePath):
        return path.as_posix()
    return path


class FileSystem:
    """File operations on an FTP server, one pooled connection per call.

    Every method acquires its own connection from ``pool`` and releases it
    before returning, so a single instance can be shared between threads.

    Example:
        with FtplibPool(config) as pool:
            fs = FileSystem(pool)
            for entry in fs.read_dir("/pub"):
                print(entry.name, entry.size)
    """

    def __init__(self, pool: Pool, name: str = "") -> None:
        self.pool = pool
        self._name = name

    def name(self) -> str:
        return self._name

    def delete(self, path: RemotePath) -> None:
        """Delete the file at ``path``."""
        with self.pool.connection() as conn:
            conn.send_command_expected(ReplyCode.FILE_ACTION_OK, "DELE %s", _posix(path))

    def rename(self, src: RemotePath, dst: RemotePath) -> None:
        """Rename ``src`` to ``dst``."""
        with self.pool.connection() as conn:
            conn.send_command_expected(ReplyCode.FILE_ACTION_PENDING, "RNFR %s", _posix(src))
            conn.send_command_expected(ReplyCode.FILE_ACTION_OK, "RNTO %s", _posix(dst))

    def mkdir(self, path: RemotePath) -> str:
        """
        Create the directory ``path``.

        Returns:
            The name by which the server refers to the new directory
        """
        with self.pool.connection() as conn:
            return self._path_reply(conn, "MKD %s", _posix(path))

    def rmdir(self, path: RemotePath) -> None:
        """Remove the directory ``path``."""
        with self.pool.connection() as conn:
            conn.send_command_expected(ReplyCode.FILE_ACTION_OK, "RMD %s", _posix(path))

    def getwd(self) -> str:
        """Return the current working directory."""
        with self.pool.connection() as conn:
            return self._path_reply(conn, "PWD")

    def read_dir(self, path: RemotePath) -> List[FileMetadata]:
        """
        List the contents of a directory with MLSD.

        Entries for the directory itself and its parent are left out. A
        single undecodable entry fails the whole listing.

        Args:
            path: The remote directory to list

        Returns:
            The decoded entries, in server order

        Raises:
            ProtocolError: If the server rejects the listing
            DecodeError: If an entry cannot be decoded
            TransientError: If the data channel broke mid-transfer
        """
        entries = self._data_string_list("MLSD %s", _posix(path))

        result: List[FileMetadata] = []
        for entry in entries:
            try:
                info = parse_mlst(entry, True)
            except DecodeError as e:
                logger.debug("error in read_dir: %s", e)
                raise

            if info is None:
                continue

            result.append(info)

        return result

    def stat(self, path: RemotePath) -> FileMetadata:
        """
        Fetch the metadata of a single file with MLST.

        Requires the server to support the MLST feature.
        """
        lines = self._control_string_list("MLST %s", _posix(path))

        if len(lines) != 3:
            raise DecodeError(
                DecodeKind.MALFORMED,
                f"unexpected MLST response: expected 3 lines, got {len(lines)}: {lines}",
            )

        info = parse_mlst(lines[1].lstrip(" "), False)
        assert info is not None
        return info

    @staticmethod
    def _path_reply(conn: Connection, command: str, *args: Any) -> str:
        code, msg = conn.send_command(command, *args)
        if code != ReplyCode.PATH_CREATED:
            raise ProtocolError(code, msg, command=command % args if args else command)
        return extract_dir_name(msg)

    def _control_string_list(self, command: str, *args: Any) -> List[str]:
        with self.pool.connection() as conn:
            cmd = command % args if args else command
            code, msg = conn.send_command(cmd)

            if not positive_completion(code):
                conn.debug("unexpected response to %s: %d-%s", cmd, code, msg)
                raise ProtocolError(code, msg, command=cmd)

            return msg.split("\n")

    def _data_string_list(self, command: str, *args: Any) -> List[str]:
        """Run a listing command and collect the lines of its data channel.

        The completion reply on the control channel is always consumed,
        even when reading the data channel failed, so the connection stays
        usable. A bad completion reply wins over a data channel error.
        """
        with self.pool.connection() as conn:
            stream = conn.open_data_channel()
            cmd = command % args if args else command

            res: List[str] = []
            data_error: Optional[FtpError] = None
            try:
                conn.send_command_expected(ReplyCategory.POSITIVE_PRELIMINARY, cmd)

                try:
                    for line in stream:
                        res.append(line.rstrip("\r\n"))
                except (OSError, EOFError, ValueError) as e:
                    conn.debug("error reading %s data: %s", cmd, e)
                    data_error = TransientError(f"error reading {cmd} data: {e}")
                    data_error.__cause__ = e
            finally:
                _close_stream(conn, stream)

            reply = conn.read_response()
            if not positive_completion(reply.code):
                conn.debug("unexpected result: %d-%s", reply.code, reply.message)
                raise ProtocolError(reply.code, reply.message, command=cmd)

            if data_error is not None:
                raise data_error

            return res


def _close_stream(conn: Connection, stream: DataStream) -> None:
    try:
        stream.close()
    except OSError as e:
        conn.debug("error closing data connection: %s", e)
