"""Connections, pools and file operations for ftpfs."""

from ftpfs.clients.connection import Connection, DataStream, Pool
from ftpfs.clients.filesystem import FileSystem
from ftpfs.clients.async_wrapper import AsyncFileSystem
from ftpfs.clients.ftplibclient import FtplibConnection, FtplibPool, SocketDataStream

__all__ = [
    "Connection",
    "DataStream",
    "Pool",
    "FileSystem",
    "AsyncFileSystem",
    "FtplibConnection",
    "FtplibPool",
    "SocketDataStream",
]
