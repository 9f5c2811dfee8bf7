"""ftpfs - file operations over FTP with pooled control connections.

Quick Start:
    from ftpfs import FileSystem, FtplibPool, FtpConfig

    config = FtpConfig(name="mirror", type="ftp", host="ftp.example.com")
    with FtplibPool(config) as pool:
        fs = FileSystem(pool)
        for entry in fs.read_dir("/pub"):
            print(entry.name, entry.size, entry.modified_time)
"""

from ftpfs.clients import (
    AsyncFileSystem,
    Connection,
    FileSystem,
    FtplibConnection,
    FtplibPool,
    Pool,
)
from ftpfs.config import Config, FtpConfig
from ftpfs.exceptions import (
    FtpfsError,
    ConfigError,
    ClientError,
    ClientConnectionError,
    AuthenticationError,
    FtpError,
    ProtocolError,
    DecodeError,
    DecodeKind,
    TransientError,
)
from ftpfs.filemetadata import FileMetadata, FileType
from ftpfs.mlsx import extract_dir_name, parse_mlst
from ftpfs.replies import Reply, ReplyCategory, ReplyCode

__all__ = [
    # File operations
    "FileSystem",
    "AsyncFileSystem",
    # Connection capabilities
    "Connection",
    "Pool",
    "FtplibConnection",
    "FtplibPool",
    # Configuration
    "Config",
    "FtpConfig",
    # Values
    "FileMetadata",
    "FileType",
    "Reply",
    "ReplyCategory",
    "ReplyCode",
    # Decoders
    "parse_mlst",
    "extract_dir_name",
    # Exceptions
    "FtpfsError",
    "ConfigError",
    "ClientError",
    "ClientConnectionError",
    "AuthenticationError",
    "FtpError",
    "ProtocolError",
    "DecodeError",
    "DecodeKind",
    "TransientError",
]

__version__ = "0.1.0"
