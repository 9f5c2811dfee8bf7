import stat
from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto


class FileType(Enum):
    FILE = auto()
    DIRECTORY = auto()


@dataclass(frozen=True)
class FileMetadata:
    """Metadata of one remote entry, as reported by MLSD or MLST.

    ``mode`` holds the permission bits, with ``stat.S_IFDIR`` set for
    directories. ``raw`` is the fact line the entry was decoded from.
    """

    name: str
    size: int
    mode: int
    modified_time: datetime
    raw: str = ""

    @property
    def is_directory(self) -> bool:
        return stat.S_ISDIR(self.mode)

    @property
    def is_file(self) -> bool:
        return not self.is_directory

    @property
    def permissions(self) -> int:
        return stat.S_IMODE(self.mode)

    @property
    def filetype(self) -> FileType:
        if self.is_directory:
            return FileType.DIRECTORY
        return FileType.FILE

    def __str__(self) -> str:
        return f"{str(self.filetype)} {self.name}"
