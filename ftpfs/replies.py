"""FTP reply codes and their classification (RFC 959, RFC 3659)."""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional, Tuple

from ftpfs.exceptions import DecodeError, DecodeKind


class ReplyCategory(IntEnum):
    """First digit of a reply code."""

    POSITIVE_PRELIMINARY = 1
    POSITIVE_COMPLETION = 2
    POSITIVE_INTERMEDIATE = 3
    TRANSIENT_NEGATIVE = 4
    PERMANENT_NEGATIVE = 5


class ReplyCode(IntEnum):
    RESTART_MARKER = 110
    READY_IN_N_MINUTES = 120
    ALREADY_OPEN = 125
    FILE_STATUS_OK = 150

    COMMAND_OK = 200
    COMMAND_NOT_IMPLEMENTED_SUPERFLUOUS = 202
    SYSTEM_STATUS = 211
    DIRECTORY_STATUS = 212
    FILE_STATUS = 213
    HELP_MESSAGE = 214
    SYSTEM_TYPE = 215
    SERVICE_READY = 220
    CLOSING_CONTROL_CONNECTION = 221
    DATA_CONNECTION_OPEN = 225
    CLOSING_DATA_CONNECTION = 226
    ENTERING_PASSIVE_MODE = 227
    ENTERING_EXTENDED_PASSIVE_MODE = 229
    USER_LOGGED_IN = 230
    AUTH_OK_NO_DATA_NEEDED = 234
    FILE_ACTION_OK = 250
    PATH_CREATED = 257

    NEED_PASSWORD = 331
    NEED_ACCOUNT = 332
    FILE_ACTION_PENDING = 350

    SERVICE_NOT_AVAILABLE = 421
    CANT_OPEN_DATA_CONNECTION = 425
    CONNECTION_CLOSED = 426
    TRANSIENT_FILE_ERROR = 450
    LOCAL_ERROR = 451
    OUT_OF_SPACE = 452

    COMMAND_SYNTAX_ERROR = 500
    PARAMETER_SYNTAX_ERROR = 501
    COMMAND_NOT_IMPLEMENTED = 502
    BAD_COMMAND_SEQUENCE = 503
    COMMAND_NOT_IMPLEMENTED_FOR_PARAMETER = 504
    NOT_LOGGED_IN = 530
    NEED_ACCOUNT_TO_STORE = 532
    FILE_UNAVAILABLE = 550
    PAGE_TYPE_UNKNOWN = 551
    EXCEEDED_STORAGE_ALLOCATION = 552
    BAD_FILE_NAME = 553


_NAMED_CODES = {c.value: c for c in ReplyCode}


def category(code: int) -> ReplyCategory:
    """Return the category of ``code``.

    Raises:
        ValueError: If ``code`` is outside 100..599
    """
    if not 100 <= code <= 599:
        raise ValueError(f"reply code out of range: {code}")
    return ReplyCategory(code // 100)


def named(code: int) -> Optional[ReplyCode]:
    return _NAMED_CODES.get(code)


def positive_preliminary(code: int) -> bool:
    return code // 100 == ReplyCategory.POSITIVE_PRELIMINARY


def positive_completion(code: int) -> bool:
    return code // 100 == ReplyCategory.POSITIVE_COMPLETION


def positive_intermediate(code: int) -> bool:
    return code // 100 == ReplyCategory.POSITIVE_INTERMEDIATE


def transient_negative(code: int) -> bool:
    return code // 100 == ReplyCategory.TRANSIENT_NEGATIVE


def permanent_negative(code: int) -> bool:
    return code // 100 == ReplyCategory.PERMANENT_NEGATIVE


def parse_reply_line(line: str) -> Tuple[int, str, str]:
    """Split a reply line into ``(code, separator, text)``.

    ``separator`` is ``"-"`` for a line opening a multi-line reply and
    ``" "`` (or ``""`` for a bare code) otherwise.

    Raises:
        DecodeError: If the line does not start with a valid reply code
    """
    digits, sep, text = line[:3], line[3:4], line[4:]
    if (
        len(digits) != 3
        or not (digits.isascii() and digits.isdigit())
        or digits[0] not in "12345"
        or sep not in ("-", " ", "")
    ):
        raise DecodeError(DecodeKind.MALFORMED, f"invalid reply line: {line!r}")
    return int(digits), sep, text


@dataclass(frozen=True)
class Reply:
    code: int
    message: str
    lines: List[str] = field(default_factory=list)

    @property
    def category(self) -> ReplyCategory:
        return category(self.code)
