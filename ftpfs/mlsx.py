"""Decoding of RFC 3659 machine-readable listings and quoted path replies."""

import re
import stat
from datetime import datetime, timezone
from typing import Dict, Optional

from ftpfs.exceptions import DecodeError, DecodeKind
from ftpfs.filemetadata import FileMetadata

# strptime format of the "modify" fact, always UTC
TIME_FORMAT = "%Y%m%d%H%M%S"

_TIMESTAMP = re.compile(r"([0-9]{14})(?:\.([0-9]{1,6}))?")
_DECIMAL = re.compile(r"[0-9]+")
_OCTAL = re.compile(r"[0-7]+")

_SELF_PARENT_TYPES = ("cdir", "pdir", ".", "..")
_DIRECTORY_TYPES = ("dir",) + _SELF_PARENT_TYPES

# perm fact characters, see RFC 3659 section 7.5.5
_WRITE_PERMS = "adcfmpw"
_LIST_PERM = "l"
_READ_PERM = "r"


def parse_mlst(entry: str, skip_self_parent: bool) -> Optional[FileMetadata]:
    """Decode one MLSD/MLST fact line.

    An entry looks something like this::

        type=file;size=12;modify=20150216084148;UNIX.mode=0644; lorem.txt

    Args:
        entry: The fact line, without line terminator
        skip_self_parent: Return None for current/parent directory entries

    Returns:
        The decoded metadata, or None for a skipped entry

    Raises:
        DecodeError: MALFORMED if the line is syntactically invalid,
            INCOMPLETE if a required fact is missing
    """
    parse_error = DecodeError(DecodeKind.MALFORMED, f"failed parsing MLST entry: {entry}")
    incomplete_error = DecodeError(DecodeKind.INCOMPLETE, f"MLST entry incomplete: {entry}")

    # the path is everything after the first "; ", so it may itself contain "; "
    fact_block, sep, path = entry.partition("; ")
    if not sep:
        raise parse_error

    facts: Dict[str, str] = {}
    for fact_pair in fact_block.split(";"):
        name, eq, value = fact_pair.partition("=")
        if not eq or not name:
            raise parse_error
        facts[name.lower()] = value.lower()

    typ = facts.get("type", "")
    if not typ:
        raise incomplete_error

    if skip_self_parent and typ in _SELF_PARENT_TYPES:
        return None

    mode = 0
    if facts.get("unix.mode"):
        if not _OCTAL.fullmatch(facts["unix.mode"]):
            raise parse_error
        # type bits come from the type fact only
        mode = stat.S_IMODE(int(facts["unix.mode"], 8))
    elif facts.get("perm"):
        for c in facts["perm"]:
            if c in _WRITE_PERMS:
                mode |= 0o200
            elif c == _LIST_PERM:
                mode |= 0o500
            elif c == _READ_PERM:
                mode |= 0o400
    else:
        # no mode info, just say it's readable to us
        mode = 0o400

    is_dir = typ in _DIRECTORY_TYPES
    if is_dir:
        mode |= stat.S_IFDIR

    size_fact = None
    if facts.get("size"):
        size_fact = facts["size"]
    elif is_dir and facts.get("sizd"):
        size_fact = facts["sizd"]
    elif typ == "file":
        raise incomplete_error

    size = 0
    if size_fact is not None:
        if not _DECIMAL.fullmatch(size_fact):
            raise parse_error
        size = int(size_fact)

    modified_time = _parse_time(facts.get("modify", ""))
    if modified_time is None:
        raise incomplete_error

    return FileMetadata(
        name=_base_name(path),
        size=size,
        mode=mode,
        modified_time=modified_time,
        raw=entry,
    )


def _parse_time(value: str) -> Optional[datetime]:
    match = _TIMESTAMP.fullmatch(value)
    if not match:
        return None
    try:
        parsed = datetime.strptime(match.group(1), TIME_FORMAT)
    except ValueError:
        return None
    fraction = match.group(2)
    if fraction:
        parsed = parsed.replace(microsecond=int(fraction.ljust(6, "0")))
    return parsed.replace(tzinfo=timezone.utc)


def _base_name(path: str) -> str:
    if not path:
        return "."
    stripped = path.rstrip("/")
    if not stripped:
        return "/"
    return stripped.rsplit("/", 1)[-1]


def extract_dir_name(message: str) -> str:
    """Extract the quoted path from a MKD or PWD reply.

    Embedded quotes are doubled by the server, so ``"A""B" created`` names
    the directory ``A"B``.

    Raises:
        DecodeError: If the message does not contain a quoted path
    """
    open_quote = message.find('"')
    close_quote = message.rfind('"')
    if open_quote == -1 or len(message) == open_quote + 1 or close_quote <= open_quote:
        raise DecodeError(
            DecodeKind.MALFORMED, f"failed parsing directory name: {message}"
        )
    return message[open_quote + 1 : close_quote].replace('""', '"')
