"""Log levels, a shared level setting and hex dumps of raw message data."""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import TextIO

_BYTES_PER_LINE = 16
_HEX_COLUMN_WIDTH = 60
_LIMITER = "|"

RED = "\x1b[1;31m"
GREEN = "\x1b[32m"
YELLOW = "\x1b[1;33m"
BLUE = "\x1b[34m"
MAGENTA = "\x1b[35m"
CYAN = "\x1b[36m"
NORMAL = "\x1b[0m"


class LogLevel(IntEnum):
    """Verbosity levels; a message is shown when its level is at most the current one."""

    NONE = 0
    CRITICAL = 1
    ERROR = 2
    WARNING = 3
    INFO = 4
    DEBUG = 5
    VERBOSE = 6


_current_level = LogLevel.ERROR


def set_log_level(level: int) -> None:
    """Set the shared log level; raises ValueError for unknown levels."""
    global _current_level
    try:
        _current_level = LogLevel(level)
    except ValueError:
        raise ValueError(
            f"log level must be between {LogLevel.NONE} and {LogLevel.VERBOSE}, got {level!r}"
        ) from None


def get_log_level() -> LogLevel:
    """Return the shared log level."""
    return _current_level


def file_name(path: str) -> str:
    """Return the part of ``path`` after the last slash or backslash."""
    cut = max(path.rfind("/"), path.rfind("\\"))
    return path[cut + 1:]


def _printable(byte: int) -> str:
    return chr(byte) if 32 <= byte <= 127 else "."


def _dump_line(offset: int, chunk: bytes) -> str:
    first, second = chunk[:8], chunk[8:]
    hex_part = "".join(f"{b:02X} " for b in first)
    if second:
        hex_part += " " + "".join(f"{b:02X} " for b in second)
    head = f"  {_LIMITER} {offset & 0xFFFF:04X}: {hex_part}"
    ascii_part = "".join(_printable(b) for b in chunk)
    return (
        head.ljust(_HEX_COLUMN_WIDTH)
        + _LIMITER
        + ascii_part.ljust(_BYTES_PER_LINE)
        + _LIMITER
        + "\n"
    )


def format_hex_dump(letter: str, label: str, data: bytes) -> str:
    """Render ``data`` as a header line and rows of 16 bytes in hex and ASCII."""
    data = bytes(data)
    lines = [f"[{letter}] {label}: @{id(data):X}/{len(data) & 0xFFFFFFFF}:\n"]
    for offset in range(0, len(data), _BYTES_PER_LINE):
        lines.append(_dump_line(offset, data[offset:offset + _BYTES_PER_LINE]))
    return "".join(lines)


def hex_dump(letter: str, label: str, data: bytes, output: TextIO | None = None) -> None:
    """Write :func:`format_hex_dump` output to ``output`` (standard output by default)."""
    (output if output is not None else sys.stdout).write(
        format_hex_dump(letter, label, data)
    )