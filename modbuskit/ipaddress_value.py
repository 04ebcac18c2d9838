"""A mutable four-byte IPv4 address value."""

from __future__ import annotations

from typing import Tuple

_ZERO: Tuple[int, int, int, int] = (0, 0, 0, 0)


def parse_dotted(text: str) -> Tuple[int, int, int, int]:
    """Split ``"a.b.c.d"`` into four bytes.

    Missing trailing groups are 0 and each group is taken modulo 256. Any
    character other than digits and dots, or more than four groups, yields
    ``(0, 0, 0, 0)``.
    """
    groups = text.split(".")
    if len(groups) > 4:
        return _ZERO
    result = [0, 0, 0, 0]
    for position, group in enumerate(groups):
        value = 0
        for ch in group:
            if not "0" <= ch <= "9":
                return _ZERO
            value = (value * 10 + ord(ch) - ord("0")) & 0xFF
        result[position] = value
    return (result[0], result[1], result[2], result[3])


def _check_byte(value: int) -> int:
    if not 0 <= value <= 0xFF:
        raise ValueError(f"address byte must be 0..255, got {value!r}")
    return value


class IPAddress:
    """An IPv4 address held as four bytes, most significant first."""

    __hash__ = None  # mutable

    def __init__(self, b0: int = 0, b1: int = 0, b2: int = 0, b3: int = 0) -> None:
        self._bytes = [_check_byte(b) for b in (b0, b1, b2, b3)]

    @classmethod
    def from_int(cls, value: int) -> "IPAddress":
        """Build from a 32-bit value whose high byte is the first group."""
        if not 0 <= value <= 0xFFFFFFFF:
            raise ValueError(f"address value must fit 32 bits, got {value!r}")
        return cls(*value.to_bytes(4, "big"))

    @classmethod
    def parse(cls, text: str) -> "IPAddress":
        """Build from dotted text; see :func:`parse_dotted` for the rules."""
        return cls(*parse_dotted(text))

    def __int__(self) -> int:
        return int.from_bytes(bytes(self._bytes), "big")

    def __getitem__(self, index: int) -> int:
        """Return byte 0..3; any other index reads as 0."""
        if 0 <= index <= 3:
            return self._bytes[index]
        return 0

    def __setitem__(self, index: int, value: int) -> None:
        """Set byte 0..3; writes to any other index are discarded."""
        value = _check_byte(value)
        if 0 <= index <= 3:
            self._bytes[index] = value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, IPAddress):
            return self._bytes == other._bytes
        if isinstance(other, bool):
            return NotImplemented
        if isinstance(other, int):
            return int(self) == other
        if isinstance(other, str):
            return tuple(self._bytes) == parse_dotted(other)
        return NotImplemented

    def __str__(self) -> str:
        return ".".join(str(b) for b in self._bytes)

    def __repr__(self) -> str:
        return f"IPAddress({', '.join(str(b) for b in self._bytes)})"


NIL_ADDR = IPAddress()