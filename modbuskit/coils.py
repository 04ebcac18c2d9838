"""Packed storage for Modbus coil (single-bit) values."""

from __future__ import annotations

import sys
from typing import Iterator, TextIO

MAX_COILS = 2000
_LINE_LIMIT = 80


def _image_bits(image: str) -> Iterator[bool]:
    """Yield the coil values written in a bit image such as ``"1101 0_01"``.

    ``1`` and ``0`` are bits, ``_`` makes the next bit be ignored, and any
    other character is a separator that cancels a pending ``_``.
    """
    skip = False
    for ch in image:
        if ch in "01":
            if skip:
                skip = False
            else:
                yield ch == "1"
        elif ch == "_":
            skip = True
        else:
            skip = False


class CoilData:
    """A set of up to 2000 coils, packed LSB-first into bytes as on the wire."""

    __hash__ = None  # mutable

    def __init__(self, size: int = 0, init_value: bool = False) -> None:
        if size < 0:
            raise ValueError("coil count must not be negative")
        self._size = 0
        self._buffer = bytearray()
        size = min(size, MAX_COILS)
        if size:
            self._size = size
            self._buffer = bytearray((size + 7) // 8)
            self.init(init_value)

    @classmethod
    def from_image(cls, image: str) -> "CoilData":
        """Build a coil set from a bit image; no valid bits gives an empty set."""
        coils = cls()
        coils._load_image(image)
        return coils

    def _load_image(self, image: str) -> bool:
        bits = list(_image_bits(image))
        self._size = 0
        self._buffer = bytearray()
        if not bits or len(bits) > MAX_COILS:
            return False
        self._size = len(bits)
        self._buffer = bytearray((self._size + 7) // 8)
        for index, bit in enumerate(bits):
            if bit:
                self._buffer[index >> 3] |= 1 << (index & 7)
        return True

    def assign_image(self, image: str) -> None:
        """Re-initialise from a bit image.

        The old coils are discarded in any case; if the image holds no valid
        bits or more than 2000, the set is left empty and ValueError is raised.
        """
        if not self._load_image(image):
            raise ValueError(
                f"bit image must hold between 1 and {MAX_COILS} valid bits"
            )

    # -- container protocol -------------------------------------------------

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._size > 0

    def __bytes__(self) -> bytes:
        return bytes(self._buffer)

    def __getitem__(self, index: int) -> bool:
        """Return one coil; indexes outside the set read as False."""
        if 0 <= index < self._size:
            return bool(self._buffer[index >> 3] & (1 << (index & 7)))
        return False

    def __iter__(self) -> Iterator[bool]:
        return (self[i] for i in range(self._size))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CoilData):
            return self._size == other._size and self._buffer == other._buffer
        if isinstance(other, str):
            return self.matches(other)
        return NotImplemented

    def __copy__(self) -> "CoilData":
        clone = CoilData()
        clone._size = self._size
        clone._buffer = bytearray(self._buffer)
        return clone

    def __deepcopy__(self, memo: dict) -> "CoilData":
        return self.__copy__()

    def __repr__(self) -> str:
        bits = "".join("1" if bit else "0" for bit in self)
        return f"CoilData.from_image({bits!r})"

    # -- access ---------------------------------------------------------------

    def slice(self, start: int = 0, length: int = 0) -> "CoilData":
        """Return coils ``start`` .. ``start+length-1`` as a new set.

        A length of 0 means up to the end. Illegal ranges give an empty set.
        """
        if self._size == 0 or start < 0 or start > self._size:
            return CoilData()
        if length == 0:
            length = self._size - start
        if length < 0 or start + length > self._size:
            return CoilData()
        result = CoilData(length)
        for offset in range(length):
            if self[start + offset]:
                result.set(offset, True)
        return result

    def _put(self, index: int, value: bool) -> None:
        mask = 1 << (index & 7)
        if value:
            self._buffer[index >> 3] |= mask
        else:
            self._buffer[index >> 3] &= ~mask & 0xFF

    def set(self, index: int, value: bool) -> None:
        """Set a single coil."""
        if not 0 <= index < self._size:
            raise IndexError(f"coil {index} outside 0..{self._size - 1}")
        self._put(index, bool(value))

    def set_bytes(self, start: int, length: int, data: bytes) -> None:
        """Overwrite ``length`` coils from ``start`` with packed LSB-first bits."""
        if length <= 0 or start < 0 or start + length > self._size:
            raise IndexError(
                f"range {start}+{length} does not fit {self._size} coils"
            )
        needed = (length + 7) // 8
        if len(data) < needed:
            raise ValueError(f"{length} coils need {needed} bytes, got {len(data)}")
        for offset in range(length):
            bit = data[offset >> 3] & (1 << (offset & 7))
            self._put(start + offset, bool(bit))

    def set_coils(self, index: int, other: "CoilData") -> None:
        """Copy another coil set in at ``index``, stopping when either runs out."""
        if not other:
            raise ValueError("source coil set is empty")
        if not 0 <= index < self._size:
            raise IndexError(f"coil {index} outside 0..{self._size - 1}")
        count = min(self._size - index, len(other))
        for offset in range(count):
            self._put(index + offset, other[offset])

    def set_image(self, index: int, image: str) -> None:
        """Overwrite coils from ``index`` with a bit image, stopping when either runs out."""
        if not 0 <= index < self._size:
            raise IndexError(f"coil {index} outside 0..{self._size - 1}")
        for position, bit in enumerate(_image_bits(image), start=index):
            if position >= self._size:
                break
            self._put(position, bit)

    def matches(self, image: str) -> bool:
        """Compare with a bit image.

        Bits of the image beyond the coil count make the comparison fail; a
        shorter image only compares the leading coils.
        """
        for index, bit in enumerate(_image_bits(image)):
            if index >= self._size or self[index] != bit:
                return False
        return True

    def init(self, value: bool = False) -> None:
        """Set every coil to ``value``."""
        if not self._size:
            return
        fill = 0xFF if value else 0x00
        self._buffer[:] = bytes([fill]) * len(self._buffer)
        last_bits = ((self._size - 1) & 7) + 1
        self._buffer[-1] &= (1 << last_bits) - 1

    def coils_on(self) -> int:
        """Number of coils set to 1."""
        return sum(byte.bit_count() for byte in self._buffer)

    def coils_off(self) -> int:
        """Number of coils set to 0."""
        return self._size - self.coils_on()

    # -- display --------------------------------------------------------------

    def format(self, label: str = "") -> str:
        """Render the coils as groups of four digits after ``label``, wrapping near 80 columns."""
        parts = [label]
        label_len = len(label)
        pos = label_len
        for index, bit in enumerate(self):
            parts.append("1" if bit else "0")
            pos += 1
            if index % 4 == 3:
                if pos >= _LINE_LIMIT:
                    parts.append("\n")
                    parts.append(" " * label_len)
                    pos = label_len + 1
                else:
                    parts.append(" ")
                    pos += 1
        parts.append("\n")
        return "".join(parts)

    def print(self, label: str = "", stream: TextIO | None = None) -> None:
        """Write :meth:`format` output to ``stream`` (standard output by default)."""
        (stream if stream is not None else sys.stdout).write(self.format(label))