"""Machine words: fixed-size cells that hold either an integer or a string."""

from __future__ import annotations

import enum
import re

WORD_SIZE = 16
PAGE_SIZE = 512
MEMORY_PAGES = 128
INSTRUCTION_SIZE = 2

_INT_PREFIX = re.compile(rb"[ \t\n\v\f\r]*([+-]?[0-9]+)")


def _wrap_int(value: int) -> int:
    """Reduce an integer to the signed 32-bit range."""
    return (value + 2**31) % 2**32 - 2**31


class WordType(enum.IntEnum):
    """Kind of value a word currently holds."""

    STRING = 0
    INTEGER = 1


class Word:
    """A 16-byte machine word stored as raw bytes."""

    __slots__ = ("data",)

    def __init__(self, text: str = "") -> None:
        self.data = bytearray(WORD_SIZE)
        if text:
            self.store_str(text)

    def _content(self) -> bytes:
        return bytes(self.data).split(b"\0", 1)[0]

    def value_type(self) -> WordType:
        """Return INTEGER if the word reads as an optionally signed number."""
        content = self._content()
        if content[:1] in (b"+", b"-"):
            content = content[1:]
        if all(0x30 <= byte <= 0x39 for byte in content):
            return WordType.INTEGER
        return WordType.STRING

    def to_int(self) -> int:
        """Parse a leading integer the way atoi does; 0 when there is none."""
        match = _INT_PREFIX.match(self._content())
        if match is None:
            return 0
        return _wrap_int(int(match.group(1)))

    def to_str(self) -> str:
        """Return the text up to the first NUL byte."""
        return self._content().decode("latin-1")

    def store_int(self, value: int) -> None:
        """Write the decimal form of a 32-bit integer, NUL terminated.

        Bytes after the terminator are left as they were.
        """
        encoded = str(_wrap_int(value)).encode("ascii") + b"\0"
        self.data[: len(encoded)] = encoded

    def store_str(self, text: str) -> None:
        """Store text, truncated to the word size and padded with NULs."""
        raw = text.encode("latin-1", errors="replace").split(b"\0", 1)[0]
        self.data[:] = raw[:WORD_SIZE].ljust(WORD_SIZE, b"\0")

    def copy_from(self, other: "Word") -> None:
        """Copy every byte of another word into this one."""
        self.data[:] = other.data

    def encrypt(self) -> None:
        """Replace the word by the sum of its bytes taken as signed chars."""
        total = sum(byte - 256 if byte > 127 else byte for byte in self.data)
        self.store_int(total)

    def __str__(self) -> str:
        return self.to_str()

    def __repr__(self) -> str:
        return f"Word({self.to_str()!r})"