"""The machine's disk: an in-memory image of a disk file."""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path

from .word import PAGE_SIZE, WORD_SIZE, Word

BLOCK_COUNT = 512
BLOCK_SIZE = PAGE_SIZE
BLOCK_BYTES = BLOCK_SIZE * WORD_SIZE
DISK_BYTES = BLOCK_COUNT * BLOCK_BYTES
DEFAULT_DISK = "../xfs-interface/disk.xfs"


class Disk:
    """Holds a copy of the disk file in memory and writes it back on close."""

    def __init__(self, path: str | os.PathLike = DEFAULT_DISK) -> None:
        self.path = Path(path)
        self._image = bytearray(DISK_BYTES)
        try:
            with open(self.path, "rb") as handle:
                data = handle.read(DISK_BYTES)
        except FileNotFoundError:
            with open(self.path, "wb"):
                pass
            data = b""
        self._image[: len(data)] = data

    def __enter__(self) -> "Disk":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _offset(self, number: int) -> int:
        if not 0 <= number < BLOCK_COUNT:
            raise IndexError(f"block {number} is outside the disk")
        return number * BLOCK_BYTES

    def block(self, number: int) -> bytes:
        """Return the raw bytes of a block."""
        offset = self._offset(number)
        return bytes(self._image[offset : offset + BLOCK_BYTES])

    def read_block(self, page: Sequence[Word], number: int) -> None:
        """Copy a disk block into the words of a memory page."""
        start = self._offset(number)
        for word, offset in zip(page, range(start, start + BLOCK_BYTES, WORD_SIZE)):
            word.data[:] = self._image[offset : offset + WORD_SIZE]

    def write_page(self, page: Sequence[Word], number: int) -> None:
        """Copy the words of a memory page into a disk block."""
        start = self._offset(number)
        for word, offset in zip(page, range(start, start + BLOCK_BYTES, WORD_SIZE)):
            self._image[offset : offset + WORD_SIZE] = word.data

    def close(self) -> int:
        """Write the image back to the disk file; return the bytes written."""
        with open(self.path, "wb") as handle:
            return handle.write(self._image)