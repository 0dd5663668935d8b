"""The disk file and its in-memory copy."""

from __future__ import annotations

import itertools
import os
import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from .errors import DiskCreateError, DiskOpenError
from .layout import (
    BLOCK_SIZE,
    DATA_START_BLOCK,
    DISK_FREE_LIST,
    INODE,
    INODE_ENTRY_FILENAME,
    INODE_ENTRY_FILESIZE,
    INODE_ENTRY_SIZE,
    NO_OF_DISK_BLOCKS,
    NO_OF_FREE_LIST_BLOCKS,
    NO_OF_INODE_BLOCKS,
    NO_OF_ROOTFILE_BLOCKS,
    ROOTFILE,
    ROOTFILE_ENTRY_FILENAME,
    ROOTFILE_ENTRY_FILESIZE,
    ROOTFILE_ENTRY_SIZE,
    TEMP_BLOCK,
    USER_TABLE_OFFSET,
    WORD_SIZE,
    XFS_NUM_BLOCKS,
)

BLOCK_BYTES = BLOCK_SIZE * WORD_SIZE

_INT_PREFIX = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")


def atoi(text: str) -> int:
    """Parse a leading integer; 0 when the text does not start with one."""
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def _encode(text: str) -> bytes:
    raw = text.encode("latin-1", errors="replace")
    return raw[:WORD_SIZE].ljust(WORD_SIZE, b"\0")


def _decode(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("latin-1")


@dataclass
class XosFile:
    """A file listed in the inode table."""

    name: str
    size: int


class VirtualDisk:
    """The disk file together with a memory copy of its blocks."""

    def __init__(self, path: str | os.PathLike) -> None:
        self.path = Path(path)
        self.blocks: list[list[str]] = [
            [""] * BLOCK_SIZE for _ in range(XFS_NUM_BLOCKS)
        ]

    def _open(self, mode: str):
        try:
            return open(self.path, mode)
        except OSError as exc:
            raise DiskOpenError() from exc

    def check_exists(self) -> None:
        """Raise DiskOpenError unless the disk file can be opened."""
        self._open("rb").close()

    def create(self, format: bool) -> None:
        """Create the disk file; truncate it when *format* is true."""
        try:
            with open(self.path, "wb" if format else "ab"):
                pass
        except OSError as exc:
            raise DiskCreateError() from exc

    def read_block(self, virtual_block: int, file_block: int) -> None:
        """Read a block of the disk file into a block of the memory copy."""
        with self._open("rb") as handle:
            handle.seek(BLOCK_BYTES * file_block)
            data = handle.read(BLOCK_BYTES)
        block = self.blocks[virtual_block]
        for index in range(BLOCK_SIZE):
            chunk = data[index * WORD_SIZE : (index + 1) * WORD_SIZE]
            if not chunk:
                break
            block[index] = _decode(chunk)

    def write_block(self, virtual_block: int, file_block: int) -> None:
        """Write a block of the memory copy to a block of the disk file."""
        payload = b"".join(_encode(word) for word in self.blocks[virtual_block])
        with self._open("r+b") as handle:
            handle.seek(BLOCK_BYTES * file_block)
            handle.write(payload)

    def empty_block(self, number: int) -> None:
        self.blocks[number] = [""] * BLOCK_SIZE

    def free_blocks(self, blocks: Iterable[int]) -> None:
        """Mark blocks free and clear them on disk, up to the first -1 or 0."""
        for block in itertools.takewhile(lambda b: b not in (-1, 0), blocks):
            self.store_value_at(DISK_FREE_LIST * BLOCK_SIZE + block, 0)
            self.empty_block(TEMP_BLOCK)
            self.write_block(TEMP_BLOCK, block)

    def find_free_block(self) -> int | None:
        """Claim the first free block and return its number, or None."""
        for offset in range(NO_OF_FREE_LIST_BLOCKS):
            words = self.blocks[DISK_FREE_LIST + offset]
            for index, word in enumerate(words):
                if atoi(word) == 0:
                    words[index] = "1"
                    return offset * BLOCK_SIZE + index
        return None

    def set_defaults(self, structure: int) -> None:
        """Fill the free list, inode table or root file with default values."""
        if structure == DISK_FREE_LIST:
            for number in range(NO_OF_FREE_LIST_BLOCKS * BLOCK_SIZE):
                free = DATA_START_BLOCK <= number < NO_OF_DISK_BLOCKS
                block = self.blocks[DISK_FREE_LIST + number // BLOCK_SIZE]
                block[number % BLOCK_SIZE] = "0" if free else "1"
        elif structure == INODE:
            self._default_entries(self.blocks[INODE], BLOCK_SIZE)
            second = self.blocks[INODE + 1]
            self._default_entries(second, USER_TABLE_OFFSET - BLOCK_SIZE)
            for index in range(USER_TABLE_OFFSET - BLOCK_SIZE, BLOCK_SIZE):
                second[index] = "-1"
        elif structure == ROOTFILE:
            for offset in range(NO_OF_ROOTFILE_BLOCKS):
                block = self.blocks[ROOTFILE + offset]
                block[:] = ["-1"] * BLOCK_SIZE
                for start in range(0, BLOCK_SIZE, ROOTFILE_ENTRY_SIZE):
                    block[start + ROOTFILE_ENTRY_FILESIZE] = "0"
                    block[start + ROOTFILE_ENTRY_FILENAME] = "-1"
        else:
            raise ValueError(f"unknown disk structure {structure}")

    @staticmethod
    def _default_entries(block: list[str], end: int) -> None:
        block[:end] = ["-1"] * end
        for start in range(0, end, INODE_ENTRY_SIZE):
            block[start + INODE_ENTRY_FILESIZE] = "0"
            block[start + INODE_ENTRY_FILENAME] = "-1"

    def commit(self, structure: int) -> None:
        """Write a structure to disk; the inode table carries the root file."""
        if structure == DISK_FREE_LIST:
            numbers = range(DISK_FREE_LIST, DISK_FREE_LIST + NO_OF_FREE_LIST_BLOCKS)
        elif structure == INODE:
            numbers = itertools.chain(
                range(INODE, INODE + NO_OF_INODE_BLOCKS),
                range(ROOTFILE, ROOTFILE + NO_OF_ROOTFILE_BLOCKS),
            )
        elif structure == ROOTFILE:
            numbers = range(ROOTFILE, ROOTFILE + NO_OF_ROOTFILE_BLOCKS)
        else:
            raise ValueError(f"unknown disk structure {structure}")
        for number in numbers:
            self.write_block(number, number)

    def files(self) -> list[XosFile]:
        """Return the files recorded in the inode table."""
        self.check_exists()
        last = INODE + NO_OF_INODE_BLOCKS - 1
        found = []
        for number in range(INODE, INODE + NO_OF_INODE_BLOCKS):
            block = self.blocks[number]
            for start in range(0, BLOCK_SIZE, INODE_ENTRY_SIZE):
                name = block[start + INODE_ENTRY_FILENAME]
                if atoi(name) == -1:
                    continue
                if number == last and start >= USER_TABLE_OFFSET - BLOCK_SIZE:
                    continue
                found.append(XosFile(name, atoi(block[start + INODE_ENTRY_FILESIZE])))
        return found

    def load(self) -> None:
        """Read the free list, inode table and root file from the disk file."""
        for first, count in (
            (DISK_FREE_LIST, NO_OF_FREE_LIST_BLOCKS),
            (INODE, NO_OF_INODE_BLOCKS),
            (ROOTFILE, NO_OF_ROOTFILE_BLOCKS),
        ):
            for number in range(first, first + count):
                self.read_block(number, number)

    def clear(self) -> None:
        """Wipe the memory copy of the disk."""
        for number in range(XFS_NUM_BLOCKS):
            self.empty_block(number)

    def value_at(self, address: int) -> int:
        return atoi(self.string_at(address))

    def store_value_at(self, address: int, value: int) -> None:
        self.store_string_at(address, str(value))

    def string_at(self, address: int) -> str:
        return self.blocks[address // BLOCK_SIZE][address % BLOCK_SIZE]

    def store_string_at(self, address: int, text: str) -> None:
        self.blocks[address // BLOCK_SIZE][address % BLOCK_SIZE] = text