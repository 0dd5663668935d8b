"""The inode table and the root file held in the memory copy of the disk."""

from __future__ import annotations

from collections.abc import Iterable

from .layout import (
    BLOCK_SIZE,
    INODE,
    INODE_ENTRY_DATABLOCK,
    INODE_ENTRY_FILENAME,
    INODE_ENTRY_FILESIZE,
    INODE_ENTRY_FILETYPE,
    INODE_ENTRY_PERMISSION,
    INODE_ENTRY_SIZE,
    INODE_ENTRY_USERID,
    INODE_NUM_DATA_BLOCKS,
    NO_OF_INODE_BLOCKS,
    ROOTFILE,
    ROOTFILE_ENTRY_FILENAME,
    ROOTFILE_ENTRY_FILESIZE,
    ROOTFILE_ENTRY_FILETYPE,
    ROOTFILE_ENTRY_SIZE,
    USER_TABLE_OFFSET,
    FileType,
)
from .vdisk import VirtualDisk, atoi

_INODE_BASE = INODE * BLOCK_SIZE
_ROOTFILE_BASE = ROOTFILE * BLOCK_SIZE

# User id and permission recorded for each file type.
_OWNERSHIP = {
    FileType.ROOT: (0, 0),
    FileType.DATA: (1, 1),
    FileType.EXEC: (0, -1),
}


class InodeTable:
    """Reads and edits inode and root file entries on a virtual disk.

    Entry locations are word offsets from the start of the inode table.
    """

    def __init__(self, disk: VirtualDisk) -> None:
        self.disk = disk

    def find_empty_entry(self) -> int | None:
        """Return the location of the first unused entry, or None if full."""
        for number in range(INODE, INODE + NO_OF_INODE_BLOCKS):
            block = self.disk.blocks[number]
            for index in range(INODE_ENTRY_FILENAME, BLOCK_SIZE, INODE_ENTRY_SIZE):
                if atoi(block[index]) == -1:
                    return (number - INODE) * BLOCK_SIZE + index - INODE_ENTRY_FILENAME
        return None

    def find(self, name: str | None) -> int | None:
        """Return the location of the entry for a file name, or None."""
        if name is None:
            return None
        last = INODE + NO_OF_INODE_BLOCKS - 1
        for number in range(INODE, INODE + NO_OF_INODE_BLOCKS):
            block = self.disk.blocks[number]
            for index in range(INODE_ENTRY_FILENAME, BLOCK_SIZE, INODE_ENTRY_SIZE):
                if number == last and index >= USER_TABLE_OFFSET - BLOCK_SIZE:
                    continue
                word = block[index]
                if word == name and atoi(word) != -1:
                    return (number - INODE) * BLOCK_SIZE + index - INODE_ENTRY_FILENAME
        return None

    def add_entry(
        self,
        start: int,
        file_type: int,
        name: str,
        size: int,
        blocks: Iterable[int],
    ) -> None:
        """Fill an inode entry and the matching root file entry."""
        base = _INODE_BASE + start
        disk = self.disk
        disk.store_value_at(base + INODE_ENTRY_FILETYPE, int(file_type))
        disk.store_string_at(base + INODE_ENTRY_FILENAME, name)
        disk.store_value_at(base + INODE_ENTRY_FILESIZE, size)

        try:
            ownership = _OWNERSHIP.get(FileType(file_type))
        except ValueError:
            ownership = None
        if ownership is not None:
            user_id, permission = ownership
            disk.store_value_at(base + INODE_ENTRY_USERID, user_id)
            disk.store_value_at(base + INODE_ENTRY_PERMISSION, permission)

        addresses = list(blocks)[:INODE_NUM_DATA_BLOCKS]
        addresses += [-1] * (INODE_NUM_DATA_BLOCKS - len(addresses))
        for offset, address in enumerate(addresses):
            disk.store_value_at(base + INODE_ENTRY_DATABLOCK + offset, address)

        self.add_rootfile_entry(
            start // INODE_ENTRY_SIZE * ROOTFILE_ENTRY_SIZE, file_type, name, size
        )

    def add_rootfile_entry(self, start: int, file_type: int, name: str, size: int) -> None:
        """Fill the name, size and type of a root file entry."""
        base = _ROOTFILE_BASE + start
        self.disk.store_string_at(base + ROOTFILE_ENTRY_FILENAME, name)
        self.disk.store_value_at(base + ROOTFILE_ENTRY_FILESIZE, size)
        self.disk.store_value_at(base + ROOTFILE_ENTRY_FILETYPE, int(file_type))

    def remove_entry(self, location: int) -> None:
        """Reset an inode entry and its root file entry to unused values."""
        base = _INODE_BASE + location
        disk = self.disk
        disk.store_value_at(base + INODE_ENTRY_FILETYPE, -1)
        disk.store_value_at(base + INODE_ENTRY_FILENAME, -1)
        disk.store_value_at(base + INODE_ENTRY_FILESIZE, 0)
        disk.store_value_at(base + INODE_ENTRY_USERID, -1)
        disk.store_value_at(base + INODE_ENTRY_PERMISSION, -1)
        for offset in range(INODE_NUM_DATA_BLOCKS):
            disk.store_value_at(base + INODE_ENTRY_DATABLOCK + offset, -1)
        self.remove_rootfile_entry(location // INODE_ENTRY_SIZE * ROOTFILE_ENTRY_SIZE)

    def remove_rootfile_entry(self, location: int) -> None:
        """Reset a root file entry to unused values."""
        base = _ROOTFILE_BASE + location
        self.disk.store_value_at(base + ROOTFILE_ENTRY_FILETYPE, -1)
        self.disk.store_value_at(base + ROOTFILE_ENTRY_FILENAME, -1)
        self.disk.store_value_at(base + ROOTFILE_ENTRY_FILESIZE, 0)

    def data_blocks(self, location: int) -> list[int]:
        """Return the data block numbers recorded in an inode entry."""
        base = _INODE_BASE + location + INODE_ENTRY_DATABLOCK
        return [self.disk.value_at(base + offset) for offset in range(INODE_NUM_DATA_BLOCKS)]