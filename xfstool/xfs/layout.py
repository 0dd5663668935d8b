"""Disk and memory layout of the file system."""

from __future__ import annotations

import enum

WORD_SIZE = 16
BLOCK_SIZE = 512
PAGE_SIZE = 512
INSTRUCTION_SIZE = 2

OS_STARTUP_CODE = 0
DISK_FREE_LIST = 2
INODE = 3
ROOTFILE = 5
INIT_BLOCK = 7
SHELL_BLOCK = 9
IDLE_BLOCK = 11
LIBRARY_BLOCK = 13

EX_HANDLER = 15
TIMERINT = 17
DISKCONTROLLER_INT = 19
CONSOLE_INT = 21
INT1 = TIMERINT
MOD0 = 53

OS_STARTUP_CODE_SIZE = 1
NO_OF_FREE_LIST_BLOCKS = 1
NO_OF_ROOTFILE_BLOCKS = 1
NO_OF_INIT_BLOCKS = 2
NO_OF_SHELL_BLOCKS = 2
NO_OF_IDLE_BLOCKS = 2
NO_OF_LIBRARY_BLOCKS = 2
EX_HANDLER_SIZE = 2
TIMERINT_SIZE = 2
DISKCONTROLLER_INT_SIZE = 2
CONSOLE_INT_SIZE = 2
INT_SIZE = 2
MOD_SIZE = 2

NO_OF_INODE_BLOCKS = 2
NO_OF_INTERRUPTS = 18
NO_OF_MODULES = 11

DATA_START_BLOCK = 69
NO_OF_DATA_BLOCKS = 187
SWAP_START_BLOCK = 256
NO_OF_SWAP_BLOCKS = 256
NO_OF_DISK_BLOCKS = 512
DISK_SIZE = NO_OF_DISK_BLOCKS * BLOCK_SIZE

INODE_MAX_FILE_NUM = 60
INODE_MAX_BLOCK_NUM = 4

INODE_ENTRY_FILETYPE = 0
INODE_ENTRY_FILENAME = 1
INODE_ENTRY_FILESIZE = 2
INODE_ENTRY_USERID = 3
INODE_ENTRY_PERMISSION = 4
INODE_ENTRY_DATABLOCK = 8
INODE_NUM_DATA_BLOCKS = INODE_MAX_BLOCK_NUM
INODE_ENTRY_SIZE = 16
INODE_SIZE = NO_OF_INODE_BLOCKS * BLOCK_SIZE

# Offset inside the inode area where the user table begins.
USER_TABLE_OFFSET = 960

ROOTFILE_ENTRY_FILENAME = 0
ROOTFILE_ENTRY_FILESIZE = 1
ROOTFILE_ENTRY_FILETYPE = 2
ROOTFILE_ENTRY_USERNAME = 3
ROOTFILE_ENTRY_PERMISSION = 4
ROOTFILE_ENTRY_SIZE = 8

XFS_NUM_BLOCKS = 512
TEMP_BLOCK = 69

MEM_OS_STARTUP_CODE = 1
MEM_EX_HANDLER = 2
MEM_INT1 = 4
MEM_TIMERINT = 4
MEM_DISKCONTROLLER_INT = 6
MEM_CONSOLE_INT = 8
MEM_MOD0 = 40
MEM_INIT_PAGE = 65
MEM_LIBRARY_PAGE = 63
MEM_INIT_BASIC_BLOCK = 65
MEM_INT_SIZE = 2
MEM_MOD_SIZE = 2


class FileType(enum.IntEnum):
    """Type of a file recorded in the inode table."""

    ROOT = 1
    DATA = 2
    EXEC = 3


def interrupt_blocks(number: int) -> range:
    """Return the disk blocks that hold interrupt routine *number*."""
    start = (number - 1) * INT_SIZE + INT1
    return range(start, start + INT_SIZE)


def module_blocks(number: int) -> range:
    """Return the disk blocks that hold module *number*."""
    start = number * MOD_SIZE + MOD0
    return range(start, start + MOD_SIZE)


def interrupt_page(number: int) -> int:
    """Return the memory page where interrupt routine *number* is loaded."""
    return (number - 1) * MEM_INT_SIZE + MEM_INT1


def module_page(number: int) -> int:
    """Return the memory page where module *number* is loaded."""
    return number * MEM_MOD_SIZE + MEM_MOD0