"""High-level operations on a disk file: formatting, loading and removing files."""

from __future__ import annotations

import io
import itertools
import math
import os
from collections.abc import Iterable
from pathlib import Path
from typing import TextIO

from .codeblocks import (
    add_extension,
    data_word_count,
    encode_assembly_block,
    encode_data_block,
    executable_line_count,
    expand_path,
)
from .errors import XfsError
from .inode import InodeTable
from .labels import LabelTable
from .layout import (
    BLOCK_SIZE,
    CONSOLE_INT,
    CONSOLE_INT_SIZE,
    DISK_FREE_LIST,
    DISKCONTROLLER_INT,
    DISKCONTROLLER_INT_SIZE,
    EX_HANDLER,
    EX_HANDLER_SIZE,
    IDLE_BLOCK,
    INIT_BLOCK,
    INODE,
    INODE_MAX_BLOCK_NUM,
    INODE_NUM_DATA_BLOCKS,
    LIBRARY_BLOCK,
    MEM_CONSOLE_INT,
    MEM_DISKCONTROLLER_INT,
    MEM_EX_HANDLER,
    MEM_OS_STARTUP_CODE,
    MEM_TIMERINT,
    NO_OF_FREE_LIST_BLOCKS,
    NO_OF_IDLE_BLOCKS,
    NO_OF_INIT_BLOCKS,
    NO_OF_INODE_BLOCKS,
    NO_OF_LIBRARY_BLOCKS,
    NO_OF_ROOTFILE_BLOCKS,
    NO_OF_SHELL_BLOCKS,
    OS_STARTUP_CODE,
    OS_STARTUP_CODE_SIZE,
    PAGE_SIZE,
    ROOTFILE,
    SHELL_BLOCK,
    TEMP_BLOCK,
    TIMERINT,
    TIMERINT_SIZE,
    USER_TABLE_OFFSET,
    FileType,
    interrupt_blocks,
    interrupt_page,
    module_blocks,
    module_page,
)
from .vdisk import VirtualDisk, XosFile


def _read_source(path: str) -> str:
    with open(path, encoding="latin-1", newline="\n") as handle:
        return handle.read()


def _base_name(path: str) -> str:
    return path.rsplit("/", 1)[-1][:15]


class XfsDisk:
    """A disk file with its inode table, root file and free list."""

    def __init__(self, path: str | os.PathLike) -> None:
        self.disk = VirtualDisk(path)
        self.inodes = InodeTable(self.disk)
        self.labels = LabelTable()
        if Path(path).is_file():
            self.disk.load()

    # -- block helpers -------------------------------------------------

    def _write_words(self, words: Iterable[str], block: int) -> None:
        self.disk.blocks[TEMP_BLOCK] = list(words)
        self.disk.write_block(TEMP_BLOCK, block)

    def _read_words(self, block: int) -> list[str]:
        self.disk.empty_block(TEMP_BLOCK)
        self.disk.read_block(TEMP_BLOCK, block)
        words = list(self.disk.blocks[TEMP_BLOCK])
        self.disk.empty_block(TEMP_BLOCK)
        return words

    def _file_blocks(self, name: str) -> list[int]:
        self.disk.check_exists()
        location = self.inodes.find(name)
        if location is None:
            raise FileNotFoundError(f"File '{name}' not found!")
        blocks = self.inodes.data_blocks(location)
        return list(itertools.takewhile(lambda number: number > 0, blocks))

    def _claim_blocks(self, count: int) -> list[int]:
        claimed: list[int] = []
        for _ in range(count):
            number = self.disk.find_free_block()
            if number is None:
                self.disk.free_blocks(claimed)
                raise XfsError("Disk does not have enough space to contain the file.")
            claimed.append(number)
        return claimed

    def _reserve_entry(self, filename: str, claimed: list[int]) -> int:
        if self.inodes.find(filename) is not None:
            self.disk.free_blocks(claimed)
            raise XfsError(
                "Disk already contains the file with this name. "
                "Try again with a different name."
            )
        entry = self.inodes.find_empty_entry()
        if entry is None:
            self.disk.free_blocks(claimed)
            raise XfsError("No free INODE entry found.")
        return entry

    def _load_stream(self, stream: TextIO, start: int, count: int) -> None:
        filled = False
        for number in range(start, start + count):
            words, filled = encode_assembly_block(stream)
            self._write_words(words, number)
            if not filled:
                break
        if filled:
            self.clear_blocks(start, count)
            raise XfsError(f"Code exceeds {count} block")

    # -- formatting and listing ---------------------------------------

    def format(self, format: bool) -> None:
        """Create the disk file; when *format* is true, lay out a new file system."""
        self.disk.create(False)
        if not format:
            return
        disk = self.disk
        disk.clear()
        disk.set_defaults(DISK_FREE_LIST)
        disk.commit(DISK_FREE_LIST)
        disk.set_defaults(INODE)
        disk.set_defaults(ROOTFILE)

        root_blocks = [ROOTFILE + offset for offset in range(NO_OF_ROOTFILE_BLOCKS)]
        root_blocks += [-1] * (INODE_NUM_DATA_BLOCKS - len(root_blocks))
        self.inodes.add_entry(
            0, FileType.ROOT, "root", NO_OF_ROOTFILE_BLOCKS * BLOCK_SIZE, root_blocks
        )

        user_table = INODE * BLOCK_SIZE + USER_TABLE_OFFSET
        for offset, text in enumerate(("kernel", "-1", "root", "452")):
            disk.store_string_at(user_table + offset, text)

        disk.commit(INODE)
        disk.commit(ROOTFILE)

    def files(self) -> list[XosFile]:
        """Return the files on the disk."""
        return self.disk.files()

    def file_lines(self, name: str) -> list[str]:
        """Return the non-empty words stored in a file."""
        return [
            word
            for block in self._file_blocks(name)
            for word in self._read_words(block)
            if word
        ]

    def export_file(self, name: str, unix_path: str) -> None:
        """Write every word of a file, one per line, to a host file."""
        blocks = self._file_blocks(name)
        with open(expand_path(unix_path), "w", encoding="latin-1", newline="\n") as out:
            for block in blocks:
                for word in self._read_words(block):
                    out.write(f"{word}\n")

    def clear_blocks(self, start: int, count: int) -> None:
        """Overwrite a run of disk blocks with empty words."""
        self.disk.empty_block(TEMP_BLOCK)
        for number in range(start, start + count):
            self.disk.write_block(TEMP_BLOCK, number)

    def copy_blocks_to_file(self, start: int, end: int, path: str) -> None:
        """Write the words of blocks *start* to *end* inclusive to a host file."""
        self.disk.check_exists()
        with open(expand_path(path), "w", encoding="latin-1", newline="\n") as out:
            for number in range(start, end + 1):
                for word in self._read_words(number):
                    out.write(f"{word}\n")

    def free_list(self) -> list[str]:
        """Return the entries of the disk free list ("0" marks a free block)."""
        self.disk.check_exists()
        return [
            word
            for offset in range(NO_OF_FREE_LIST_BLOCKS)
            for word in self.disk.blocks[DISK_FREE_LIST + offset]
        ]

    # -- code loading --------------------------------------------------

    def load_code(self, path: str, start_block: int, count: int) -> None:
        """Store an assembly file in a fixed run of blocks."""
        text = _read_source(expand_path(path))
        self._load_stream(io.StringIO(text), start_block, count)

    def load_code_with_labels(
        self, path: str, start_block: int, count: int, mem_page: int
    ) -> None:
        """Resolve labels against a load page, then store the code."""
        self.labels.reset()
        lines = self.labels.resolve(expand_path(path), mem_page * PAGE_SIZE)
        text = "".join(f"{line}\n" for line in lines)
        self._load_stream(io.StringIO(text), start_block, count)

    def load_os_code(self, path: str) -> None:
        self.load_code_with_labels(path, OS_STARTUP_CODE, OS_STARTUP_CODE_SIZE, MEM_OS_STARTUP_CODE)

    def load_timer_code(self, path: str) -> None:
        self.load_code_with_labels(path, TIMERINT, TIMERINT_SIZE, MEM_TIMERINT)

    def load_disk_controller_code(self, path: str) -> None:
        self.load_code_with_labels(
            path, DISKCONTROLLER_INT, DISKCONTROLLER_INT_SIZE, MEM_DISKCONTROLLER_INT
        )

    def load_console_code(self, path: str) -> None:
        self.load_code_with_labels(path, CONSOLE_INT, CONSOLE_INT_SIZE, MEM_CONSOLE_INT)

    def load_exception_handler(self, path: str) -> None:
        self.load_code_with_labels(path, EX_HANDLER, EX_HANDLER_SIZE, MEM_EX_HANDLER)

    def load_interrupt_code(self, path: str, number: int) -> None:
        blocks = interrupt_blocks(number)
        self.load_code_with_labels(path, blocks.start, len(blocks), interrupt_page(number))

    def load_module_code(self, path: str, number: int) -> None:
        blocks = module_blocks(number)
        self.load_code_with_labels(path, blocks.start, len(blocks), module_page(number))

    def load_init_code(self, path: str) -> None:
        self.load_code(path, INIT_BLOCK, NO_OF_INIT_BLOCKS)

    def load_idle_code(self, path: str) -> None:
        self.load_code(path, IDLE_BLOCK, NO_OF_IDLE_BLOCKS)

    def load_shell_code(self, path: str) -> None:
        self.load_code(path, SHELL_BLOCK, NO_OF_SHELL_BLOCKS)

    def load_library_code(self, path: str) -> None:
        self.load_code(path, LIBRARY_BLOCK, NO_OF_LIBRARY_BLOCKS)

    # -- files ---------------------------------------------------------

    def load_data_file(self, path: str) -> None:
        """Store a data file on the disk under its base name with ".dat"."""
        filename = add_extension(_base_name(path), ".dat")
        text = _read_source(expand_path(path))
        words = data_word_count(text)
        needed = math.ceil(words / BLOCK_SIZE)
        if needed > INODE_MAX_BLOCK_NUM:
            raise XfsError(
                f"The size of file exceeds {INODE_MAX_BLOCK_NUM} blocks: the file "
                f"contains {words} words, an xfs file can have only upto "
                f"{INODE_MAX_BLOCK_NUM * BLOCK_SIZE} words"
            )
        claimed = self._claim_blocks(needed)
        entry = self._reserve_entry(filename, claimed)

        self.disk.commit(DISK_FREE_LIST)
        stream = io.StringIO(text)
        for number in claimed:
            block, _ = encode_data_block(stream)
            self._write_words(block, number)

        self.inodes.add_entry(entry, FileType.DATA, filename, words, claimed)
        self.disk.commit(INODE)

    def load_executable(self, path: str) -> None:
        """Store an executable on the disk under its base name with ".xsm"."""
        filename = add_extension(_base_name(path), ".xsm")
        text = _read_source(expand_path(path))
        lines = executable_line_count(text)
        needed = lines // (BLOCK_SIZE // 2) + 1
        if needed > INODE_MAX_BLOCK_NUM:
            raise XfsError(f"The size of file exceeds {INODE_MAX_BLOCK_NUM} blocks")
        claimed = self._claim_blocks(needed)
        entry = self._reserve_entry(filename, claimed)

        self.disk.commit(DISK_FREE_LIST)
        stream = io.StringIO(text)
        for number in claimed:
            block, _ = encode_assembly_block(stream)
            self._write_words(block, number)

        self.inodes.add_entry(entry, FileType.EXEC, filename, lines * 2, claimed)
        self.disk.commit(INODE)

    # -- removal -------------------------------------------------------

    def delete_os_code(self) -> None:
        self.clear_blocks(OS_STARTUP_CODE, OS_STARTUP_CODE_SIZE)

    def delete_timer_code(self) -> None:
        self.clear_blocks(TIMERINT, TIMERINT_SIZE)

    def delete_disk_controller_code(self) -> None:
        self.clear_blocks(DISKCONTROLLER_INT, DISKCONTROLLER_INT_SIZE)

    def delete_console_code(self) -> None:
        self.clear_blocks(CONSOLE_INT, CONSOLE_INT_SIZE)

    def delete_exception_handler(self) -> None:
        self.clear_blocks(EX_HANDLER, EX_HANDLER_SIZE)

    def delete_interrupt_code(self, number: int) -> None:
        blocks = interrupt_blocks(number)
        self.clear_blocks(blocks.start, len(blocks))

    def delete_module_code(self, number: int) -> None:
        blocks = module_blocks(number)
        self.clear_blocks(blocks.start, len(blocks))

    def delete_init_code(self) -> None:
        self.clear_blocks(INIT_BLOCK, NO_OF_INIT_BLOCKS)

    def delete_idle_code(self) -> None:
        self.clear_blocks(IDLE_BLOCK, NO_OF_IDLE_BLOCKS)

    def delete_shell_code(self) -> None:
        self.clear_blocks(SHELL_BLOCK, NO_OF_SHELL_BLOCKS)

    def delete_library_code(self) -> None:
        self.clear_blocks(LIBRARY_BLOCK, NO_OF_LIBRARY_BLOCKS)

    def delete_file(self, name: str) -> None:
        """Remove a data or executable file and free its blocks."""
        if name == "root":
            raise XfsError("Root file cannot be deleted")
        self.disk.check_exists()
        location = self.inodes.find(name)
        if location is None:
            raise FileNotFoundError(f"File '{name}' not found!")
        self.disk.free_blocks(self.inodes.data_blocks(location))
        self.inodes.remove_entry(location)
        self.disk.commit(INODE)
        self.disk.commit(DISK_FREE_LIST)

    def dump_root_file(self, path: str) -> None:
        self.copy_blocks_to_file(ROOTFILE, ROOTFILE + NO_OF_ROOTFILE_BLOCKS - 1, path)

    def dump_inode_table(self, path: str) -> None:
        self.copy_blocks_to_file(INODE, INODE + NO_OF_INODE_BLOCKS - 1, path)