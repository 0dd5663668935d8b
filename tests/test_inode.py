import pytest

from xfstool.xfs.inode import InodeTable
from xfstool.xfs.layout import (
    BLOCK_SIZE,
    INODE,
    INODE_ENTRY_PERMISSION,
    INODE_ENTRY_SIZE,
    INODE_ENTRY_USERID,
    ROOTFILE,
    ROOTFILE_ENTRY_SIZE,
    USER_TABLE_OFFSET,
    FileType,
)
from xfstool.xfs.vdisk import VirtualDisk


@pytest.fixture
def disk(tmp_path):
    vdisk = VirtualDisk(tmp_path / "disk.xfs")
    vdisk.set_defaults(INODE)
    vdisk.set_defaults(ROOTFILE)
    return vdisk


@pytest.fixture
def table(disk):
    return InodeTable(disk)


def test_empty_table_has_first_entry_free(table):
    assert table.find_empty_entry() == 0


def test_add_and_find_entry(table):
    table.add_entry(0, FileType.ROOT, "root", BLOCK_SIZE, [5, -1, -1, -1])
    assert table.find("root") == 0
    assert table.data_blocks(0) == [5, -1, -1, -1]
    assert table.find_empty_entry() == INODE_ENTRY_SIZE


def test_add_entry_writes_rootfile(table, disk):
    location = 2 * INODE_ENTRY_SIZE
    table.add_entry(location, FileType.DATA, "notes.dat", 40, [70, 71])
    root_base = ROOTFILE * BLOCK_SIZE + 2 * ROOTFILE_ENTRY_SIZE
    assert disk.string_at(root_base) == "notes.dat"
    assert disk.value_at(root_base + 1) == 40
    assert disk.value_at(root_base + 2) == int(FileType.DATA)


def test_blocks_are_padded(table):
    table.add_entry(0, FileType.DATA, "a.dat", 10, [80])
    assert table.data_blocks(0) == [80, -1, -1, -1]


@pytest.mark.parametrize(
    "file_type, expected",
    [(FileType.ROOT, (0, 0)), (FileType.DATA, (1, 1)), (FileType.EXEC, (0, -1))],
)
def test_ownership_by_type(table, disk, file_type, expected):
    table.add_entry(0, file_type, "f", 1, [70])
    base = INODE * BLOCK_SIZE
    assert (
        disk.value_at(base + INODE_ENTRY_USERID),
        disk.value_at(base + INODE_ENTRY_PERMISSION),
    ) == expected


def test_remove_entry(table, disk):
    table.add_entry(INODE_ENTRY_SIZE, FileType.EXEC, "prog.xsm", 20, [90, 91])
    location = table.find("prog.xsm")
    assert location == INODE_ENTRY_SIZE
    table.remove_entry(location)
    assert table.find("prog.xsm") is None
    assert table.data_blocks(location) == [-1, -1, -1, -1]
    root_base = ROOTFILE * BLOCK_SIZE + ROOTFILE_ENTRY_SIZE
    assert disk.value_at(root_base) == -1
    assert disk.value_at(root_base + 1) == 0
    assert table.find_empty_entry() == 0


def test_find_unknown_and_none(table):
    assert table.find("missing") is None
    assert table.find(None) is None


def test_find_skips_user_table_region(table, disk):
    address = (INODE + 1) * BLOCK_SIZE + (USER_TABLE_OFFSET - BLOCK_SIZE) + 1
    disk.store_string_at(address, "ghost")
    assert table.find("ghost") is None


def test_empty_entry_moves_to_second_block(table):
    for start in range(0, BLOCK_SIZE, INODE_ENTRY_SIZE):
        table.add_entry(start, FileType.DATA, f"f{start}", 1, [70])
    assert table.find_empty_entry() == BLOCK_SIZE
    assert table.find(f"f{BLOCK_SIZE - INODE_ENTRY_SIZE}") == BLOCK_SIZE - INODE_ENTRY_SIZE


def test_full_table_returns_none(table, disk):
    for number in (INODE, INODE + 1):
        for index in range(1, BLOCK_SIZE, INODE_ENTRY_SIZE):
            disk.blocks[number][index] = "used"
    assert table.find_empty_entry() is None