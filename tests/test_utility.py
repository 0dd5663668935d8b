import pytest

from xfstool.xfs.codeblocks import executable_line_count
from xfstool.xfs.errors import DiskOpenError, XfsError
from xfstool.xfs.layout import (
    BLOCK_SIZE,
    DATA_START_BLOCK,
    INIT_BLOCK,
    INODE,
    MEM_OS_STARTUP_CODE,
    NO_OF_ROOTFILE_BLOCKS,
    OS_STARTUP_CODE,
    PAGE_SIZE,
    USER_TABLE_OFFSET,
    interrupt_blocks,
)
from xfstool.xfs.utility import XfsDisk
from xfstool.xfs.vdisk import XosFile


@pytest.fixture
def disk(tmp_path):
    xfs = XfsDisk(tmp_path / "disk.xfs")
    xfs.format(True)
    return xfs


def _write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text, encoding="latin-1")
    return str(path)


def _block_lines(xfs, tmp_path, block):
    out = tmp_path / "copy.txt"
    xfs.copy_blocks_to_file(block, block, str(out))
    return out.read_text(encoding="latin-1").split("\n")[:-1]


def test_format_creates_root_file(disk):
    assert disk.files() == [XosFile("root", NO_OF_ROOTFILE_BLOCKS * BLOCK_SIZE)]


def test_format_writes_user_table(disk):
    base = INODE * BLOCK_SIZE + USER_TABLE_OFFSET
    assert disk.disk.string_at(base) == "kernel"
    assert disk.disk.string_at(base + 2) == "root"


def test_free_list_after_format(disk):
    entries = disk.free_list()
    assert len(entries) == BLOCK_SIZE
    assert all(entry == "1" for entry in entries[:DATA_START_BLOCK])
    assert all(entry == "0" for entry in entries[DATA_START_BLOCK:])


def test_reopen_loads_tables(disk, tmp_path):
    reopened = XfsDisk(tmp_path / "disk.xfs")
    assert reopened.files() == disk.files()
    assert reopened.free_list() == disk.free_list()


def test_missing_disk_raises(tmp_path):
    xfs = XfsDisk(tmp_path / "absent.xfs")
    with pytest.raises(DiskOpenError):
        xfs.files()


def test_load_data_file(disk, tmp_path):
    free_before = disk.free_list().count("0")
    disk.load_data_file(_write(tmp_path, "nums.dat", "1\n2\n3\n"))
    assert XosFile("nums.dat", 3) in disk.files()
    assert disk.file_lines("nums.dat") == ["1", "2", "3"]
    assert disk.free_list().count("0") == free_before - 1


def test_load_data_file_persists(disk, tmp_path):
    disk.load_data_file(_write(tmp_path, "nums.dat", "7\n8\n"))
    reopened = XfsDisk(tmp_path / "disk.xfs")
    assert reopened.file_lines("nums.dat") == ["7", "8"]


def test_load_data_file_with_env_path(disk, tmp_path, monkeypatch):
    _write(tmp_path, "vals.dat", "5\n")
    monkeypatch.setenv("XFSDIR", str(tmp_path))
    disk.load_data_file("$XFSDIR/vals.dat")
    assert disk.file_lines("vals.dat") == ["5"]


def test_duplicate_file_rejected(disk, tmp_path):
    path = _write(tmp_path, "nums.dat", "1\n")
    disk.load_data_file(path)
    free_after_first = disk.free_list().count("0")
    with pytest.raises(XfsError):
        disk.load_data_file(path)
    assert disk.free_list().count("0") == free_after_first


def test_missing_source_file(disk, tmp_path):
    with pytest.raises(FileNotFoundError):
        disk.load_data_file(str(tmp_path / "none.dat"))


def test_delete_file_restores_free_list(disk, tmp_path):
    free_before = disk.free_list()
    disk.load_data_file(_write(tmp_path, "nums.dat", "1\n2\n"))
    disk.delete_file("nums.dat")
    assert [f.name for f in disk.files()] == ["root"]
    assert disk.free_list() == free_before


def test_delete_root_refused(disk):
    with pytest.raises(XfsError):
        disk.delete_file("root")


def test_delete_missing_file(disk):
    with pytest.raises(FileNotFoundError):
        disk.delete_file("ghost.dat")


def test_file_lines_missing(disk):
    with pytest.raises(FileNotFoundError):
        disk.file_lines("ghost.dat")


def test_export_file_round_trip(disk, tmp_path):
    disk.load_data_file(_write(tmp_path, "nums.dat", "10\n20\n"))
    out = tmp_path / "export.txt"
    disk.export_file("nums.dat", str(out))
    lines = out.read_text(encoding="latin-1").split("\n")[:-1]
    assert len(lines) == BLOCK_SIZE
    assert lines[:3] == ["10", "20", ""]


def test_load_executable(disk, tmp_path):
    text = "MOV R0, 1\nHALT\n"
    disk.load_executable(_write(tmp_path, "prog.xsm", text))
    entry = next(f for f in disk.files() if f.name == "prog.xsm")
    assert entry.size == executable_line_count(text) * 2
    assert disk.file_lines("prog.xsm") == ["MOV R0,", "1", "HALT"]


def test_load_init_code(disk, tmp_path):
    disk.load_init_code(_write(tmp_path, "init.xsm", "MOV R1, 2\nHALT\n"))
    lines = _block_lines(disk, tmp_path, INIT_BLOCK)
    assert lines[:4] == ["MOV R1,", "2", "HALT", ""]


def test_load_code_too_large_is_cleared(disk, tmp_path):
    path = _write(tmp_path, "big.xsm", "NOP\n" * 600)
    with pytest.raises(XfsError):
        disk.load_init_code(path)
    assert all(line == "" for line in _block_lines(disk, tmp_path, INIT_BLOCK))


def test_load_os_code_resolves_labels(disk, tmp_path):
    source = "START:\nMOV R0, 1\nJMP START\n"
    disk.load_os_code(_write(tmp_path, "os.xsm", source))
    lines = _block_lines(disk, tmp_path, OS_STARTUP_CODE)
    target = MEM_OS_STARTUP_CODE * PAGE_SIZE
    assert lines[:4] == ["MOV R0,", "1", f"JMP {target}", ""]


def test_delete_os_code(disk, tmp_path):
    disk.load_os_code(_write(tmp_path, "os.xsm", "HALT\n"))
    disk.delete_os_code()
    assert all(line == "" for line in _block_lines(disk, tmp_path, OS_STARTUP_CODE))


def test_load_interrupt_code_uses_layout(disk, tmp_path):
    disk.load_interrupt_code(_write(tmp_path, "int5.xsm", "IRET\n"), 5)
    block = interrupt_blocks(5).start
    assert _block_lines(disk, tmp_path, block)[:2] == ["IRET", ""]
    disk.delete_interrupt_code(5)
    assert all(line == "" for line in _block_lines(disk, tmp_path, block))


def test_dump_inode_table(disk, tmp_path):
    out = tmp_path / "inode.txt"
    disk.dump_inode_table(str(out))
    lines = out.read_text(encoding="latin-1").split("\n")[:-1]
    assert len(lines) == 2 * BLOCK_SIZE
    assert lines[1] == "root"
    assert lines[USER_TABLE_OFFSET] == "kernel"


def test_dump_root_file(disk, tmp_path):
    out = tmp_path / "root.txt"
    disk.dump_root_file(str(out))
    lines = out.read_text(encoding="latin-1").split("\n")[:-1]
    assert len(lines) == BLOCK_SIZE
    assert lines[0] == "root"