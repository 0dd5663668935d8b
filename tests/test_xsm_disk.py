import pytest

from xfstool.xsm.disk import BLOCK_BYTES, BLOCK_COUNT, BLOCK_SIZE, DISK_BYTES, Disk
from xfstool.xsm.word import WORD_SIZE, Word


def _page(texts=()):
    page = [Word() for _ in range(BLOCK_SIZE)]
    for word, text in zip(page, texts):
        word.store_str(text)
    return page


def test_missing_file_is_created_empty(tmp_path):
    path = tmp_path / "disk.xfs"
    disk = Disk(path)
    assert path.exists()
    assert disk.block(0) == bytes(BLOCK_BYTES)


def test_close_writes_whole_image(tmp_path):
    path = tmp_path / "disk.xfs"
    with Disk(path) as disk:
        pass
    assert path.stat().st_size == DISK_BYTES
    assert Disk(path).close() == DISK_BYTES


def test_write_then_read_round_trip(tmp_path):
    path = tmp_path / "disk.xfs"
    disk = Disk(path)
    disk.write_page(_page(["MOV R0, 5", "HALT"]), 7)
    disk.close()

    reopened = Disk(path)
    page = _page()
    reopened.read_block(page, 7)
    assert page[0].to_str() == "MOV R0, 5"
    assert page[1].to_str() == "HALT"
    assert page[2].to_str() == ""


def test_block_bytes_match_written_words(tmp_path):
    disk = Disk(tmp_path / "disk.xfs")
    disk.write_page(_page(["abc"]), 3)
    raw = disk.block(3)
    assert len(raw) == BLOCK_BYTES
    assert raw[:WORD_SIZE] == b"abc".ljust(WORD_SIZE, b"\0")
    assert disk.block(2) == bytes(BLOCK_BYTES)


def test_existing_short_file_is_read(tmp_path):
    path = tmp_path / "disk.xfs"
    path.write_bytes(b"HI")
    disk = Disk(path)
    assert disk.block(0)[:2] == b"HI"
    page = _page()
    disk.read_block(page, 0)
    assert page[0].to_str() == "HI"


def test_invalid_block_raises(tmp_path):
    disk = Disk(tmp_path / "disk.xfs")
    with pytest.raises(IndexError):
        disk.block(BLOCK_COUNT)
    with pytest.raises(IndexError):
        disk.read_block(_page(), -1)
    with pytest.raises(IndexError):
        disk.write_page(_page(), BLOCK_COUNT)