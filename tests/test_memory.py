import pytest

from xfstool.xsm.memory import (
    MEMORY_SIZE,
    IllegalPage,
    Memory,
    NoWriteAccess,
    PageFault,
    TranslationError,
    page_of,
)
from xfstool.xsm.word import PAGE_SIZE


@pytest.fixture(scope="module")
def memory():
    return Memory()


def test_page_of():
    assert page_of(-1) == -1
    assert page_of(0) == 0
    assert page_of(PAGE_SIZE) == 1
    assert page_of(PAGE_SIZE - 1) == 0


def test_is_valid_bounds(memory):
    assert memory.is_valid(0)
    assert memory.is_valid(MEMORY_SIZE - 1)
    assert not memory.is_valid(MEMORY_SIZE)
    assert not memory.is_valid(-1)


def test_invalid_word_raises(memory):
    with pytest.raises(IndexError):
        memory.word(MEMORY_SIZE)
    with pytest.raises(IndexError):
        memory.word(-1)


def test_page_shares_words(memory):
    page = memory.page(2)
    assert len(page) == PAGE_SIZE
    assert page[0] is memory.word(2 * PAGE_SIZE)
    assert page[-1] is memory.word(3 * PAGE_SIZE - 1)


def test_invalid_page_raises(memory):
    with pytest.raises(IndexError):
        memory.page(len(memory) // PAGE_SIZE)


def _set_entry(memory, ptbr, page, physical, info):
    memory.word(ptbr + 2 * page).store_int(physical)
    memory.word(ptbr + 2 * page + 1).store_str(info)


def test_translate_address_valid_page():
    memory = Memory()
    _set_entry(memory, 1000, 0, 5, "0110")
    assert memory.translate_address(1000, 1, 10, True) == 5 * PAGE_SIZE + 10


def test_translate_outside_limit():
    memory = Memory()
    _set_entry(memory, 1000, 0, 5, "0110")
    with pytest.raises(IllegalPage):
        memory.translate_address(1000, 1, PAGE_SIZE, False)
    with pytest.raises(IllegalPage):
        memory.translate_address(1000, 1, -1, False)


def test_translate_page_fault():
    memory = Memory()
    _set_entry(memory, 1000, 0, 5, "0010")
    with pytest.raises(PageFault):
        memory.translate_page(1000, 1, 0, False)


def test_translate_read_only():
    memory = Memory()
    _set_entry(memory, 1000, 0, 7, "0100")
    assert memory.translate_page(1000, 1, 0, False) == 7
    with pytest.raises(NoWriteAccess):
        memory.translate_page(1000, 1, 0, True)


@pytest.mark.parametrize(
    "info, page, write",
    [
        ("0100", 0, True),
        ("0010", 0, False),
        ("0110", 5, False),
    ],
)
def test_translation_errors_caught_by_base(info, page, write):
    memory = Memory()
    _set_entry(memory, 1000, 0, 7, info)
    with pytest.raises(TranslationError):
        memory.translate_page(1000, 1, page, write)


def test_raw_instruction(memory):
    memory.word(0).store_str("MOV R0,")
    memory.word(1).store_str(" 5")
    assert memory.raw_instruction(0) == "MOV R0, 5"