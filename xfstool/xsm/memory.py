"""Machine main memory and page-table address translation."""

from __future__ import annotations

from .word import INSTRUCTION_SIZE, MEMORY_PAGES, PAGE_SIZE, Word

MEMORY_SIZE = PAGE_SIZE * MEMORY_PAGES


class TranslationError(Exception):
    """A logical address could not be translated."""

    code = 0


class NoWriteAccess(TranslationError):
    """The page is not writable."""

    code = -1


class PageFault(TranslationError):
    """The page is not present in memory."""

    code = -2


class IllegalPage(TranslationError):
    """The page lies outside the logical address space."""

    code = -3


def page_of(address: int) -> int:
    """Return the page holding an address, or -1 for a negative address."""
    if address < 0:
        return -1
    return address // PAGE_SIZE


class Memory:
    """The machine's word-addressed RAM."""

    def __init__(self) -> None:
        self._words = [Word() for _ in range(MEMORY_SIZE)]

    def __len__(self) -> int:
        return len(self._words)

    def is_valid(self, address: int) -> bool:
        return 0 <= address < MEMORY_SIZE

    def word(self, address: int) -> Word:
        """Return the word at a physical address."""
        if not self.is_valid(address):
            raise IndexError(f"address {address} is outside memory")
        return self._words[address]

    def page(self, page: int) -> list[Word]:
        """Return the words of a physical page."""
        base = page * PAGE_SIZE
        if not self.is_valid(base):
            raise IndexError(f"page {page} is outside memory")
        return self._words[base : base + PAGE_SIZE]

    def translate_page(self, ptbr: int, ptlr: int, page: int, write: bool) -> int:
        """Map a logical page to a physical one through the page table."""
        if page < 0 or page >= ptlr:
            raise IllegalPage(f"page {page} is outside the logical address space")
        entry_address = page * 2 + ptbr
        entry = self.word(entry_address).to_int()
        info = self.word(entry_address + 1).to_str()
        if info[1:2] == "0":
            raise PageFault(f"page {page} is not valid")
        if write and info[2:3] == "0":
            raise NoWriteAccess(f"page {page} is not writable")
        return entry

    def translate_address(self, ptbr: int, ptlr: int, address: int, write: bool) -> int:
        """Map a logical address to a physical one through the page table."""
        target = self.translate_page(ptbr, ptlr, page_of(address), write)
        if target < 0:
            return target
        return target * PAGE_SIZE + address % PAGE_SIZE

    def raw_instruction(self, address: int) -> str:
        """Return the text of the instruction stored at an address."""
        return "".join(
            self.word(address + offset).to_str() for offset in range(INSTRUCTION_SIZE)
        )