"""Conversion of source and data files into disk blocks of words."""

from __future__ import annotations

import io
import os
from typing import TextIO

from .layout import BLOCK_SIZE, WORD_SIZE

_WHITESPACE = " \t\n\v\f\r"
_ASSEMBLY_LINE_LIMIT = 99
_DATA_WORD_LIMIT = WORD_SIZE - 1
_BUFFER_CHARS = 31
_MAX_STRING_WORD = 16


def trim(text: str) -> str:
    """Strip leading and trailing whitespace."""
    return text.strip(_WHITESPACE)


def expand_path(path: str) -> str:
    """Replace the first path component by an environment variable.

    The first character of the component (normally '$') is skipped to
    form the variable name; the component is kept if it is not set.
    """
    first, sep, rest = path.partition("/")
    if not first:
        return path
    value = os.environ.get(first[1:]) if first[1:] else None
    head = value if value is not None else first
    return f"{head}{sep}{rest}" if sep else head


def add_extension(filename: str, ext: str) -> str:
    """Add an extension, keeping names shorter than 16 characters."""
    if len(filename) >= _MAX_STRING_WORD:
        return filename[:11] + ext
    if not filename.endswith(ext):
        filename += ext
        if len(filename) >= _MAX_STRING_WORD:
            return filename[:11] + ext
    return filename


def _hit_end(piece: str, limit: int) -> bool:
    """Tell whether a read of at most *limit* characters reached end of input."""
    return not piece.endswith("\n") and len(piece) < limit


class _Tokens:
    """Successive tokens of a string, each call with its own delimiters."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos: int | None = 0

    def next(self, delimiters: str) -> str | None:
        if self._pos is None:
            return None
        text, pos = self._text, self._pos
        while pos < len(text) and text[pos] in delimiters:
            pos += 1
        if pos >= len(text):
            self._pos = None
            return None
        end = pos
        while end < len(text) and text[end] not in delimiters:
            end += 1
        self._pos = end + 1 if end < len(text) else None
        return text[pos:end]


def _instruction_buffer(line: str) -> str:
    """Cut a source line down to what fits in two words."""
    quote = line.find('"')
    if quote == -1 or len(line) - quote <= _MAX_STRING_WORD:
        return line[:_BUFFER_CHARS]
    return line[: quote + 14] + '"'


def _instruction_words(line: str) -> list[str]:
    """Return the words an assembly line is stored as; empty if none."""
    buffer = _instruction_buffer(line)
    if len(buffer) <= 1:
        return []
    if buffer.endswith("\n"):
        buffer = buffer[:-1]

    tokens = _Tokens(buffer)
    instr = tokens.next(" ")
    arg1 = tokens.next(",")
    arg2 = tokens.next("")
    if instr is None:
        return []

    name = trim(instr)
    if name[:1].isdigit() and name[:1].isascii():
        return [name]
    if arg1 is not None:
        first = trim(arg1)
        if arg2 is not None:
            first += ","
        second = trim(arg2) if arg2 is not None else ""
        return [f"{name} {first}", second]
    return [instr, ""]


def encode_assembly_block(lines: TextIO) -> tuple[list[str], bool]:
    """Read instructions from a text stream into one block of words.

    Returns the block and whether it was filled before the input ended.
    Each instruction takes two words; a plain number takes one.
    """
    words: list[str] = []
    while len(words) < BLOCK_SIZE:
        piece = lines.readline(_ASSEMBLY_LINE_LIMIT)
        if _hit_end(piece, _ASSEMBLY_LINE_LIMIT):
            return _pad(words), False
        words.extend(_instruction_words(piece))
    return _pad(words), True


def encode_data_block(lines: TextIO) -> tuple[list[str], bool]:
    """Read data words from a text stream into one block.

    Each word holds at most 15 characters of a line. Returns the block and
    whether it was filled before the input ended.
    """
    words = [""] * BLOCK_SIZE
    for index in range(BLOCK_SIZE):
        piece = lines.readline(_DATA_WORD_LIMIT)
        if _hit_end(piece, _DATA_WORD_LIMIT):
            return words, False
        newline = piece.find("\n", 1)
        words[index] = piece[:newline] if newline != -1 else piece
    return words, True


def _pad(words: list[str]) -> list[str]:
    words = [word[:WORD_SIZE] for word in words[:BLOCK_SIZE]]
    return words + [""] * (BLOCK_SIZE - len(words))


def data_word_count(text: str) -> int:
    """Return the number of words a data file occupies."""
    stream = io.StringIO(text)
    count = 0
    while not _hit_end(stream.readline(_DATA_WORD_LIMIT), _DATA_WORD_LIMIT):
        count += 1
    return count


def executable_line_count(text: str) -> int:
    """Return the line count used to size an executable file.

    Every newline counts, as does the end of the input and any byte that
    reads the same as the end-of-file marker.
    """
    return text.count("\n") + text.count("\xff") + 1