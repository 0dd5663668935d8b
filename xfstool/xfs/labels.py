"""Resolution of symbolic labels in assembly code."""

from __future__ import annotations

import os
import re
from collections.abc import Iterable, Iterator

from .layout import INSTRUCTION_SIZE, WORD_SIZE

_SCAN_CHUNK = INSTRUCTION_SIZE * WORD_SIZE
_LINE_CHUNK = 99
_SEPARATORS = re.compile(r"[ ,]+")


class LabelError(Exception):
    """A label could not be read or resolved."""


def is_label(text: str) -> bool:
    """Tell whether a line declares a label (ends with a colon)."""
    return text.endswith(":")


def is_charstring(text: str | None) -> bool:
    """Tell whether text contains a letter, so it names a label."""
    return bool(text) and any(ch.isascii() and ch.isalpha() for ch in text)


def label_name(text: str) -> str:
    """Return the name of a label declaration."""
    for part in text.split(":"):
        if part:
            return part
    raise LabelError(f"empty label {text!r}")


def _chunks(lines: Iterable[str], size: int) -> Iterator[str]:
    """Split lines into pieces of at most *size* characters, newline cut off."""
    for line in lines:
        for start in range(0, max(len(line), 1), size):
            yield line[start : start + size].split("\n", 1)[0]


def _split_lines(text: str) -> list[str]:
    pieces = [piece + "\n" for piece in text.split("\n")]
    pieces[-1] = pieces[-1][:-1]
    return [piece for piece in pieces if piece]


class LabelTable:
    """Maps label names to addresses relative to the start of the code."""

    def __init__(self) -> None:
        self._labels: dict[str, int] = {}

    def reset(self) -> None:
        self._labels.clear()

    def insert(self, name: str, address: int) -> None:
        self._labels[name] = address

    def target(self, name: str) -> int:
        """Return the address of a label; raises LabelError if unknown."""
        try:
            return self._labels[name]
        except KeyError:
            raise LabelError(f'Can not resolve label "{name}".') from None

    def phase_one(self, lines: Iterable[str]) -> None:
        """Record the address of every label in the code."""
        address = 0
        for piece in _chunks(lines, _SCAN_CHUNK):
            if is_label(piece):
                self.insert(label_name(piece), address)
            elif piece:
                address += INSTRUCTION_SIZE

    def phase_two(self, lines: Iterable[str], base_address: int) -> list[str]:
        """Return the code without labels, jump targets replaced by addresses."""
        output = []
        for line in _chunks(lines, _LINE_CHUNK):
            if not line or is_label(line):
                continue
            tokens = [token for token in _SEPARATORS.split(line) if token]
            if not tokens:
                output.append(line)
                continue
            opcode = tokens[0]
            leftop = tokens[1] if len(tokens) > 1 else None
            rightop = tokens[2] if len(tokens) > 2 else None
            upper = opcode.upper()
            sep = ""
            if upper in ("JMP", "CALL"):
                jump = True
                rightop, leftop = leftop, ""
            elif upper in ("JNZ", "JZ"):
                jump = True
                sep = ", "
            else:
                jump = False
            if jump and is_charstring(rightop):
                address = self.target(rightop) + base_address
                output.append(f"{opcode} {leftop or ''}{sep}{address}")
            else:
                output.append(line)
        return output

    def resolve(self, path: str | os.PathLike, base_address: int) -> list[str]:
        """Read a source file and return its code with labels resolved."""
        try:
            with open(path, "rb") as handle:
                text = handle.read().decode("latin-1")
        except OSError as exc:
            raise LabelError("Can't open source file.") from exc
        lines = _split_lines(text)
        self.phase_one(lines)
        return self.phase_two(lines, base_address)