"""The machine's register file."""

from __future__ import annotations

from collections.abc import Iterator

from .word import Word

REGISTER_NAMES = (
    *(f"R{number}" for number in range(20)),
    "P0", "P1", "P2", "P3",
    "BP", "SP", "IP",
    "PTBR", "PTLR", "EIP", "EC", "EPN", "EMA",
)

GENERAL_REGISTER_COUNT = 20
_PORT_LOW = 20
_PORT_HIGH = 23
_KERNEL_LOW = 27


def register_code(name: str) -> int:
    """Return the index of a register, ignoring case."""
    upper = name.upper()
    try:
        return REGISTER_NAMES.index(upper)
    except ValueError:
        raise KeyError(name) from None


def usable_in_user_mode(name: str) -> bool:
    """Tell whether a register may be used in user mode."""
    try:
        code = register_code(name)
    except KeyError:
        return False
    if _PORT_LOW <= code <= _PORT_HIGH:
        return False
    if code == _KERNEL_LOW:
        return False
    return True


class RegisterFile:
    """All machine registers, addressed by name."""

    def __init__(self) -> None:
        self._words = {name: Word() for name in REGISTER_NAMES}

    @property
    def names(self) -> tuple[str, ...]:
        return REGISTER_NAMES

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self) -> Iterator[str]:
        return iter(REGISTER_NAMES)

    def get(self, name: str) -> Word:
        """Return the register's word; raises KeyError for unknown names."""
        return self._words[REGISTER_NAMES[register_code(name)]]

    def get_integer(self, name: str) -> int:
        return self.get(name).to_int()

    def get_string(self, name: str) -> str:
        return self.get(name).to_str()

    def store_integer(self, name: str, value: int) -> None:
        self.get(name).store_int(value)

    def store_string(self, name: str, text: str) -> None:
        self.get(name).store_str(text)