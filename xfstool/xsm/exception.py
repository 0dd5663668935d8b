"""Exceptions raised by the machine while executing instructions."""

from __future__ import annotations

import enum


class ExceptionCode(enum.IntEnum):
    """Cause of a machine exception, as stored in the EC register."""

    PAGEFAULT = 0
    ILLINSTR = 1
    ILLMEM = 2
    ARITH = 3


class MachineException(Exception):
    """A fault raised during execution, with the state the handler needs."""

    def __init__(
        self,
        message: str,
        code: int,
        mode: int,
        ma: int | None = None,
        epn: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = ExceptionCode(code)
        self.mode = mode
        self.ma = ma
        self.epn = epn

    def __str__(self) -> str:
        return self.message