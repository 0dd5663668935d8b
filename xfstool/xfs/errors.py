"""Errors raised while working with the disk file."""

from __future__ import annotations


class XfsError(Exception):
    """Base class for disk file errors."""

    code = 0
    default_message = "Disk error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def __str__(self) -> str:
        return self.message


class DiskOpenError(XfsError):
    """The disk file could not be opened."""

    code = 1
    default_message = "Unable to open disk file"


class DiskCreateError(XfsError):
    """The disk file could not be created."""

    code = 2
    default_message = "Failed to create disk file"