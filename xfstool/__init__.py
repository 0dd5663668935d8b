"""Tools for XFS disk images and the storage pieces of the XSM machine."""

__version__ = "0.1.0"