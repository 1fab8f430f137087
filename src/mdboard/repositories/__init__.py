"""Repository layer for include file access."""

from .filesystem import FilesystemContentProvider
from .protocol import FileContentProvider, PresentationAdapter

__all__ = [
    "FileContentProvider",
    "FilesystemContentProvider",
    "PresentationAdapter",
]
