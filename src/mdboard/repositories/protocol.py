"""Collaborator protocols consumed by the include resolver."""

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from ..models import Task


class FileContentProvider(Protocol):
    """Read access to include files.

    The host owns all I/O. Implementations may read from disk, from an
    editor buffer, or from memory in tests.
    """

    def read(self, path: Path) -> str:
        """Return the full text of a file.

        Args:
            path: Resolved path of the include file

        Raises:
            OSError: If the file is missing or unreadable
            UnicodeDecodeError: If the file is not in the expected encoding
        """
        ...


class PresentationAdapter(Protocol):
    """Format bridge between slide decks and column tasks.

    Column include files are slide decks; each slide becomes a task.
    """

    def parse(self, text: str) -> list[Task]:
        """Convert deck text into tasks (new IDs every call)."""
        ...

    def serialize(self, tasks: Sequence[Task]) -> str:
        """Convert tasks back into deck text."""
        ...
