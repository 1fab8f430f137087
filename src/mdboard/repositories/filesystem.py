"""Filesystem-backed file content provider."""

from pathlib import Path


class FilesystemContentProvider:
    """
    Reads include files straight from disk.

    Used by the command line host; editor integrations supply their own
    provider so unsaved buffers win over disk content.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        """
        Initialize provider.

        Args:
            encoding: Text encoding of include files
        """
        self.encoding = encoding

    def read(self, path: Path) -> str:
        """Read a file, normalising line endings to ``\\n``."""
        with path.open(encoding=self.encoding, newline="") as f:
            text = f.read()
        return text.replace("\r\n", "\n").replace("\r", "\n")

    def write(self, path: Path, content: str) -> None:
        """Write a file (host side of a staged write-back)."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding=self.encoding) as f:
            f.write(content)
