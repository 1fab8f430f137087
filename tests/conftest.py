"""Shared fixtures."""

import errno
from pathlib import Path

import pytest

from mdboard.services import IncludeResolver, MarkdownBoardCodec

BASE_DIR = Path("/board")


class InMemoryProvider:
    """FileContentProvider over a dict of path -> text."""

    def __init__(self, files: dict[str, str] | None = None) -> None:
        self.files = dict(files or {})
        self.reads: list[Path] = []

    def read(self, path: Path) -> str:
        self.reads.append(path)
        try:
            return self.files[str(path)]
        except KeyError:
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", str(path)) from None


@pytest.fixture
def base_dir() -> Path:
    """Directory the board document lives in."""
    return BASE_DIR


@pytest.fixture
def provider() -> InMemoryProvider:
    """Empty in-memory file provider; tests add files to ``provider.files``."""
    return InMemoryProvider()


@pytest.fixture
def resolver(provider: InMemoryProvider) -> IncludeResolver:
    """Include resolver reading from the in-memory provider."""
    return IncludeResolver(provider)


@pytest.fixture
def codec(resolver: IncludeResolver) -> MarkdownBoardCodec:
    """Codec wired to the in-memory resolver."""
    return MarkdownBoardCodec(resolver)
