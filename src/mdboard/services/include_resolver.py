"""Include file resolution and per-file synchronization state."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Sequence
from enum import StrEnum
from pathlib import Path
from urllib.parse import unquote

from pydantic import BaseModel

from ..models import Task
from ..repositories.protocol import FileContentProvider, PresentationAdapter
from ..utils.front_matter import strip_front_matter
from .presentation import PresentationParser

logger = logging.getLogger(__name__)

INCLUDE_PATTERN = re.compile(r"!!!include\(([^)]+)\)!!!", re.IGNORECASE)
COLUMN_INCLUDE_PATTERN = re.compile(r"!!!columninclude\(([^)]+)\)!!!", re.IGNORECASE)
TASK_INCLUDE_PATTERN = re.compile(r"!!!taskinclude\(([^)]+)\)!!!", re.IGNORECASE)

DEFAULT_MAX_DEPTH = 10


class IncludeType(StrEnum):
    """How an include file is bound into the board."""

    COLUMN = "column"
    TASK = "task"
    REGULAR = "regular"


class IncludeReadError(OSError):
    """Raised when an include file cannot be read."""

    def __init__(self, path: Path | str, include_type: IncludeType, reason: str) -> None:
        super().__init__(f"Cannot read {include_type} include '{path}': {reason}")
        self.path = str(path)
        self.include_type = include_type
        self.reason = reason


class IncludeFileBinding(BaseModel):
    """Synchronization state of one include file.

    ``baseline`` is the last content known to match the file on disk.
    ``pending`` holds content staged for writing until the host confirms.
    """

    path: str
    include_type: IncludeType
    content: str = ""
    baseline: str = ""
    has_unsaved_changes: bool = False
    pending: str | None = None


class ConflictState(BaseModel):
    """Reported state of an include file; the host decides what to do."""

    path: str
    has_unsaved_changes: bool
    external_change_detected: bool

    @property
    def is_conflict(self) -> bool:
        """Local edits and a changed file on disk at the same time."""
        return self.has_unsaved_changes and self.external_change_detected


class IncludeResolver:
    """
    Reads include files for a board session and tracks their state.

    One resolver belongs to one editing session. It never writes to disk:
    write-back returns content for the host to persist, and the host
    confirms with ``commit`` or ``rollback``.
    """

    def __init__(
        self,
        provider: FileContentProvider,
        presentation: PresentationAdapter | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        """
        Initialize resolver.

        Args:
            provider: Source of include file text
            presentation: Deck adapter for column includes (default slides parser)
            max_depth: Maximum nesting of regular includes
        """
        self.provider = provider
        self.presentation = presentation or PresentationParser()
        self.max_depth = max_depth
        self._bindings: dict[str, IncludeFileBinding] = {}

    # --- Resolution ---

    @staticmethod
    def resolve_path(path: str, base_dir: Path | None) -> Path:
        """Resolve a directive argument against the board's directory.

        The argument may be URL-encoded. Normalisation is lexical only.
        """
        decoded = Path(unquote(path.strip()))
        if not decoded.is_absolute() and base_dir is not None:
            decoded = base_dir / decoded
        return Path(os.path.normpath(decoded))

    def resolve_column_include(self, path: str, base_dir: Path | None) -> list[Task]:
        """Read a column include file and convert its slides to tasks.

        Raises:
            IncludeReadError: If the file cannot be read
        """
        resolved = self.resolve_path(path, base_dir)
        text = self._read(resolved, IncludeType.COLUMN)
        self._record(resolved, IncludeType.COLUMN, text)
        tasks = self.presentation.parse(text)
        logger.debug("Column include %s: %d tasks", resolved, len(tasks))
        return tasks

    def resolve_task_include(self, path: str, base_dir: Path | None) -> tuple[str, str]:
        """Read a task include file.

        The first line is the title and the rest is the description.

        Raises:
            IncludeReadError: If the file cannot be read
        """
        resolved = self.resolve_path(path, base_dir)
        text = self._read(resolved, IncludeType.TASK)
        self._record(resolved, IncludeType.TASK, text)

        body = strip_front_matter(text).strip("\n")
        title, _, description = body.partition("\n")
        return title.strip(), description.strip("\n")

    def expand_includes(
        self,
        text: str,
        base_dir: Path | None,
    ) -> tuple[str, list[IncludeReadError]]:
        """Expand ``!!!include(path)!!!`` directives in text.

        Nested includes resolve relative to the including file. Directives
        that fail (unreadable, circular, too deep) become empty placeholders
        and are reported in the returned error list.
        """
        errors: list[IncludeReadError] = []
        expanded = self._expand(text, base_dir, depth=0, stack=(), errors=errors)
        return expanded, errors

    def _expand(
        self,
        text: str,
        base_dir: Path | None,
        depth: int,
        stack: tuple[str, ...],
        errors: list[IncludeReadError],
    ) -> str:
        if not INCLUDE_PATTERN.search(text):
            return text

        def replace(match: re.Match[str]) -> str:
            resolved = self.resolve_path(match.group(1), base_dir)
            key = str(resolved)

            if depth >= self.max_depth:
                errors.append(
                    IncludeReadError(
                        resolved, IncludeType.REGULAR, f"maximum include depth ({self.max_depth}) reached"
                    )
                )
                return ""
            if key in stack:
                errors.append(IncludeReadError(resolved, IncludeType.REGULAR, "circular include"))
                return ""

            try:
                content = self._read(resolved, IncludeType.REGULAR)
            except IncludeReadError as e:
                errors.append(e)
                return ""

            self._record(resolved, IncludeType.REGULAR, content)
            body = strip_front_matter(content)
            return self._expand(body, resolved.parent, depth + 1, (*stack, key), errors)

        return INCLUDE_PATTERN.sub(replace, text)

    def reload(self, path: Path | str) -> str:
        """Re-read a bound file and reset its binding to the disk content.

        Raises:
            IncludeReadError: If the file cannot be read
            KeyError: If the path was never resolved in this session
        """
        binding = self._bindings[self._key(path)]
        text = self._read(Path(binding.path), binding.include_type)
        binding.content = text
        binding.baseline = text
        binding.has_unsaved_changes = False
        binding.pending = None
        logger.debug("Reloaded include %s", binding.path)
        return text

    # --- Write-back ---

    def update_content(self, path: Path | str, content: str) -> IncludeFileBinding:
        """Record an in-memory edit of an include file.

        Raises:
            KeyError: If the path was never resolved in this session
        """
        binding = self._bindings[self._key(path)]
        binding.content = content
        binding.has_unsaved_changes = content != binding.baseline
        return binding

    def stage(self, path: Path | str, content: str) -> str:
        """Stage content for writing and return it for the host to persist."""
        binding = self.update_content(path, content)
        binding.pending = content
        logger.debug("Staged write-back for %s (%d chars)", binding.path, len(content))
        return content

    def write_back(self, path: Path | str, new_content: str) -> str:
        """Stage new include content; the host writes it and then commits."""
        return self.stage(path, new_content)

    def write_back_column(self, path: Path | str, tasks: Sequence[Task]) -> str:
        """Serialize column tasks through the deck adapter and stage them."""
        return self.stage(path, self.presentation.serialize(tasks))

    def commit(self, path: Path | str) -> None:
        """Confirm the staged content was written: it becomes the baseline."""
        binding = self._bindings[self._key(path)]
        if binding.pending is None:
            logger.debug("commit: nothing staged for %s", binding.path)
            return
        binding.baseline = binding.pending
        binding.pending = None
        binding.has_unsaved_changes = binding.content != binding.baseline
        logger.info("Include saved: %s", binding.path)

    def rollback(self, path: Path | str) -> None:
        """The host failed to write: drop the staged content, stay dirty."""
        binding = self._bindings[self._key(path)]
        binding.pending = None
        binding.has_unsaved_changes = binding.content != binding.baseline
        logger.warning("Include write failed, keeping unsaved changes: %s", binding.path)

    # --- Change detection ---

    def detect_external_change(self, path: Path | str, disk_content: str) -> bool:
        """True if the file on disk differs from the last synchronized content."""
        binding = self._bindings.get(self._key(path))
        if binding is None:
            return False
        return disk_content != binding.baseline

    def has_unsaved_changes(self, path: Path | str) -> bool:
        """True if the include has in-memory edits not yet written."""
        binding = self._bindings.get(self._key(path))
        return binding is not None and binding.has_unsaved_changes

    def conflict_state(self, path: Path | str, disk_content: str) -> ConflictState:
        """Report local and external change flags for one include file."""
        return ConflictState(
            path=self._key(path),
            has_unsaved_changes=self.has_unsaved_changes(path),
            external_change_detected=self.detect_external_change(path, disk_content),
        )

    # --- Binding table ---

    def get_binding(self, path: Path | str) -> IncludeFileBinding | None:
        """Binding for a resolved path, if it was seen this session."""
        return self._bindings.get(self._key(path))

    @property
    def bindings(self) -> list[IncludeFileBinding]:
        """All bindings in first-seen order."""
        return list(self._bindings.values())

    def forget(self, path: Path | str) -> None:
        """Drop a binding (include removed from the board)."""
        self._bindings.pop(self._key(path), None)

    def clear(self) -> None:
        """Drop all bindings."""
        self._bindings.clear()

    # --- Private Methods ---

    @staticmethod
    def _key(path: Path | str) -> str:
        return os.path.normpath(str(path))

    def _read(self, path: Path, include_type: IncludeType) -> str:
        try:
            return self.provider.read(path)
        except (OSError, UnicodeError) as e:
            logger.warning("Include file unreadable: %s (%s)", path, e)
            reason = getattr(e, "strerror", None) or str(e)
            raise IncludeReadError(path, include_type, reason) from e

    def _record(self, path: Path, include_type: IncludeType, text: str) -> IncludeFileBinding:
        key = self._key(path)
        binding = self._bindings.get(key)
        if binding is None:
            binding = IncludeFileBinding(path=key, include_type=include_type)
            self._bindings[key] = binding
        binding.content = text
        binding.baseline = text
        binding.has_unsaved_changes = False
        binding.pending = None
        return binding
