"""Markdown board codec: ``kanban-plugin: board`` documents to Board and back."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from urllib.parse import unquote

import yaml

from ..models import Board, Column, IncludeIssue, ParseAnomaly, Task
from ..repositories.filesystem import FilesystemContentProvider
from .include_resolver import (
    COLUMN_INCLUDE_PATTERN,
    INCLUDE_PATTERN,
    TASK_INCLUDE_PATTERN,
    IncludeReadError,
    IncludeResolver,
)

logger = logging.getLogger(__name__)

PLUGIN_KEY = "kanban-plugin"

DEFAULT_YAML_HEADER = "---\n\nkanban-plugin: board\n\n---"
DEFAULT_SETTINGS = {PLUGIN_KEY: "board"}

COLUMN_PREFIX = "## "
BOARD_TITLE_PREFIX = "# "
SETTINGS_PREFIX = "%%"
INDENT = "  "

# "- [ ] title", "- [x] title", and bare "- title" / "* title" list items
TASK_LINE_PATTERN = re.compile(r"^[-*+](?: +|$)(?:\[(?P<check>[ xX])\](?: +|$))?(?P<title>.*)$")
FENCE_PATTERN = re.compile(r"^\s*```")
WHITESPACE_RUN = re.compile(r"\s{2,}")


class ParseState(Enum):
    """Where the line scanner currently is."""

    HEADER = auto()  # front matter / preamble before the first column
    COLUMN_TITLE = auto()  # after a "## " line, before its first task
    TASK_LINE = auto()  # just read a list item
    DESCRIPTION_LINES = auto()  # inside a task's indented description
    SETTINGS_BLOCK = auto()  # "%% kanban:settings" footer to end of file


@dataclass
class _PendingTask:
    title: str
    checked: bool
    line: int
    description_lines: list[str] = field(default_factory=list)


class MarkdownBoardCodec:
    """
    Parses board documents and writes them back.

    Parsing never raises for document content: anything malformed is
    recorded on ``Board.anomalies`` and unreadable includes on
    ``Board.include_errors``.
    """

    def __init__(self, resolver: IncludeResolver | None = None) -> None:
        """
        Initialize codec.

        Args:
            resolver: Include resolver for this session (reads from disk if omitted)
        """
        self.resolver = resolver or IncludeResolver(FilesystemContentProvider())

    # --- Parsing ---

    def parse(self, text: str, source_directory: Path | None = None) -> Board:
        """Parse document text into a Board.

        Args:
            text: Full document text
            source_directory: Directory include paths are relative to

        Returns:
            The parsed board; a board with one empty column if the scanner fails
        """
        try:
            return _BoardScanner(self.resolver, source_directory).scan(text)
        except Exception as e:
            logger.exception("Board parse failed, returning empty board")
            return Board(
                columns=[Column()],
                source_directory=source_directory,
                anomalies=[ParseAnomaly(message=f"Parser failure: {e}")],
            )

    # --- Serialization ---

    def serialize(self, board: Board) -> str:
        """Write a Board back to document text.

        Include columns keep only their header line and task includes only
        their directive line: included content never enters the main file.
        """
        parts: list[str] = [(board.yaml_header or DEFAULT_YAML_HEADER) + "\n"]

        if board.title:
            parts.append(f"{BOARD_TITLE_PREFIX}{board.title}\n")

        for column in board.columns:
            lines = [f"{COLUMN_PREFIX}{column.title}".rstrip()]
            if not column.include_mode:
                for task in column.tasks:
                    lines.extend(self.task_lines(task))
            parts.append("\n".join(lines) + "\n")

        parts.append(self._settings_block(board))
        return "\n".join(parts) + "\n"

    def task_lines(self, task: Task) -> list[str]:
        """Lines for one task: the list item and its indented raw description."""
        mark = "x" if task.checked else " "
        lines = [f"- [{mark}] {task.title}".rstrip()]
        if task.raw_description.strip():
            for line in task.raw_description.split("\n"):
                lines.append(f"{INDENT}{line}" if line.strip() else "")
        return lines

    def _settings_block(self, board: Board) -> str:
        if board.settings_block is not None:
            return board.settings_block
        settings = board.settings if board.settings is not None else DEFAULT_SETTINGS
        payload = json.dumps(settings, separators=(",", ":"))
        return f"%% kanban:settings\n```\n{payload}\n```\n%%"


class _BoardScanner:
    """Single-use line scanner behind ``MarkdownBoardCodec.parse``."""

    def __init__(self, resolver: IncludeResolver, source_directory: Path | None) -> None:
        self.resolver = resolver
        self.base_dir = source_directory
        self.board = Board(source_directory=source_directory)
        self.state = ParseState.HEADER
        self.column: Column | None = None
        self.task: _PendingTask | None = None
        self.skipping_item = False
        self.settings_lines: list[str] = []

    def scan(self, text: str) -> Board:
        lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")

        start = self._read_front_matter(lines)
        if start is None:
            return self.board

        for number, line in enumerate(lines[start:], start=start + 1):
            self._scan_line(number, line)

        self._finish_task()
        self._finish_column()
        self._finish_settings()

        logger.debug(
            "Parsed board: %d columns, %d tasks, %d anomalies",
            len(self.board.columns),
            self.board.task_count,
            len(self.board.anomalies),
        )
        return self.board

    # --- Front matter ---

    def _read_front_matter(self, lines: list[str]) -> int | None:
        """Capture the YAML header; return the index of the first body line."""
        first = next((i for i, line in enumerate(lines) if line.strip()), None)
        if first is None or lines[first].strip() != "---":
            self._anomaly(None, "Missing front matter")
            return 0

        end = next((i for i in range(first + 1, len(lines)) if lines[i].strip() == "---"), None)
        if end is None:
            self._anomaly(first + 1, "Unterminated front matter")
            return None

        self.board.yaml_header = "\n".join(lines[first : end + 1])
        try:
            data = yaml.safe_load("\n".join(lines[first + 1 : end]))
        except yaml.YAMLError as e:
            self._anomaly(first + 1, f"Invalid front matter: {e}")
            return end + 1

        if data is None:
            data = {}
        if not isinstance(data, dict):
            self._anomaly(first + 1, "Front matter is not a mapping")
            return end + 1

        self.board.front_matter = data
        if PLUGIN_KEY not in data:
            self._anomaly(first + 1, f"Front matter has no '{PLUGIN_KEY}' key")
        return end + 1

    # --- Line dispatch ---

    def _scan_line(self, number: int, line: str) -> None:
        if self.state is ParseState.SETTINGS_BLOCK:
            self.settings_lines.append(line)
            return

        if line.startswith(SETTINGS_PREFIX):
            self._finish_task()
            self.state = ParseState.SETTINGS_BLOCK
            self.settings_lines.append(line)
            return

        indented = not line.strip() or line.startswith(INDENT) or line.startswith("\t")

        if self.state in (ParseState.TASK_LINE, ParseState.DESCRIPTION_LINES) and indented:
            if self.task is not None:
                self.task.description_lines.append(_dedent(line))
                self.state = ParseState.DESCRIPTION_LINES
            return

        if line.startswith(COLUMN_PREFIX) or line.rstrip() == COLUMN_PREFIX.strip():
            self._finish_task()
            self._finish_column()
            self._start_column(line[len(COLUMN_PREFIX) :].strip())
            return

        match = TASK_LINE_PATTERN.match(line)
        if match:
            self._finish_task()
            self._start_task(number, match)
            return

        if not line.strip():
            return

        if (
            line.startswith(BOARD_TITLE_PREFIX)
            and self.column is None
            and self.board.title is None
        ):
            self.board.title = line[len(BOARD_TITLE_PREFIX) :].strip()
            return

        self._finish_task()
        self._anomaly(number, f"Unrecognised line dropped: {line.strip()[:60]}")
        self.state = ParseState.COLUMN_TITLE if self.column else ParseState.HEADER

    # --- Columns ---

    def _start_column(self, title: str) -> None:
        paths = [path.strip() for path in COLUMN_INCLUDE_PATTERN.findall(title)]
        column = Column(title=title, display_title=title)

        if paths:
            display = WHITESPACE_RUN.sub(" ", COLUMN_INCLUDE_PATTERN.sub("", title)).strip()
            column.display_title = display or Path(unquote(paths[0])).stem
            column.include_mode = True
            column.include_files = paths
            for path in paths:
                try:
                    column.tasks.extend(self.resolver.resolve_column_include(path, self.base_dir))
                except IncludeReadError as e:
                    self._include_issue(path, e)

        self.column = column
        self.state = ParseState.COLUMN_TITLE

    def _finish_column(self) -> None:
        if self.column is not None:
            self.board.columns.append(self.column)
            self.column = None

    # --- Tasks ---

    def _start_task(self, number: int, match: re.Match[str]) -> None:
        self.state = ParseState.TASK_LINE

        if self.column is None:
            self._anomaly(number, "List item before the first column dropped")
            self.skipping_item = True
            return

        if self.column.include_mode:
            logger.debug("Skipping list item under include column at line %d", number)
            self.skipping_item = True
            return

        self.skipping_item = False
        self.task = _PendingTask(
            title=match.group("title").rstrip(),
            checked=(match.group("check") or " ").lower() == "x",
            line=number,
        )

    def _finish_task(self) -> None:
        pending = self.task
        self.task = None
        self.skipping_item = False
        if pending is None or self.column is None:
            return

        lines = pending.description_lines
        while lines and not lines[-1].strip():
            lines.pop()
        raw_description = "\n".join(lines)

        include_paths = [path.strip() for path in TASK_INCLUDE_PATTERN.findall(pending.title)]
        if include_paths:
            task = self._include_task(pending, raw_description, include_paths)
        else:
            task = Task(
                title=pending.title,
                display_title=pending.title,
                description=self._expand(raw_description),
                raw_description=raw_description,
                checked=pending.checked,
            )

        self.column.tasks.append(task)
        self.state = ParseState.COLUMN_TITLE

    def _include_task(self, pending: _PendingTask, raw_description: str, paths: list[str]) -> Task:
        title = ""
        description = ""
        try:
            title, description = self.resolver.resolve_task_include(paths[0], self.base_dir)
        except IncludeReadError as e:
            self._include_issue(paths[0], e)

        if not title:
            rest = TASK_INCLUDE_PATTERN.sub("", pending.title).strip()
            title = rest or Path(unquote(paths[0])).stem

        return Task(
            title=pending.title,
            display_title=title,
            description=description,
            raw_description=raw_description,
            checked=pending.checked,
            include_mode=True,
            include_files=tuple(paths),
        )

    def _expand(self, raw_description: str) -> str:
        if not INCLUDE_PATTERN.search(raw_description):
            return raw_description
        expanded, errors = self.resolver.expand_includes(raw_description, self.base_dir)
        for error in errors:
            self._include_issue(error.path, error)
        return expanded

    # --- Settings footer ---

    def _finish_settings(self) -> None:
        if not self.settings_lines:
            return

        lines = self.settings_lines
        while lines and not lines[-1].strip():
            lines.pop()
        self.board.settings_block = "\n".join(lines)

        fences = [i for i, line in enumerate(lines) if FENCE_PATTERN.match(line)]
        if len(fences) < 2:
            self._anomaly(None, "Settings block has no fenced JSON")
            return

        payload = "\n".join(lines[fences[0] + 1 : fences[1]])
        try:
            settings = json.loads(payload)
        except json.JSONDecodeError as e:
            self._anomaly(None, f"Settings block is not valid JSON: {e}")
            return

        if isinstance(settings, dict):
            self.board.settings = settings
        else:
            self._anomaly(None, "Settings block is not a JSON object")

    # --- Issue recording ---

    def _anomaly(self, line: int | None, message: str) -> None:
        logger.debug("Parse anomaly (line %s): %s", line, message)
        self.board.anomalies.append(ParseAnomaly(line=line, message=message))

    def _include_issue(self, path: str, error: IncludeReadError) -> None:
        self.board.include_errors.append(
            IncludeIssue(path=path, include_type=str(error.include_type), message=str(error))
        )


def _dedent(line: str) -> str:
    """Remove one indentation unit (two spaces or a tab)."""
    if line.startswith(INDENT):
        return line[len(INDENT) :]
    if line.startswith("\t"):
        return line[1:]
    return line.lstrip(" ")
