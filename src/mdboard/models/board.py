"""Board domain model: columns of task cards parsed from a markdown board."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..utils.columns import get_column_row
from ..utils.ids import generate_column_id, generate_task_id


class Task(BaseModel):
    """A single card.

    ``raw_description`` is what the main document holds and is the only
    description ever serialized. ``description`` is the display text with
    ``!!!include()!!!`` directives expanded (or the included file's body for
    task includes).
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=generate_task_id)
    title: str = ""
    display_title: str = ""
    description: str = ""
    raw_description: str = ""
    checked: bool = False
    include_mode: bool = False
    include_files: tuple[str, ...] = ()

    @property
    def text(self) -> str:
        """Display title and description joined, the text tags are read from."""
        return f"{self.display_title or self.title} {self.description}"

    def with_raw_description(self, raw_description: str) -> Task:
        """Return a copy with a new raw description (display text follows it).

        Only valid for descriptions without include directives; callers that
        need include expansion go through the codec again.
        """
        return self.model_copy(
            update={"raw_description": raw_description, "description": raw_description}
        )


class Column(BaseModel):
    """A board column (``## title`` section)."""

    id: str = Field(default_factory=generate_column_id)
    title: str = ""
    display_title: str = ""
    tasks: list[Task] = Field(default_factory=list)
    include_mode: bool = False
    include_files: list[str] = Field(default_factory=list)

    @property
    def row(self) -> int:
        """Layout row from a ``#rowN`` tag in the title (defaults to 1)."""
        return get_column_row(self.title)


class ParseAnomaly(BaseModel):
    """Malformed structure that the parser recovered from."""

    line: int | None = None  # 1-based line number in the source text
    message: str


class IncludeIssue(BaseModel):
    """An include file that could not be read during parsing."""

    path: str
    include_type: str  # "column", "task" or "regular"
    message: str


class Board(BaseModel):
    """An ordered sequence of columns plus the document parts kept verbatim."""

    columns: list[Column] = Field(default_factory=list)
    title: str | None = None
    yaml_header: str | None = None
    front_matter: dict[str, Any] = Field(default_factory=dict)
    settings_block: str | None = None
    settings: dict[str, Any] | None = None
    source_directory: Path | None = None
    anomalies: list[ParseAnomaly] = Field(default_factory=list)
    include_errors: list[IncludeIssue] = Field(default_factory=list)

    def get_column(self, column_id: str) -> Column | None:
        """Find a column by ID."""
        for column in self.columns:
            if column.id == column_id:
                return column
        return None

    def find_task(self, task_id: str) -> tuple[Column, Task] | None:
        """Find a task and the column holding it."""
        for column in self.columns:
            for task in column.tasks:
                if task.id == task_id:
                    return column, task
        return None

    def all_tasks(self) -> list[Task]:
        """All tasks in board order."""
        return [task for column in self.columns for task in column.tasks]

    def columns_by_row(self) -> dict[int, list[Column]]:
        """Columns grouped by layout row, keeping board order within a row."""
        rows: dict[int, list[Column]] = {}
        for column in self.columns:
            rows.setdefault(column.row, []).append(column)
        return dict(sorted(rows.items()))

    @property
    def task_count(self) -> int:
        """Number of tasks across all columns."""
        return sum(len(column.tasks) for column in self.columns)
