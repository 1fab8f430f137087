"""Tests for board models."""

import pytest
from pydantic import ValidationError

from mdboard.models import Board, Column, Task
from mdboard.utils.ids import short_id


class TestTask:
    """Tests for Task model."""

    def test_ids_generated(self):
        """Every task gets its own prefixed id."""
        first, second = Task(), Task()

        assert first.id.startswith("task-")
        assert first.id != second.id

    def test_frozen(self):
        """Tasks are immutable values."""
        task = Task(title="x")

        with pytest.raises(ValidationError):
            task.title = "y"

    def test_text_prefers_display_title(self):
        """Tag text is the display title plus description."""
        task = Task(title="!!!taskinclude(t.md)!!!", display_title="Real @Reto", description="body")

        assert task.text == "Real @Reto body"

    def test_with_raw_description(self):
        """Copies keep the id and update both descriptions."""
        task = Task(title="x", raw_description="old", description="old")

        updated = task.with_raw_description("new")

        assert updated.id == task.id
        assert updated.raw_description == updated.description == "new"
        assert task.raw_description == "old"


class TestColumn:
    """Tests for Column model."""

    def test_ids_generated(self):
        """Columns get prefixed ids."""
        assert Column().id.startswith("col-")

    def test_row(self):
        """Row comes from the #rowN tag."""
        assert Column(title="Later #row3").row == 3
        assert Column(title="Now").row == 1


class TestBoard:
    """Tests for Board model."""

    @pytest.fixture
    def board(self) -> Board:
        """A board with two rows."""
        return Board(
            columns=[
                Column(title="A #row2", tasks=[Task(title="a1")]),
                Column(title="B", tasks=[Task(title="b1"), Task(title="b2")]),
                Column(title="C #row2"),
            ]
        )

    def test_get_column(self, board: Board):
        """Columns are found by id."""
        column = board.columns[1]

        assert board.get_column(column.id) is column
        assert board.get_column("col-missing") is None

    def test_find_task(self, board: Board):
        """Tasks are found with their column."""
        task = board.columns[1].tasks[1]

        assert board.find_task(task.id) == (board.columns[1], task)
        assert board.find_task("task-missing") is None

    def test_all_tasks_and_count(self, board: Board):
        """Tasks in board order."""
        assert [task.title for task in board.all_tasks()] == ["a1", "b1", "b2"]
        assert board.task_count == 3

    def test_columns_by_row(self, board: Board):
        """Rows ascend, board order kept within a row."""
        rows = board.columns_by_row()

        assert list(rows) == [1, 2]
        assert [column.title for column in rows[2]] == ["A #row2", "C #row2"]


def test_short_id():
    """Log ids are the first eight uuid characters."""
    assert short_id("task-12345678-aaaa") == "12345678"
