"""Tests for the command line interface."""

from pathlib import Path

import pytest

from mdboard.__main__ import main, parse_args

BOARD = (
    "---\n\nkanban-plugin: board\n\n---\n\n"
    "## Reto #gather_Reto\n\n"
    "## Inbox #ungathered\n\n"
    "## Other\n"
    "- [ ] Call back @Reto\n"
    "- [ ] Loose end\n"
)


@pytest.fixture
def board_file(tmp_path: Path) -> Path:
    """A board on disk."""
    path = tmp_path / "board.md"
    path.write_text(BOARD)
    return path


def run(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


class TestParseArgs:
    """Tests for argument parsing."""

    def test_sort_options(self):
        """--today parses an ISO date."""
        args = parse_args(["-vv", "sort", "b.md", "--today", "2025-01-01", "--write"])

        assert args.command == "sort"
        assert args.verbose == 2
        assert args.today.isoformat() == "2025-01-01"
        assert args.write

    def test_command_required(self):
        """A subcommand must be given."""
        with pytest.raises(SystemExit):
            parse_args([])


class TestShow:
    """Tests for the show command."""

    def test_lists_columns_and_tasks(self, board_file: Path, capsys: pytest.CaptureFixture):
        """Columns and task titles are printed."""
        assert run(["show", str(board_file)]) == 0

        out = capsys.readouterr().out
        assert "## Reto #gather_Reto" in out
        assert "[ ] Call back @Reto" in out

    def test_missing_file(self, tmp_path: Path, capsys: pytest.CaptureFixture):
        """Unreadable boards exit with 1."""
        assert run(["show", str(tmp_path / "nope.md")]) == 1
        assert "Cannot read board file" in capsys.readouterr().out

    def test_undecodable_file(self, tmp_path: Path, capsys: pytest.CaptureFixture):
        """A board that is not valid UTF-8 is an error line, not a traceback."""
        path = tmp_path / "board.md"
        path.write_bytes(b"## Todo\n- [ ] caf\xe9\n")

        assert run(["check", str(path)]) == 1
        assert "Cannot read board file" in capsys.readouterr().out


class TestSort:
    """Tests for the sort command."""

    def test_dry_run(self, board_file: Path, capsys: pytest.CaptureFixture):
        """Without --write the file is untouched."""
        assert run(["sort", str(board_file), "--today", "2025-01-01"]) == 0

        out = capsys.readouterr().out
        assert "Would move 2 task(s)" in out
        assert board_file.read_text() == BOARD

    def test_write(self, board_file: Path, capsys: pytest.CaptureFixture):
        """--write saves the sorted board."""
        assert run(["sort", str(board_file), "--write"]) == 0

        text = board_file.read_text()
        assert "## Reto #gather_Reto\n- [ ] Call back @Reto\n" in text
        assert "## Inbox #ungathered\n- [ ] Loose end\n" in text
        assert "Moved 2 task(s)" in capsys.readouterr().out

    def test_already_sorted(self, board_file: Path, capsys: pytest.CaptureFixture):
        """A second run has nothing to do."""
        run(["sort", str(board_file), "--write"])
        capsys.readouterr()

        assert run(["sort", str(board_file)]) == 0
        assert "Board already sorted" in capsys.readouterr().out


class TestCheck:
    """Tests for the check command."""

    def test_valid_board(self, board_file: Path, capsys: pytest.CaptureFixture):
        """A clean board exits 0."""
        assert run(["check", str(board_file)]) == 0
        assert "is a valid board" in capsys.readouterr().out

    def test_problems_reported(self, tmp_path: Path, capsys: pytest.CaptureFixture):
        """Broken rules, includes and lines are reported with exit 1."""
        path = tmp_path / "bad.md"
        path.write_text(
            "## Bad #gather_day=abc\n"
            "- [ ] !!!taskinclude(missing.md)!!!\n"
        )

        assert run(["check", str(path)]) == 1

        out = capsys.readouterr().out
        assert "Missing front matter" in out
        assert "task include missing.md" in out
        assert "Gather rule in 'Bad #gather_day=abc'" in out
        assert "3 problem(s)" in out
