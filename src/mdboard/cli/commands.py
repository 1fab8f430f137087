"""Command implementations for the mdboard CLI."""

from __future__ import annotations

import logging
from pathlib import Path

from ..config import Settings
from ..gather import GatherRuleEngine, GatherSyntaxError
from ..models import Board
from ..repositories import FilesystemContentProvider
from ..services import AutoSortOrchestrator, IncludeResolver, MarkdownBoardCodec
from .output import (
    board_heading,
    column_heading,
    empty_column,
    error,
    move,
    problem,
    row_heading,
    success,
    task_line,
)

logger = logging.getLogger(__name__)


def build_codec(settings: Settings) -> MarkdownBoardCodec:
    """Codec wired to the filesystem with the configured limits."""
    provider = FilesystemContentProvider(encoding=settings.file_encoding)
    resolver = IncludeResolver(provider, max_depth=settings.include_max_depth)
    return MarkdownBoardCodec(resolver)


def load_board(path: Path, settings: Settings) -> tuple[MarkdownBoardCodec, Board] | None:
    """Read and parse a board file; prints an error and returns None on failure."""
    provider = FilesystemContentProvider(encoding=settings.file_encoding)
    try:
        text = provider.read(path)
    except (OSError, UnicodeError) as e:
        error(f"Cannot read board file {path}: {getattr(e, 'strerror', None) or e}")
        return None

    codec = build_codec(settings)
    board = codec.parse(text, path.resolve().parent)
    logger.info("Loaded %s: %d columns, %d tasks", path, len(board.columns), board.task_count)
    return codec, board


def run_show(path: Path, settings: Settings) -> int:
    """Print the board's columns (grouped by row) and tasks."""
    loaded = load_board(path, settings)
    if loaded is None:
        return 1
    _, board = loaded

    if board.title:
        board_heading(board.title)

    rows = board.columns_by_row()
    for row, columns in rows.items():
        if len(rows) > 1:
            row_heading(row)
        for column in columns:
            column_heading(column.display_title, included=column.include_mode)
            for task in column.tasks:
                task_line(task.display_title or task.title, task.checked)
            if not column.tasks:
                empty_column()

    _print_issues(board)
    return 0


def run_sort(path: Path, settings: Settings, write: bool = False) -> int:
    """Run the gather-rule sort and report (and optionally save) the result."""
    loaded = load_board(path, settings)
    if loaded is None:
        return 1
    codec, board = loaded

    orchestrator = AutoSortOrchestrator()
    plan = orchestrator.plan(board, settings.today)
    sorted_board = orchestrator.apply(board, plan)

    for column_id, message in plan.rule_errors.items():
        column = board.get_column(column_id)
        name = column.display_title if column else column_id
        error(f"Rule disabled in '{name}': {message}")

    moves = plan.moves
    if not moves:
        success("Board already sorted")
        return 0

    for task_id, (source_id, target_id) in moves.items():
        found = board.find_task(task_id)
        source = board.get_column(source_id)
        target = board.get_column(target_id)
        if found is None or source is None or target is None:
            continue
        _, task = found
        move(task.display_title or task.title, source.display_title, target.display_title)

    if write:
        try:
            FilesystemContentProvider(encoding=settings.file_encoding).write(
                path, codec.serialize(sorted_board)
            )
        except (OSError, UnicodeError) as e:
            error(f"Cannot write board file {path}: {getattr(e, 'strerror', None) or e}")
            return 1
        success(f"Moved {len(moves)} task(s), saved {path}")
    else:
        success(f"Would move {len(moves)} task(s) (use --write to save)")
    return 0


def run_check(path: Path, settings: Settings) -> int:
    """Report parse anomalies, include errors and gather syntax errors."""
    loaded = load_board(path, settings)
    if loaded is None:
        return 1
    _, board = loaded

    problems = _print_issues(board)

    engine = GatherRuleEngine()
    for column in board.columns:
        try:
            engine.parse_column(column)
        except GatherSyntaxError as e:
            error(f"Gather rule in '{column.display_title}': {e}")
            problems += 1

    if problems:
        error(f"{problems} problem(s) found in {path}")
        return 1
    success(f"{path} is a valid board ({len(board.columns)} columns, {board.task_count} tasks)")
    return 0


def _print_issues(board: Board) -> int:
    for anomaly in board.anomalies:
        problem(anomaly.message, anomaly.line)
    for issue in board.include_errors:
        problem(f"{issue.include_type} include {issue.path}: {issue.message}")
    return len(board.anomalies) + len(board.include_errors)
