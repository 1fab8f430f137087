"""Terminal output for board listings, sort reports and problem lists."""

import sys

# ANSI color codes
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
RED = "\033[31m"
DIM = "\033[2m"
RESET = "\033[0m"

CHECK = "\u2713"  # ✓
BULLET = "\u2022"  # •
CROSS = "\u2717"  # ✗
ARROW = "\u2192"  # →


def _paint(text: str, color: str) -> str:
    """Color text only when stdout is a terminal."""
    if getattr(sys.stdout, "isatty", None) and sys.stdout.isatty():
        return f"{color}{text}{RESET}"
    return text


def success(message: str) -> None:
    print(f"{_paint(CHECK, GREEN)} {message}")


def error(message: str) -> None:
    print(f"{_paint(CROSS, RED)} {message}")


def row_heading(row: int) -> None:
    print(_paint(f"Row {row}", BLUE))


def board_heading(title: str) -> None:
    print(_paint(f"# {title}", BLUE))


def column_heading(title: str, included: bool = False) -> None:
    """``## title`` line; include columns are marked."""
    suffix = _paint(" (included)", DIM) if included else ""
    print(f"{_paint(f'## {title}', BLUE)}{suffix}")


def task_line(title: str, checked: bool = False) -> None:
    mark = "x" if checked else " "
    print(f"{_paint(BULLET, YELLOW)} [{mark}] {title}")


def empty_column() -> None:
    print("  " + _paint("(empty)", DIM))


def move(title: str, source: str, target: str) -> None:
    """One planned card move."""
    print(f"{_paint(BULLET, YELLOW)} {title}: {source} {_paint(ARROW, DIM)} {target}")


def problem(message: str, line: int | None = None) -> None:
    """A parse, include or rule problem, with its source line when known."""
    where = _paint(f"line {line}: ", DIM) if line else ""
    error(f"{where}{message}")
