"""mdboard - markdown kanban board codec and gather-rule auto-sort."""

from .gather import GatherRuleEngine, GatherSyntaxError
from .models import Board, Column, Task
from .services import (
    AutoSortOrchestrator,
    IncludeReadError,
    IncludeResolver,
    MarkdownBoardCodec,
)

__version__ = "0.1.0"

__all__ = [
    "AutoSortOrchestrator",
    "Board",
    "Column",
    "GatherRuleEngine",
    "GatherSyntaxError",
    "IncludeReadError",
    "IncludeResolver",
    "MarkdownBoardCodec",
    "Task",
    "__version__",
]
