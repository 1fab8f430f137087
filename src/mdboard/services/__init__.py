"""Service layer: codec, include resolution and auto-sort."""

from .auto_sort import AutoSortOrchestrator, SortPlan
from .include_resolver import (
    ConflictState,
    IncludeFileBinding,
    IncludeReadError,
    IncludeResolver,
    IncludeType,
)
from .markdown_codec import MarkdownBoardCodec, ParseState
from .presentation import PresentationParser, Slide

__all__ = [
    "AutoSortOrchestrator",
    "ConflictState",
    "IncludeFileBinding",
    "IncludeReadError",
    "IncludeResolver",
    "IncludeType",
    "MarkdownBoardCodec",
    "ParseState",
    "PresentationParser",
    "Slide",
    "SortPlan",
]
