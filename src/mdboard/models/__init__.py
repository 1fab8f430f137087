"""Data models."""

from .board import Board, Column, IncludeIssue, ParseAnomaly, Task
from .rules import And, Compare, GatherRule, Node, Not, Or
from .tags import (
    DEFAULT_DATE_KIND,
    DateTag,
    GatherTag,
    PersonTag,
    PlainTag,
    RowTag,
    StickyTag,
    Tag,
)

__all__ = [
    "DEFAULT_DATE_KIND",
    "And",
    "Board",
    "Column",
    "Compare",
    "DateTag",
    "GatherRule",
    "GatherTag",
    "IncludeIssue",
    "Node",
    "Not",
    "Or",
    "ParseAnomaly",
    "PersonTag",
    "PlainTag",
    "RowTag",
    "StickyTag",
    "Tag",
    "Task",
]
