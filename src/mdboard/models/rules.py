"""Gather rule predicate trees."""

from __future__ import annotations

from dataclasses import dataclass, field

# Comparison operators understood by the gather expression language
OPERATORS = ("=", "!=", "<", ">", "<=", ">=")

PERSON_PROPERTY = "person"

# Properties computed from the card's due date relative to "today"
DATE_PROPERTIES = ("day", "dayoffset", "weekday", "weekdaynum", "month", "monthnum")


@dataclass(frozen=True)
class Node:
    """Base class for predicate tree nodes."""


@dataclass(frozen=True)
class And(Node):
    children: tuple[Node, ...]


@dataclass(frozen=True)
class Or(Node):
    children: tuple[Node, ...]


@dataclass(frozen=True)
class Not(Node):
    child: Node


@dataclass(frozen=True)
class Compare(Node):
    """Leaf comparison ``property op value``.

    ``value`` is already normalised by the parser: a lowercase name for
    ``person``, an int for every date property (weekday and month names are
    converted to their ISO number).
    """

    op: str
    property: str
    value: str | int


@dataclass(frozen=True)
class GatherRule:
    """A parsed column-header rule, bound to the column it was read from."""

    root: Node
    column_id: str | None = None
    row: int = 1
    expressions: tuple[str, ...] = field(default_factory=tuple)
