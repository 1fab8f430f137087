"""Tag value types extracted from card and column text.

Tags are never stored on the board; they are recomputed from the raw text
whenever a consumer (rendering, auto-sort) needs them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

DEFAULT_DATE_KIND = "duedate"


@dataclass(frozen=True)
class Tag:
    """Base class for every extracted tag. ``raw`` is the token as written."""

    raw: str


@dataclass(frozen=True)
class PlainTag(Tag):
    """A ``#name`` tag with no special meaning to the core."""

    name: str


@dataclass(frozen=True)
class DateTag(Tag):
    """An ``@date`` or ``@kind:date`` tag.

    ``date`` is None when the token matches the date grammar but is not a
    real calendar day (e.g. ``@2025-02-30``). Only the first tag of each
    kind in a text is ``authoritative``.
    """

    kind: str
    value: str
    date: date | None
    authoritative: bool = True


@dataclass(frozen=True)
class PersonTag(Tag):
    """An ``@name`` mention that is not a date."""

    name: str


@dataclass(frozen=True)
class StickyTag(Tag):
    """``#sticky`` / ``@sticky``: the card is pinned to its column."""


@dataclass(frozen=True)
class RowTag(Tag):
    """``#rowN`` layout tag on a column header."""

    number: int


@dataclass(frozen=True)
class GatherTag(Tag):
    """``#gather_<expr>`` auto-sort rule on a column header."""

    expression: str
