"""Evaluation of gather predicate trees against a card's tags."""

from __future__ import annotations

import operator
from collections.abc import Callable, Sequence
from datetime import date

from ..models.rules import PERSON_PROPERTY, And, Compare, GatherRule, Node, Not, Or
from ..models.tags import Tag
from ..utils.tags import authoritative_date, person_names

COMPARATORS: dict[str, Callable[[int, int], bool]] = {
    "=": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    ">": operator.gt,
    "<=": operator.le,
    ">=": operator.ge,
}


def evaluate(rule: GatherRule | Node, tags: Sequence[Tag], today: date) -> bool:
    """Evaluate a rule (or bare node) for a card.

    A leaf whose property has no matching tag on the card is false.
    """
    node = rule.root if isinstance(rule, GatherRule) else rule
    return _evaluate(node, _CardFacts(tags, today))


class _CardFacts:
    """Lazily computed card values shared by all leaves of one evaluation."""

    def __init__(self, tags: Sequence[Tag], today: date) -> None:
        self.tags = tags
        self.today = today
        self._persons: set[str] | None = None
        self._due: date | None = None
        self._due_loaded = False

    @property
    def persons(self) -> set[str]:
        if self._persons is None:
            self._persons = {name.lower() for name in person_names(self.tags)}
        return self._persons

    @property
    def due(self) -> date | None:
        if not self._due_loaded:
            self._due = authoritative_date(self.tags)
            self._due_loaded = True
        return self._due


def _evaluate(node: Node, facts: _CardFacts) -> bool:
    if isinstance(node, And):
        return all(_evaluate(child, facts) for child in node.children)
    if isinstance(node, Or):
        return any(_evaluate(child, facts) for child in node.children)
    if isinstance(node, Not):
        return not _evaluate(node.child, facts)
    if isinstance(node, Compare):
        return _compare(node, facts)
    raise TypeError(f"Unknown rule node: {node!r}")


def _compare(leaf: Compare, facts: _CardFacts) -> bool:
    if leaf.property == PERSON_PROPERTY:
        if not facts.persons:
            return False
        present = str(leaf.value) in facts.persons
        return present if leaf.op == "=" else not present

    due = facts.due
    if due is None:
        return False

    value = date_property(leaf.property, due, facts.today)
    return COMPARATORS[leaf.op](value, int(leaf.value))


def date_property(prop: str, due: date, today: date) -> int:
    """Numeric value of a date property for a due date.

    ``day``/``dayoffset`` is the signed number of calendar days from today,
    ``weekday``/``weekdaynum`` the ISO weekday (Monday=1) and
    ``month``/``monthnum`` the month number.
    """
    if prop in ("day", "dayoffset"):
        return (due - today).days
    if prop in ("weekday", "weekdaynum"):
        return due.isoweekday()
    if prop in ("month", "monthnum"):
        return due.month
    raise ValueError(f"Unknown date property: {prop}")
