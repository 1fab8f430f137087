"""Column-header level gather rule handling."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date

from ..models.board import Column
from ..models.rules import GatherRule, Node, Or
from ..models.tags import GatherTag, PlainTag, Tag
from ..utils.columns import get_column_row
from ..utils.tags import extract_tags
from .evaluator import evaluate
from .parser import GatherExpressionParser

logger = logging.getLogger(__name__)

UNGATHERED_TAG = "ungathered"


class GatherRuleEngine:
    """Parse column headers into rules and evaluate them for cards.

    Multiple ``#gather_`` tags in one header are OR'd together. The
    ``#ungathered`` marker is not a rule; see ``is_ungathered``.
    """

    def __init__(self) -> None:
        self._parser = GatherExpressionParser()

    def parse(self, header_text: str, column_id: str | None = None) -> GatherRule | None:
        """Parse every gather tag in a column header.

        Args:
            header_text: Raw column title
            column_id: Column the rule belongs to

        Returns:
            The combined rule, or None if the header has no gather tag

        Raises:
            GatherSyntaxError: If any gather expression is malformed
        """
        expressions = [
            tag.expression for tag in extract_tags(header_text) if isinstance(tag, GatherTag)
        ]
        if not expressions:
            return None

        roots: list[Node] = [self._parser.parse(expression) for expression in expressions]
        root = roots[0] if len(roots) == 1 else Or(tuple(roots))

        return GatherRule(
            root=root,
            column_id=column_id,
            row=get_column_row(header_text),
            expressions=tuple(expressions),
        )

    def parse_column(self, column: Column) -> GatherRule | None:
        """Parse the rule declared in a column's title."""
        return self.parse(column.title, column_id=column.id)

    def evaluate(self, rule: GatherRule, tags: Sequence[Tag], today: date) -> bool:
        """True if a card with these tags belongs to the rule's column."""
        return evaluate(rule, tags, today)

    @staticmethod
    def is_ungathered(header_text: str) -> bool:
        """True if the header carries the ``#ungathered`` fallback marker."""
        return any(
            isinstance(tag, PlainTag) and tag.name.lower() == UNGATHERED_TAG
            for tag in extract_tags(header_text)
        )
