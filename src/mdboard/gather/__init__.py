"""Gather tag rule engine for automatic card placement."""

from .engine import UNGATHERED_TAG, GatherRuleEngine
from .evaluator import date_property, evaluate
from .parser import GatherExpressionParser, GatherSyntaxError, make_compare, tokenize

__all__ = [
    "UNGATHERED_TAG",
    "GatherExpressionParser",
    "GatherRuleEngine",
    "GatherSyntaxError",
    "date_property",
    "evaluate",
    "make_compare",
    "tokenize",
]
