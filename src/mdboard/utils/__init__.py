"""Utility modules."""

from .datetime import parse_tag_date, today_local
from .ids import generate_column_id, generate_task_id

__all__ = [
    "generate_column_id",
    "generate_task_id",
    "parse_tag_date",
    "today_local",
]
