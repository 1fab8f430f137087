"""Column layout helpers shared by the model and the renderers."""

import re
from collections.abc import Sequence
from typing import Protocol, TypeVar

# Whole "#rowN" tokens only, the same tokens utils.tags classifies as RowTag
ROW_TAG_PATTERN = re.compile(r"(?:(?<=\s)|^)#row(\d+)(?=\s|$)", re.IGNORECASE)


class _Titled(Protocol):
    title: str


T = TypeVar("T", bound=_Titled)


def get_column_row(title: str) -> int:
    """Row number from a ``#rowN`` tag in a column title.

    The first positive ``#rowN`` wins; titles without one are on row 1.
    """
    if not title:
        return 1
    for match in ROW_TAG_PATTERN.finditer(title):
        number = int(match.group(1))
        if number >= 1:
            return number
    return 1


def sort_columns_by_row(columns: Sequence[T]) -> list[T]:
    """Order columns by row, keeping their board order within a row."""
    return sorted(columns, key=lambda column: get_column_row(column.title))
