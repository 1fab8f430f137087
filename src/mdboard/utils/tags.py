"""Tag extraction and classification.

A tag token starts with ``#`` or ``@`` at the start of the text or after
whitespace, and runs to the next whitespace. Everything in between,
punctuation included, is part of the token.

Classification order:
- ``#gather_<expr>``          -> GatherTag
- ``#row<N>`` (N >= 1)        -> RowTag
- ``#sticky`` / ``@sticky``   -> StickyTag
- ``@<kind>:<date>``, ``@<date>`` -> DateTag (kind defaults to ``duedate``)
- ``@<name>``                 -> PersonTag
- ``#<name>``                 -> PlainTag
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date

from ..models.tags import (
    DEFAULT_DATE_KIND,
    DateTag,
    GatherTag,
    PersonTag,
    PlainTag,
    RowTag,
    StickyTag,
    Tag,
)
from .columns import get_column_row, sort_columns_by_row
from .datetime import is_date_value, parse_tag_date

# "#" bodies may not start with "#" or "@" so "##" headings are not tags
TOKEN_PATTERN = re.compile(r"(?:(?<=\s)|^)([#@])((?<=@)\S+|(?<=#)[^\s#@]\S*)")
ROW_PATTERN = re.compile(r"^row(\d+)$", re.IGNORECASE)
TYPED_DATE_PATTERN = re.compile(r"^([A-Za-z][\w-]*):(\S+)$")

STICKY_WORD = "sticky"
GATHER_PREFIX = "gather_"

# Typed date prefixes that mean the same thing as a bare date
DATE_KIND_ALIASES = {"due": DEFAULT_DATE_KIND}

__all__ = [
    "authoritative_date",
    "extract_first_plain_tag",
    "extract_tags",
    "get_column_row",
    "has_sticky",
    "person_names",
    "sort_columns_by_row",
]


def extract_tags(text: str) -> list[Tag]:
    """Extract every tag from text, in lexical order.

    Duplicate date kinds are kept but only the first of each kind is marked
    ``authoritative``.
    """
    if not text:
        return []

    tags: list[Tag] = []
    seen_kinds: set[str] = set()

    for match in TOKEN_PATTERN.finditer(text):
        tag = classify_token(match.group(1), match.group(2))
        if isinstance(tag, DateTag):
            if tag.kind in seen_kinds:
                tag = DateTag(
                    raw=tag.raw,
                    kind=tag.kind,
                    value=tag.value,
                    date=tag.date,
                    authoritative=False,
                )
            else:
                seen_kinds.add(tag.kind)
        tags.append(tag)

    return tags


def classify_token(prefix: str, body: str) -> Tag:
    """Classify a single token split into its prefix (``#``/``@``) and body."""
    raw = f"{prefix}{body}"

    if prefix == "#":
        if body.startswith(GATHER_PREFIX) and len(body) > len(GATHER_PREFIX):
            return GatherTag(raw=raw, expression=body[len(GATHER_PREFIX) :])
        row_match = ROW_PATTERN.match(body)
        if row_match and int(row_match.group(1)) >= 1:
            return RowTag(raw=raw, number=int(row_match.group(1)))
        if body.lower() == STICKY_WORD:
            return StickyTag(raw=raw)
        return PlainTag(raw=raw, name=body)

    if body.lower() == STICKY_WORD:
        return StickyTag(raw=raw)

    date_tag = _classify_date(raw, body)
    if date_tag is not None:
        return date_tag

    return PersonTag(raw=raw, name=body)


def _classify_date(raw: str, body: str) -> DateTag | None:
    """Return a DateTag when body matches the ``[kind:]date`` grammar."""
    if is_date_value(body):
        return DateTag(raw=raw, kind=DEFAULT_DATE_KIND, value=body, date=parse_tag_date(body))

    typed = TYPED_DATE_PATTERN.match(body)
    if typed and is_date_value(typed.group(2)):
        kind = typed.group(1).lower()
        kind = DATE_KIND_ALIASES.get(kind, kind)
        value = typed.group(2)
        return DateTag(raw=raw, kind=kind, value=value, date=parse_tag_date(value))

    return None


def extract_first_plain_tag(text: str) -> Tag | None:
    """First tag usable for card accent styling.

    Row and gather tags are layout/rule markup and are skipped.
    """
    for tag in extract_tags(text):
        if isinstance(tag, (RowTag, GatherTag)):
            continue
        return tag
    return None


def authoritative_date(tags: Iterable[Tag], kind: str = DEFAULT_DATE_KIND) -> date | None:
    """The date of the first tag of the given kind, if it is a real day."""
    kind = DATE_KIND_ALIASES.get(kind.lower(), kind.lower())
    for tag in tags:
        if isinstance(tag, DateTag) and tag.kind == kind:
            return tag.date
    return None


def person_names(tags: Iterable[Tag]) -> list[str]:
    """Names of all person tags, in order."""
    return [tag.name for tag in tags if isinstance(tag, PersonTag)]


def has_sticky(tags: Iterable[Tag]) -> bool:
    """True if any tag pins the card in place."""
    return any(isinstance(tag, StickyTag) for tag in tags)
