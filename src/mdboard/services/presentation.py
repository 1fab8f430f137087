"""Slide deck format adapter for column include files."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import frontmatter

from ..models import Task
from ..utils.front_matter import split_front_matter

SLIDE_SEPARATOR = re.compile(r"^---\s*$", re.MULTILINE)
HEADING_PATTERN = re.compile(r"^#+\s+")
DEFAULT_TITLE_PATTERN = re.compile(r"^Slide \d+$")


@dataclass
class Slide:
    """One ``---`` separated section of a deck."""

    number: int
    content: str
    title: str | None = None


class PresentationParser:
    """Default ``PresentationAdapter``: one task per slide.

    A slide's first heading becomes the task title; slides without a heading
    are titled ``Slide N``. YAML front matter at the top of the deck is not a
    slide.
    """

    def parse_slides(self, text: str) -> list[Slide]:
        """Split deck text into non-empty slides."""
        if not text or not text.strip():
            return []

        _, body = split_front_matter(text)
        slides: list[Slide] = []

        for index, raw in enumerate(SLIDE_SEPARATOR.split(body)):
            content = raw.strip()
            if not content:
                continue

            lines = content.split("\n")
            title: str | None = None
            first = next((i for i, line in enumerate(lines) if line.strip()), None)
            if first is not None and HEADING_PATTERN.match(lines[first]):
                title = HEADING_PATTERN.sub("", lines[first]).strip()
                content = "\n".join(lines[:first] + lines[first + 1 :]).strip()

            slides.append(Slide(number=index + 1, content=content, title=title))

        return slides

    def parse(self, text: str) -> list[Task]:
        """Convert deck text into tasks."""
        tasks: list[Task] = []
        for slide in self.parse_slides(text):
            title = slide.title or f"Slide {slide.number}"
            tasks.append(
                Task(
                    title=title,
                    display_title=title,
                    description=slide.content,
                    raw_description=slide.content,
                )
            )
        return tasks

    def serialize(
        self,
        tasks: Sequence[Task],
        metadata: Mapping[str, Any] | None = None,
    ) -> str:
        """Convert tasks back into deck text.

        Generated ``Slide N`` titles are not written back as headings.
        """
        slides: list[str] = []
        for task in tasks:
            parts: list[str] = []
            title = task.display_title or task.title
            if title and not DEFAULT_TITLE_PATTERN.match(title):
                parts.append(f"# {title}")
            if task.raw_description.strip():
                parts.append(task.raw_description.strip())
            slide = "\n\n".join(parts)
            if slide:
                slides.append(slide)

        body = "\n\n---\n\n".join(slides)

        if metadata:
            post = frontmatter.Post(body, **dict(metadata))
            return frontmatter.dumps(post, sort_keys=False) + "\n"
        return body + "\n" if body else ""
