"""Tests for the slide deck adapter."""

import pytest

from mdboard.models import Task
from mdboard.services import PresentationParser


@pytest.fixture
def parser() -> PresentationParser:
    """Create a deck parser."""
    return PresentationParser()


class TestParse:
    """Tests for deck parsing."""

    def test_slides_to_tasks(self, parser: PresentationParser):
        """Headings become titles, the rest the description."""
        tasks = parser.parse("# One\nA\n\n---\n\n## Two\nB\nC\n")

        assert [(task.title, task.description) for task in tasks] == [
            ("One", "A"),
            ("Two", "B\nC"),
        ]
        assert tasks[0].raw_description == "A"

    def test_front_matter_is_not_a_slide(self, parser: PresentationParser):
        """A leading YAML mapping is skipped."""
        tasks = parser.parse("---\nmarp: true\n---\n# One\nA\n\n---\n\nno heading\n")

        assert [task.title for task in tasks] == ["One", "Slide 2"]
        assert tasks[1].description == "no heading"

    def test_leading_separator(self, parser: PresentationParser):
        """A deck opening with a separator is not mistaken for front matter."""
        tasks = parser.parse("---\n# One\n---\n# Two\n")

        assert [task.title for task in tasks] == ["One", "Two"]

    def test_empty_slides_skipped(self, parser: PresentationParser):
        """Blank sections produce no tasks."""
        assert [task.title for task in parser.parse("# A\n---\n\n---\n# B")] == ["A", "B"]

    def test_empty_deck(self, parser: PresentationParser):
        """Nothing in, nothing out."""
        assert parser.parse("") == []
        assert parser.parse("  \n") == []


class TestSerialize:
    """Tests for writing decks."""

    def test_generated_titles_not_written(self, parser: PresentationParser):
        """Slide N titles were never headings."""
        tasks = [Task(title="Slide 1", raw_description="text"), Task(title="Real")]

        assert parser.serialize(tasks) == "text\n\n---\n\n# Real\n"

    def test_with_metadata(self, parser: PresentationParser):
        """Metadata is written as front matter."""
        output = parser.serialize([Task(title="A")], metadata={"marp": True})

        assert output.startswith("---\nmarp: true\n---\n")
        assert output.endswith("# A\n")

    def test_empty(self, parser: PresentationParser):
        """No tasks, empty deck."""
        assert parser.serialize([]) == ""

    def test_round_trip(self, parser: PresentationParser):
        """Parsing serialized tasks gives the same titles and descriptions."""
        deck = "# One\n\nA\n\n---\n\n# Two\n\nB\n"

        tasks = parser.parse(deck)

        assert parser.serialize(tasks) == deck
