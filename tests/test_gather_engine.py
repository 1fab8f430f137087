"""Tests for gather rule evaluation and the column-level engine."""

from datetime import date

import pytest

from mdboard.gather import GatherRuleEngine, GatherSyntaxError
from mdboard.gather.evaluator import date_property, evaluate
from mdboard.gather.parser import GatherExpressionParser
from mdboard.models import Column, Compare, Or
from mdboard.utils.tags import extract_tags

# Wednesday
TODAY = date(2025, 1, 1)


@pytest.fixture
def engine() -> GatherRuleEngine:
    """Create a rule engine."""
    return GatherRuleEngine()


def matches(expression: str, card_text: str, today: date = TODAY) -> bool:
    node = GatherExpressionParser().parse(expression)
    return evaluate(node, extract_tags(card_text), today)


class TestDateRules:
    """Tests for date property comparisons."""

    def test_day_offset(self):
        """day is the signed number of days from today."""
        assert matches("day<3", "Ship it @2025-01-03")
        assert matches("day=2", "Ship it @2025-01-03")
        assert not matches("day>2", "Ship it @2025-01-03")

    def test_range(self):
        """0<day<3 includes tomorrow, excludes today."""
        assert matches("0<day<3", "@2025-01-02")
        assert not matches("0<day<3", "@2025-01-01")

    def test_overdue(self):
        """Past dates give negative offsets."""
        assert matches("day<0", "@2024-12-31")

    def test_weekday(self):
        """Weekday uses ISO numbering, Monday=1."""
        # 2025-01-03 is a Friday
        assert matches("weekday=fri", "@2025-01-03")
        assert matches("weekday=5", "@2025-01-03")
        assert matches("weekdaynum=5", "@2025-01-03")
        assert not matches("weekday=mon", "@2025-01-03")

    def test_month(self):
        """month compares the month number."""
        assert matches("month=jan", "@2025-01-03")
        assert matches("monthnum<2", "@2025-01-03")
        assert not matches("month=dec", "@2025-01-03")

    def test_missing_date_is_false(self):
        """A date leaf on an undated card is false."""
        assert not matches("day<3", "No date here")
        assert not matches("day>=0", "@2025-02-30")
        assert matches("!day<3", "No date here")

    def test_only_first_date_counts(self):
        """The authoritative due date is the first one."""
        assert matches("day=0", "@2025-01-01 @2025-01-05")
        assert not matches("day=4", "@2025-01-01 @2025-01-05")

    def test_done_date_is_not_due(self):
        """Typed dates of other kinds are ignored."""
        assert not matches("day<3", "@done:2025-01-01")

    def test_date_property_unknown(self):
        """Unknown properties are a programming error."""
        with pytest.raises(ValueError):
            date_property("year", TODAY, TODAY)


class TestPersonRules:
    """Tests for person comparisons."""

    def test_case_insensitive(self):
        """Person names compare case-insensitively."""
        assert matches("reto", "Call @RETO")
        assert matches("Reto", "Call @reto")

    def test_not_equal_needs_some_person(self):
        """person!=x is true only for cards that mention someone else."""
        assert matches("person!=anna", "@reto")
        assert not matches("person!=anna", "@anna")
        assert not matches("person!=anna", "nobody mentioned")

    def test_negated_person(self):
        """!name is true for cards without that person."""
        assert matches("!anna", "nobody mentioned")

    def test_combined(self):
        """And/Or across persons and dates."""
        assert matches("reto&day<3|urgent", "@reto @2025-01-02")
        assert matches("reto&day<3|urgent", "@urgent")
        assert not matches("reto&day<3|urgent", "@reto @2025-02-01")


class TestGatherRuleEngine:
    """Tests for GatherRuleEngine."""

    def test_header_without_rule(self, engine: GatherRuleEngine):
        """Plain headers have no rule."""
        assert engine.parse("Todo #row2") is None

    def test_single_rule(self, engine: GatherRuleEngine):
        """One gather tag becomes the rule root."""
        rule = engine.parse("Reto's cards #gather_Reto", column_id="col-1")

        assert rule is not None
        assert rule.root == Compare("=", "person", "reto")
        assert rule.column_id == "col-1"
        assert rule.expressions == ("Reto",)

    def test_multiple_rules_are_ored(self, engine: GatherRuleEngine):
        """Several gather tags in one header combine with |."""
        rule = engine.parse("Soon #gather_day<3 #gather_Reto")

        assert rule.root == Or((Compare("<", "day", 3), Compare("=", "person", "reto")))

    def test_row_recorded(self, engine: GatherRuleEngine):
        """The header's row is kept on the rule."""
        assert engine.parse("#row2 #gather_Reto").row == 2

    def test_syntax_error_propagates(self, engine: GatherRuleEngine):
        """A broken expression raises."""
        with pytest.raises(GatherSyntaxError):
            engine.parse("Bad #gather_day=abc")

    def test_parse_column(self, engine: GatherRuleEngine):
        """Rules read from a column carry its id."""
        column = Column(title="Mine #gather_Reto")

        rule = engine.parse_column(column)

        assert rule.column_id == column.id

    def test_evaluate(self, engine: GatherRuleEngine):
        """Engine evaluation delegates to the evaluator."""
        rule = engine.parse("#gather_day<3")

        assert engine.evaluate(rule, extract_tags("@2025-01-02"), TODAY)
        assert not engine.evaluate(rule, extract_tags("@2025-01-10"), TODAY)

    @pytest.mark.parametrize(
        ("header", "expected"),
        [
            ("#ungathered", True),
            ("Inbox #ungathered", True),
            ("Inbox #Ungathered #row2", True),
            ("ungathered", False),
            ("Inbox #ungathered-ish", False),
        ],
    )
    def test_is_ungathered(self, header: str, expected: bool):
        """Only the #ungathered tag marks the fallback column."""
        assert GatherRuleEngine.is_ungathered(header) is expected
