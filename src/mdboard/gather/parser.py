"""Gather expression parser.

Parses the ``<expr>`` part of ``#gather_<expr>`` column tags, for example:
- "Reto"                  (sugar for person=Reto)
- "day<3"                 (due within the next three days)
- "0<day&day<3" / "0<day<3"
- "reto&weekday=1|urgent" (== (reto & weekday=1) | urgent)
- "!(person=anna)|month=dec"

Precedence is ``!`` > ``&`` > ``|``; parentheses group.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..models.rules import (
    DATE_PROPERTIES,
    OPERATORS,
    PERSON_PROPERTY,
    And,
    Compare,
    Node,
    Not,
    Or,
)
from ..utils.datetime import MONTH_NAMES, WEEKDAY_NAMES


class GatherSyntaxError(ValueError):
    """Raised when a gather expression cannot be parsed."""

    def __init__(self, message: str, fragment: str = "") -> None:
        super().__init__(f"{message}: '{fragment}'" if fragment else message)
        self.fragment = fragment


@dataclass(frozen=True)
class Token:
    kind: str  # "op", "and", "or", "not", "lparen", "rparen", "atom"
    text: str
    position: int


# Longest operators first so "!=" is not read as "!" followed by "="
TOKEN_PATTERN = re.compile(
    r"(?P<op>!=|<=|>=|=|<|>)"
    r"|(?P<and>&)"
    r"|(?P<or>\|)"
    r"|(?P<not>!)"
    r"|(?P<lparen>\()"
    r"|(?P<rparen>\))"
    r"|(?P<atom>[^&|!=<>()\s]+)"
    r"|(?P<space>\s+)"
)

FLIPPED_OPERATORS = {"=": "=", "!=": "!=", "<": ">", ">": "<", "<=": ">=", ">=": "<="}

# Values that turn "Name=1" into a person flag check
TRUE_FLAGS = ("1", "true")
FALSE_FLAGS = ("0", "false")

_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")


def tokenize(expression: str) -> list[Token]:
    """Split an expression into tokens.

    Raises:
        GatherSyntaxError: On characters that cannot start any token
    """
    tokens: list[Token] = []
    position = 0
    while position < len(expression):
        match = TOKEN_PATTERN.match(expression, position)
        if match is None:  # pragma: no cover - the atom class matches everything else
            raise GatherSyntaxError("Unexpected character", expression[position:])
        kind = match.lastgroup or "atom"
        if kind != "space":
            tokens.append(Token(kind=kind, text=match.group(), position=position))
        position = match.end()
    return tokens


class GatherExpressionParser:
    """Recursive-descent parser for a single gather expression.

    Grammar::

        or_expr    := and_expr ("|" and_expr)*
        and_expr   := not_expr ("&" not_expr)*
        not_expr   := "!" not_expr | primary
        primary    := "(" or_expr ")" | comparison
        comparison := ATOM (OP ATOM (OP ATOM)?)?
    """

    def parse(self, expression: str) -> Node:
        """Parse an expression into a predicate tree.

        Raises:
            GatherSyntaxError: If the expression is empty or malformed
        """
        self._expression = expression
        self._tokens = tokenize(expression)
        self._index = 0

        if not self._tokens:
            raise GatherSyntaxError("Empty gather expression", expression)

        node = self._parse_or()
        if self._index < len(self._tokens):
            raise GatherSyntaxError("Unexpected input", self._remaining())
        return node

    # --- Recursive descent ---

    def _parse_or(self) -> Node:
        children = [self._parse_and()]
        while self._accept("or"):
            children.append(self._parse_and())
        return children[0] if len(children) == 1 else Or(tuple(children))

    def _parse_and(self) -> Node:
        children = [self._parse_not()]
        while self._accept("and"):
            children.append(self._parse_not())
        return children[0] if len(children) == 1 else And(tuple(children))

    def _parse_not(self) -> Node:
        if self._accept("not"):
            return Not(self._parse_not())
        return self._parse_primary()

    def _parse_primary(self) -> Node:
        token = self._peek()
        if token is None:
            raise GatherSyntaxError("Expression ends unexpectedly", self._expression)

        if token.kind == "lparen":
            self._index += 1
            node = self._parse_or()
            if not self._accept("rparen"):
                raise GatherSyntaxError("Missing closing parenthesis", self._expression[token.position :])
            return node

        if token.kind == "atom":
            return self._parse_comparison()

        raise GatherSyntaxError("Unexpected token", self._remaining())

    def _parse_comparison(self) -> Node:
        start = self._peek()
        assert start is not None
        operands = [self._next().text]
        operators: list[str] = []

        while (token := self._peek()) is not None and token.kind == "op":
            self._index += 1
            operand = self._peek()
            if operand is None or operand.kind != "atom":
                raise GatherSyntaxError(
                    f"Operator '{token.text}' needs a value",
                    self._expression[start.position :],
                )
            operators.append(token.text)
            operands.append(self._next().text)

        fragment = self._fragment(start.position)

        if not operators:
            return self._bare_operand(operands[0], fragment)
        if len(operators) == 1:
            return self._binary(operands[0], operators[0], operands[1], fragment)
        if len(operators) == 2:
            return self._range(operands, operators, fragment)
        raise GatherSyntaxError("Comparison chain too long", fragment)

    # --- Comparison forms ---

    def _bare_operand(self, operand: str, fragment: str) -> Node:
        """A lone name is a person check; a lone property is meaningless."""
        if operand.lower() in DATE_PROPERTIES or operand.lower() == PERSON_PROPERTY:
            raise GatherSyntaxError("Property needs a comparison", fragment)
        return Compare("=", PERSON_PROPERTY, operand.lower())

    def _binary(self, left: str, op: str, right: str, fragment: str) -> Node:
        if _is_property(left):
            return make_compare(left, op, right, fragment)
        if _is_property(right):
            # "0<day" reads as "day>0"
            return make_compare(right, FLIPPED_OPERATORS[op], left, fragment)

        # "Reto=1" / "Reto!=true" person flags
        flag = right.lower()
        if op in ("=", "!=") and flag in TRUE_FLAGS + FALSE_FLAGS:
            wanted = (flag in TRUE_FLAGS) == (op == "=")
            return Compare("=" if wanted else "!=", PERSON_PROPERTY, left.lower())

        raise GatherSyntaxError("Unknown property in comparison", fragment)

    def _range(self, operands: list[str], operators: list[str], fragment: str) -> Node:
        """``low < prop < high`` becomes ``prop > low & prop < high``."""
        low, prop, high = operands
        if not _is_property(prop) or _is_property(low) or _is_property(high):
            raise GatherSyntaxError("Range comparison must be 'value op property op value'", fragment)
        return And(
            (
                make_compare(prop, FLIPPED_OPERATORS[operators[0]], low, fragment),
                make_compare(prop, operators[1], high, fragment),
            )
        )

    # --- Token helpers ---

    def _peek(self) -> Token | None:
        if self._index < len(self._tokens):
            return self._tokens[self._index]
        return None

    def _next(self) -> Token:
        token = self._tokens[self._index]
        self._index += 1
        return token

    def _accept(self, kind: str) -> bool:
        token = self._peek()
        if token is not None and token.kind == kind:
            self._index += 1
            return True
        return False

    def _remaining(self) -> str:
        token = self._peek()
        return self._expression[token.position :] if token else self._expression

    def _fragment(self, start: int) -> str:
        token = self._peek()
        end = token.position if token else len(self._expression)
        return self._expression[start:end]


def _is_property(name: str) -> bool:
    lowered = name.lower()
    return lowered in DATE_PROPERTIES or lowered == PERSON_PROPERTY


def make_compare(prop: str, op: str, value: str, fragment: str = "") -> Compare:
    """Build a validated comparison leaf with a normalised value.

    Raises:
        GatherSyntaxError: If the operator or value does not fit the property
    """
    if op not in OPERATORS:
        raise GatherSyntaxError(f"Unknown operator '{op}'", fragment)

    prop = prop.lower()
    lowered = value.lower()

    if prop == PERSON_PROPERTY:
        if op not in ("=", "!="):
            raise GatherSyntaxError("Person comparisons only support '=' and '!='", fragment)
        return Compare(op, prop, lowered)

    if prop == "dayoffset":
        prop = "day"

    if prop == "weekday" and lowered[:3] in WEEKDAY_NAMES and lowered.isalpha():
        return Compare(op, prop, WEEKDAY_NAMES.index(lowered[:3]) + 1)
    if prop == "month" and lowered[:3] in MONTH_NAMES and lowered.isalpha():
        return Compare(op, prop, MONTH_NAMES.index(lowered[:3]) + 1)

    if not _INTEGER_PATTERN.match(value):
        raise GatherSyntaxError(f"Expected a number for '{prop}'", fragment or value)
    number = int(value)

    if prop in ("weekday", "weekdaynum") and not 1 <= number <= 7:
        raise GatherSyntaxError("Weekday must be between 1 and 7", fragment or value)
    if prop in ("month", "monthnum") and not 1 <= number <= 12:
        raise GatherSyntaxError("Month must be between 1 and 12", fragment or value)

    return Compare(op, prop, number)
