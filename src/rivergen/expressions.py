"""
Builders for `${{ ... }}` interpolation expressions.

An Expression holds the raw expression body; str() wraps it for use
inside a workflow document. Combinators always parenthesize, so
composed expressions never depend on operator precedence.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from .errors import ConstantCondition


@dataclass(frozen=True)
class Expression:
    body: str

    def __str__(self) -> str:
        return "${{" + self.body + "}}"

    def or_(self, other: Union[Expression, str]) -> Expression:
        return Expression(f"{self.body} || {_body(other)}").with_parentheses()

    def and_(self, other: Union[Expression, str]) -> Expression:
        return Expression(f"{self.body} && {_body(other)}").with_parentheses()

    def with_parentheses(self) -> Expression:
        return Expression(f"( {self.body} )")


def _body(value: Union[Expression, str]) -> str:
    if isinstance(value, Expression):
        return value.body
    return value


# ---------------------------------------------------------------------
# Literals
# ---------------------------------------------------------------------

def string_literal(value: str) -> Expression:
    # single quotes are the only string delimiter; a quote is escaped by doubling
    return Expression("'" + value.replace("'", "''") + "'")


def bool_literal(value: bool) -> Expression:
    return Expression("true" if value else "false")


def int_literal(value: int) -> Expression:
    return Expression(str(int(value)))


def float_literal(value: float) -> Expression:
    # fixed notation, shortest digits that round-trip
    return Expression(format(Decimal(repr(float(value))), "f"))


def from_(value: str) -> Expression:
    return Expression(value)


# ---------------------------------------------------------------------
# Contexts
# ---------------------------------------------------------------------

def inputs(name: str) -> Expression:
    return Expression("inputs." + name)


def secrets(name: str) -> Expression:
    return Expression("secrets." + name)


def step_output(step_id: str, output_key: str) -> Expression:
    return Expression("steps." + step_id + ".outputs." + output_key)


# ---------------------------------------------------------------------
# Constant detection
# ---------------------------------------------------------------------

# falsy literals; `false` here is the boolean, a string would be quoted
ALWAYS_FALSE = frozenset({"", '""', "''", "false", "0", "-0", "null"})


def _condition_body(value: Union[Expression, str]) -> str:
    # a condition may arrive as an already rendered `${{ ... }}` string
    body = _body(value).strip()
    if body.startswith("${{") and body.endswith("}}"):
        body = body[3:-2].strip()
    return body


def is_always_false(value: Union[Expression, str]) -> bool:
    return _condition_body(value) in ALWAYS_FALSE


def is_always_true(value: Union[Expression, str]) -> bool:
    return _condition_body(value) == "true"


def check_always_false(value: Union[Expression, str]) -> None:
    if is_always_false(value):
        raise ConstantCondition(_body(value), False)


def check_always_true(value: Union[Expression, str]) -> None:
    if is_always_true(value):
        raise ConstantCondition(_body(value), True)
