"""Single-variable arithmetic evaluator.

Precedence climbing over four levels, loosest first::

    level 1   + -      left to right
    level 2   * /      left to right
    level 3   ^        left to right, so 2 ^ 3 ^ 2 == (2 ^ 3) ^ 2
    level 4   ( ... )  re-enters level 1

Every level receives the left operand already computed by its caller. All
arithmetic is single precision. Malformed input never raises: a token that is
not a number reads as 0 and an unclosed parenthesis is only logged.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

logger = logging.getLogger(__name__)

_LEVELS: tuple[tuple[str, ...], ...] = (("+", "-"), ("*", "/"), ("^",))

_FLOAT32_MAX = float(np.finfo(np.float32).max)
_ZERO = np.float32(0)


@dataclass(frozen=True, slots=True)
class Expression:
    """Expression text plus the value bound to its variable."""

    text: str
    value: np.float32 = _ZERO
    variable: str = "x"


def format_value(value: np.float32) -> str:
    """Render a variable value the way it is spliced into the token stream."""
    return format(float(value), "g")


def next_token(expr: Expression, pos: int) -> tuple[str, int]:
    """Read the token at *pos*. Returns (token, cursor after it).

    Whitespace is skipped. A digit run or a letter run is one token, anything
    else is a single character. The variable name reads as its current value.
    """
    text = expr.text
    length = len(text)
    while pos < length and text[pos].isspace():
        pos += 1

    start = pos
    if pos < length:
        ch = text[pos]
        if ch.isdigit():
            while pos < length and text[pos].isdigit():
                pos += 1
        elif ch.isalpha():
            while pos < length and text[pos].isalpha():
                pos += 1
        else:
            pos += 1

    token = text[start:pos]
    if token == expr.variable:
        token = format_value(expr.value)
    return token, pos


def peek_token(expr: Expression, pos: int) -> str:
    """Read the token at *pos* without advancing."""
    token, _ = next_token(expr, pos)
    return token


def to_float32(token: str) -> np.float32 | None:
    """Parse a number token, or return None if it is not one."""
    try:
        value = float(token)
    except ValueError:
        return None
    if math.isfinite(value):
        if abs(value) > _FLOAT32_MAX:
            return None
    elif token[:1].isdigit():
        # digit run too long for a double
        return None
    return np.float32(value)


def _number(expr: Expression, pos: int) -> tuple[np.float32, int]:
    """Read a number, consuming it only if it parses."""
    token, end = next_token(expr, pos)
    value = to_float32(token)
    if value is None:
        return _ZERO, pos
    return value, end


def _apply(op: str, lv: np.float32, rv: np.float32) -> np.float32:
    if op == "+":
        return lv + rv
    if op == "-":
        return lv - rv
    if op == "*":
        return lv * rv
    if op == "/":
        return lv / rv
    return np.power(lv, rv)


def _binary(expr: Expression, pos: int, lv: np.float32, level: int) -> tuple[np.float32, int]:
    if level == len(_LEVELS):
        return _group(expr, pos, lv)

    ops = _LEVELS[level]
    op = peek_token(expr, pos)
    if op and op not in ops:
        lv, pos = _binary(expr, pos, lv, level + 1)

    while (op := peek_token(expr, pos)) in ops:
        _, pos = next_token(expr, pos)
        rv, pos = _number(expr, pos)
        rv, pos = _binary(expr, pos, rv, level + 1)
        lv = _apply(op, lv, rv)
    return lv, pos


def _group(expr: Expression, pos: int, lv: np.float32) -> tuple[np.float32, int]:
    if peek_token(expr, pos) != "(":
        return lv, pos

    _, pos = next_token(expr, pos)
    lv, pos = _number(expr, pos)
    lv, pos = _binary(expr, pos, lv, 0)

    close, pos = next_token(expr, pos)
    if close != ")":
        logger.warning("missing ')' in %r at offset %d", expr.text, pos)
    return lv, pos


def evaluate_expression(expr: Expression) -> np.float32:
    """Evaluate *expr* from the start of its text."""
    with np.errstate(all="ignore"):
        lv, pos = _number(expr, 0)
        lv, _ = _binary(expr, pos, lv, 0)
    return lv


def evaluate(text: str, x: float = 0.0, variable: str = "x") -> float:
    """Evaluate *text* with *variable* bound to *x*.

    Returns 0.0 when nothing in the text reads as a number.
    """
    with np.errstate(all="ignore"):
        expr = Expression(text, np.float32(x), variable)
    try:
        result = evaluate_expression(expr)
    except RecursionError:
        logger.warning("expression nested too deeply: %.40r...", text)
        return 0.0
    return float(result)
