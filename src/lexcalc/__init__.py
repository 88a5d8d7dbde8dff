"""Single-variable expression evaluator and syntax highlighter."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from lexcalc.rules import Rule

__version__ = "0.1.0"


def evaluate(text: str, x: float = 0.0, variable: str = "x") -> float:
    """Evaluate an arithmetic expression with *variable* bound to *x*."""
    from lexcalc.evaluator import evaluate as _evaluate

    return _evaluate(text, x, variable)


def highlight(source: str, rules: Sequence[Rule] | None = None) -> str:
    """Highlight source text to markup, using C/C++ rules by default."""
    from lexcalc.highlighter import highlight as _highlight

    return _highlight(source, rules)
