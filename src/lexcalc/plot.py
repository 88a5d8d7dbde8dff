"""Sample an expression over an x range for graphing."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from lexcalc.evaluator import evaluate

logger = logging.getLogger(__name__)

DEFAULT_STEPS = 1000


@dataclass(frozen=True, slots=True)
class Graph:
    """Sampled points of f(x) and the y range used to scale them."""

    points: tuple[tuple[float, float], ...]
    start: float
    end: float
    y_min: float
    y_max: float


def sample(
    expression: str,
    start: float,
    end: float,
    steps: int = DEFAULT_STEPS,
    variable: str = "x",
) -> Graph:
    """Evaluate *expression* at ``steps + 1`` evenly spaced x values.

    The range is reordered so that start <= end. A constant function gets a
    symmetric y range so it does not collapse to a single line.
    """
    if not expression.strip():
        raise ValueError("expression is empty")
    if not (math.isfinite(start) and math.isfinite(end)):
        raise ValueError(f"start and end must be finite, got {start} and {end}")
    if start == end:
        raise ValueError("start and end must differ")
    if steps < 1:
        raise ValueError(f"steps must be at least 1, got {steps}")

    start, end = min(start, end), max(start, end)
    delta = (end - start) / steps

    points: list[tuple[float, float]] = []
    for i in range(steps + 1):
        x = start + i * delta
        points.append((x, evaluate(expression, x, variable)))

    y_min, y_max = _bounds([y for _, y in points])
    logger.debug("sampled %d points of %r, y in [%g, %g]", len(points), expression, y_min, y_max)
    return Graph(tuple(points), start, end, y_min, y_max)


def _bounds(ys: list[float]) -> tuple[float, float]:
    finite = [y for y in ys if math.isfinite(y)]
    if not finite:
        return -10.0, 10.0

    y_min = min(finite)
    y_max = max(finite)
    if y_min == y_max:
        if y_max == 0:
            return -10.0, 10.0
        y_max = abs(y_max)
        return -y_max, y_max
    return y_min, y_max
