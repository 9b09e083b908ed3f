from __future__ import annotations

import math

from .entities import Bounds, estimated_points

DEFAULT_POINT_CEILING = 200


def plan(bounds: Bounds, requested_step: float, point_ceiling: int = DEFAULT_POINT_CEILING) -> float:
    """Return the step to request upstream for ``bounds``.

    The requested step is kept while the estimated grid fits under
    ``point_ceiling``. Otherwise the box is sampled roughly square at the
    ceiling and rounded to 0.01 degree, then grown further while the
    per-axis estimate still overshoots, so it can come out coarser than the
    square-root step alone. The result is never finer than ``requested_step``.
    """
    if estimated_points(bounds, requested_step) <= point_ceiling:
        return requested_step
    square = math.sqrt(bounds.lat_span * bounds.lon_span / point_ceiling)
    step = max(requested_step, round(max(requested_step, square), 2))
    # ceil() per axis can still overshoot the ceiling after rounding
    points = estimated_points(bounds, step)
    while points > point_ceiling:
        grown = math.ceil(step * math.sqrt(points / point_ceiling) * 100) / 100
        step = grown if grown > step else round(step + 0.01, 2)
        points = estimated_points(bounds, step)
    return step


__all__ = ["DEFAULT_POINT_CEILING", "plan"]
