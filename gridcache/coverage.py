from __future__ import annotations

from typing import Optional

from .cache import GridCache
from .entities import Bounds, GridResponse, contains
from .planner import DEFAULT_POINT_CEILING, plan

STEP_TOLERANCE = 1.1


def find_covering(
    cache: GridCache,
    bounds: Bounds,
    requested_step: float = 0.25,
    point_ceiling: int = DEFAULT_POINT_CEILING,
    tolerance: float = STEP_TOLERANCE,
) -> Optional[GridResponse]:
    """Return a live cached grid that contains ``bounds`` at a usable step.

    A cached step is usable when it is no coarser than ``tolerance`` times
    the step a fresh fetch of ``bounds`` would itself be planned at. The
    first qualifying entry wins.
    """
    needed_step = plan(bounds, requested_step, point_ceiling)
    now = cache.now()
    for entry in cache.values():
        if not cache.is_fresh(entry, now):
            continue
        if contains(entry.bounds, bounds) and entry.data.step <= needed_step * tolerance:
            return entry.data
    return None


__all__ = ["STEP_TOLERANCE", "find_covering"]
