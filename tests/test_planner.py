from __future__ import annotations

import pytest

from gridcache.entities import Bounds, estimated_points
from gridcache.planner import plan


BOXES = [
    Bounds(48.0, 49.0, 35.0, 36.0),
    Bounds(-10.0, 10.0, -10.0, 10.0),
    Bounds(-5.0, 5.0, -5.0, 5.0),
    Bounds(40.0, 55.0, 20.0, 45.0),
    Bounds(0.0, 0.5, 0.0, 80.0),
    Bounds(-90.0, 90.0, -180.0, 180.0),
    Bounds(10.0, 10.0, 0.0, 5.0),
]
STEPS = [0.01, 0.1, 0.25, 0.5, 1.0, 3.0]


def test_small_viewport_keeps_requested_step():
    box = Bounds(48.0, 49.0, 35.0, 36.0)

    assert estimated_points(box, 0.25) == 16
    assert plan(box, 0.25) == 0.25


@pytest.mark.parametrize("box", BOXES)
@pytest.mark.parametrize("step", STEPS)
def test_plan_never_refines(box, step):
    assert plan(box, step) >= step


@pytest.mark.parametrize("box", BOXES)
@pytest.mark.parametrize("step", STEPS)
def test_plan_respects_point_ceiling(box, step):
    planned = plan(box, step)

    if planned != step:
        assert estimated_points(box, planned) <= 200


def test_large_viewport_is_coarsened_to_hundredths():
    planned = plan(Bounds(-10.0, 10.0, -10.0, 10.0), 0.25)

    assert planned > 0.25
    assert planned == round(planned, 2)
    assert estimated_points(Bounds(-10.0, 10.0, -10.0, 10.0), planned) <= 200


def test_overshooting_square_step_is_grown_to_fit():
    box = Bounds(-10.0, 10.0, -10.0, 10.0)

    # sqrt(400 / 200) rounds to 1.41, which still gives 15 x 15 points
    assert estimated_points(box, 1.41) == 225
    assert plan(box, 0.25) == 1.5


def test_custom_ceiling():
    box = Bounds(0.0, 2.0, 0.0, 2.0)

    assert plan(box, 0.25, point_ceiling=64) == 0.25
    assert plan(box, 0.25, point_ceiling=16) == 0.5
