from __future__ import annotations

import pytest

from gridcache.entities import (
    Bounds,
    GridCell,
    HourlySeries,
    cache_key,
    contains,
    estimated_points,
    snap_outward,
)


def test_contains_is_reflexive():
    box = Bounds(lat_min=48.0, lat_max=49.0, lon_min=35.0, lon_max=36.0)

    assert contains(box, box)


def test_contains_requires_all_edges():
    outer = Bounds(-10, 10, -10, 10)

    assert contains(outer, Bounds(-5, 5, -5, 5))
    assert not contains(outer, Bounds(-5, 11, -5, 5))
    assert not contains(outer, Bounds(-5, 5, -10.5, 5))
    assert not contains(Bounds(-5, 5, -5, 5), outer)


def test_bounds_reject_inverted_edges():
    with pytest.raises(ValueError):
        Bounds(lat_min=2.0, lat_max=1.0, lon_min=0.0, lon_max=1.0)
    with pytest.raises(ValueError):
        Bounds(lat_min=0.0, lat_max=1.0, lon_min=3.0, lon_max=1.0)


def test_bounds_from_mapping_accepts_both_spellings():
    camel = Bounds.from_mapping({"latMin": 1, "latMax": 2, "lonMin": 3, "lonMax": 4})
    snake = Bounds.from_mapping({"lat_min": 1, "lat_max": 2, "lon_min": 3, "lon_max": 4})

    assert camel == snake
    with pytest.raises(ValueError):
        Bounds.from_mapping({"latMin": 1, "latMax": 2, "lonMin": 3})


def test_estimated_points_rounds_each_axis_up():
    box = Bounds(48.0, 49.0, 35.0, 36.0)

    assert estimated_points(box, 0.25) == 16
    assert estimated_points(box, 0.3) == 16
    assert estimated_points(Bounds(0, 1, 0, 2), 0.5) == 8


def test_estimated_points_rejects_non_positive_step():
    with pytest.raises(ValueError):
        estimated_points(Bounds(0, 1, 0, 1), 0)


def test_cache_key_format():
    box = Bounds(48.0, 49.0, 35.0, 36.0)

    assert cache_key(box, 0.25) == "48.00_49.00_35.00_36.00_0.25"
    assert cache_key(box, 1.0) == "48.00_49.00_35.00_36.00_1"
    assert cache_key(box, 2) == "48.00_49.00_35.00_36.00_2"


def test_cache_key_keeps_step_exact():
    box = Bounds(48.0, 49.0, 35.0, 36.0)

    assert cache_key(box, 0.1234567) != cache_key(box, 0.1234568)
    assert cache_key(box, 0.1234567).endswith("_0.1234567")


def test_cache_key_collides_below_rounding():
    first = Bounds(48.001, 49.0, 35.0, 36.004)
    second = Bounds(48.0, 49.002, 34.999, 36.0)

    assert cache_key(first, 0.25) == cache_key(second, 0.25)
    assert cache_key(first, 0.25) != cache_key(first, 0.5)


def test_snap_outward_grows_to_quarter_degrees():
    box = snap_outward(south=48.13, north=48.9, west=35.26, east=35.99)

    assert box == Bounds(48.0, 49.0, 35.25, 36.0)


def test_snap_outward_keeps_aligned_edges_and_negatives():
    assert snap_outward(-10.0, 10.0, -20.1, -19.9) == Bounds(-10.0, 10.0, -20.25, -19.75)


def test_cell_sample_clamps_hour_index(cell_factory):
    cell = cell_factory(48.125, 35.125, hours=3)

    last = cell.at(99)

    assert last.time == cell.hourly.time[-1]
    assert last.wind == cell.hourly.wind_10m[-1]
    assert cell.at(-4).time == cell.hourly.time[0]


def test_cell_sample_uses_lower_wind_and_reads_missing_optional_as_none():
    cell = GridCell(
        lat=1.0,
        lon=2.0,
        hourly=HourlySeries(
            time=(10, 20),
            wind_10m=(5.0, 6.0),
            wind_120m=(3.0,),
            gusts=(8.0, 9.0),
            precip=(0.1, 0.2),
            snow=(0.0, 0.0),
            temp=(1.0, 2.0),
            vis=(24000.0, 18000.0),
        ),
    )

    first = cell.at(0)
    second = cell.at(1)

    assert first.wind == 3.0
    assert second.wind == 6.0
    assert second.cloud is None
    assert second.vis == 18000.0


def test_cell_sample_requires_hourly_data():
    empty = GridCell(lat=0, lon=0, hourly=HourlySeries((), (), (), (), (), ()))

    with pytest.raises(ValueError):
        empty.at(0)
