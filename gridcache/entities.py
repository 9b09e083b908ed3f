from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned latitude/longitude box, all edges inclusive."""

    lat_min: float
    lat_max: float
    lon_min: float
    lon_max: float

    def __post_init__(self) -> None:
        if self.lat_min > self.lat_max:
            raise ValueError(f"lat_min {self.lat_min} is greater than lat_max {self.lat_max}")
        if self.lon_min > self.lon_max:
            raise ValueError(f"lon_min {self.lon_min} is greater than lon_max {self.lon_max}")

    @property
    def lat_span(self) -> float:
        return self.lat_max - self.lat_min

    @property
    def lon_span(self) -> float:
        return self.lon_max - self.lon_min

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "Bounds":
        def pick(camel: str, snake: str) -> float:
            value = payload.get(camel, payload.get(snake))
            if value is None:
                raise ValueError(f"missing {camel}")
            return float(value)

        return cls(
            lat_min=pick("latMin", "lat_min"),
            lat_max=pick("latMax", "lat_max"),
            lon_min=pick("lonMin", "lon_min"),
            lon_max=pick("lonMax", "lon_max"),
        )

    def as_dict(self) -> Dict[str, float]:
        return {
            "latMin": self.lat_min,
            "latMax": self.lat_max,
            "lonMin": self.lon_min,
            "lonMax": self.lon_max,
        }


@dataclass(frozen=True)
class HourlySeries:
    """Parallel hourly sequences sharing the ``time`` index.

    ``time`` holds epoch seconds. ``wind_120m``, ``cloud`` and ``vis`` are
    optional upstream and read as empty tuples when absent.
    """

    time: Tuple[int, ...]
    wind_10m: Tuple[float, ...]
    gusts: Tuple[float, ...]
    precip: Tuple[float, ...]
    snow: Tuple[float, ...]
    temp: Tuple[float, ...]
    wind_120m: Tuple[float, ...] = ()
    cloud: Tuple[float, ...] = ()
    vis: Tuple[float, ...] = ()

    def as_dict(self) -> Dict[str, list]:
        return {
            "time": list(self.time),
            "wind_10m": list(self.wind_10m),
            "wind_120m": list(self.wind_120m),
            "gusts": list(self.gusts),
            "precip": list(self.precip),
            "snow": list(self.snow),
            "temp": list(self.temp),
            "cloud": list(self.cloud),
            "vis": list(self.vis),
        }


@dataclass(frozen=True)
class CellSample:
    """Scalar readings of one cell at one hour."""

    time: int
    wind: float
    gusts: float
    precip: float
    snow: float
    temp: Optional[float]
    cloud: Optional[float]
    vis: Optional[float]


@dataclass(frozen=True)
class GridCell:
    lat: float
    lon: float
    hourly: HourlySeries

    def at(self, hour: int) -> CellSample:
        """Sample the cell at ``hour``, clamped to the available range.

        Wind is the lower of the 10 m and 120 m readings; the 10 m value is
        used alone when no 120 m reading exists for that hour.
        """
        series = self.hourly
        if not series.time:
            raise ValueError("cell has no hourly data")
        index = max(0, min(hour, len(series.time) - 1))
        wind_10m = series.wind_10m[index]
        wind_120m = _safe_index(series.wind_120m, index)
        wind = wind_10m if wind_120m is None else min(wind_10m, wind_120m)
        return CellSample(
            time=series.time[index],
            wind=wind,
            gusts=series.gusts[index],
            precip=series.precip[index],
            snow=series.snow[index],
            temp=_safe_index(series.temp, index),
            cloud=_safe_index(series.cloud, index),
            vis=_safe_index(series.vis, index),
        )

    def as_dict(self) -> Dict[str, Any]:
        return {"lat": self.lat, "lon": self.lon, "hourly": self.hourly.as_dict()}


@dataclass(frozen=True)
class GridResponse:
    """Cells produced by one upstream call and the step actually used."""

    cells: Tuple[GridCell, ...]
    step: float

    def as_dict(self) -> Dict[str, Any]:
        return {"step": self.step, "cells": [cell.as_dict() for cell in self.cells]}


@dataclass(frozen=True)
class CacheEntry:
    data: GridResponse
    bounds: Bounds
    inserted_at: float = field(compare=False)


def contains(outer: Bounds, inner: Bounds) -> bool:
    """Non-strict containment; equal boxes contain each other."""
    return (
        outer.lat_min <= inner.lat_min
        and outer.lat_max >= inner.lat_max
        and outer.lon_min <= inner.lon_min
        and outer.lon_max >= inner.lon_max
    )


def estimated_points(bounds: Bounds, step: float) -> int:
    if step <= 0:
        raise ValueError("step must be positive")
    return math.ceil(bounds.lat_span / step) * math.ceil(bounds.lon_span / step)


def cache_key(bounds: Bounds, step: float) -> str:
    """Quantize ``bounds`` to 0.01 degree and append ``step``.

    Boxes that differ below the quantization share a key on purpose. The
    step keeps its shortest exact form, integral steps without ``.0``.
    """
    step_text = repr(float(step))
    if step_text.endswith(".0"):
        step_text = step_text[:-2]
    return (
        f"{bounds.lat_min:.2f}_{bounds.lat_max:.2f}_"
        f"{bounds.lon_min:.2f}_{bounds.lon_max:.2f}_{step_text}"
    )


def snap_outward(
    south: float,
    north: float,
    west: float,
    east: float,
    resolution: float = 0.25,
) -> Bounds:
    """Grow a viewport to the enclosing ``resolution`` grid so small pans share keys."""
    factor = 1 / resolution
    return Bounds(
        lat_min=math.floor(south * factor) / factor,
        lat_max=math.ceil(north * factor) / factor,
        lon_min=math.floor(west * factor) / factor,
        lon_max=math.ceil(east * factor) / factor,
    )


def _safe_index(values: Sequence[float], index: int) -> Optional[float]:
    try:
        return values[index]
    except IndexError:
        return None


__all__ = [
    "Bounds",
    "CacheEntry",
    "CellSample",
    "GridCell",
    "GridResponse",
    "HourlySeries",
    "cache_key",
    "contains",
    "estimated_points",
    "snap_outward",
]
