from __future__ import annotations

from typing import Callable, List, Optional

import pytest

from gridcache.entities import Bounds, GridCell, HourlySeries
from gridcache.providers.base import GridProvider, UpstreamError


class TimeController:
    def __init__(self) -> None:
        self.now = 0.0

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now


def make_cell(lat: float, lon: float, hours: int = 3, wind: float = 4.0) -> GridCell:
    times = tuple(1_700_000_000 + 3600 * idx for idx in range(hours))
    return GridCell(
        lat=lat,
        lon=lon,
        hourly=HourlySeries(
            time=times,
            wind_10m=tuple(wind + idx for idx in range(hours)),
            gusts=tuple(wind + 3 + idx for idx in range(hours)),
            precip=(0.0,) * hours,
            snow=(0.0,) * hours,
            temp=(10.0,) * hours,
        ),
    )


class StubProvider(GridProvider):
    """Counts calls and returns one cell per requested step square."""

    name = "stub"

    def __init__(self, error: Optional[Exception] = None, on_call: Optional[Callable[[], None]] = None) -> None:
        super().__init__()
        self.calls: List[tuple] = []
        self.error = error
        self.on_call = on_call

    def fetch_grid(self, bounds: Bounds, step: float, forecast_days: int = 3) -> List[GridCell]:
        self.calls.append((bounds, step, forecast_days))
        if self.on_call is not None:
            self.on_call()
        if self.error is not None:
            raise self.error
        cells = []
        lat = bounds.lat_min + step / 2
        while lat < bounds.lat_max:
            lon = bounds.lon_min + step / 2
            while lon < bounds.lon_max:
                cells.append(make_cell(lat, lon))
                lon += step
            lat += step
        return cells


@pytest.fixture
def clock() -> TimeController:
    return TimeController()


@pytest.fixture
def stub_provider() -> StubProvider:
    return StubProvider()


@pytest.fixture
def failing_provider() -> StubProvider:
    return StubProvider(error=UpstreamError("HTTP 503: unavailable", status=503))


@pytest.fixture
def cell_factory() -> Callable[..., GridCell]:
    return make_cell


@pytest.fixture
def provider_factory() -> Callable[..., StubProvider]:
    return StubProvider
