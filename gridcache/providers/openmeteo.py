from __future__ import annotations

import math
from typing import Dict, List, Optional, Tuple

from .base import GridProvider, MalformedResponse, parse_hourly
from ..entities import Bounds, GridCell

# Open-Meteo variable name -> cell series name
HOURLY_VARIABLES: Dict[str, str] = {
    "wind_speed_10m": "wind_10m",
    "wind_speed_120m": "wind_120m",
    "wind_gusts_10m": "gusts",
    "precipitation": "precip",
    "snowfall": "snow",
    "temperature_2m": "temp",
    "cloud_cover": "cloud",
    "visibility": "vis",
}


def grid_points(bounds: Bounds, step: float) -> List[Tuple[float, float]]:
    """Cell centres covering ``bounds`` at ``step``, row by row from the south-west."""
    lats = _axis(bounds.lat_min, bounds.lat_max, step)
    lons = _axis(bounds.lon_min, bounds.lon_max, step)
    return [(lat, lon) for lat in lats for lon in lons]


def _axis(low: float, high: float, step: float) -> List[float]:
    count = max(1, math.ceil((high - low) / step))
    return [round(min(low + step * (idx + 0.5), high), 4) for idx in range(count)]


class OpenMeteoGridProvider(GridProvider):
    """Query the Open-Meteo forecast API for every grid point in one request."""

    name = "openmeteo"
    base_url = "https://api.open-meteo.com/v1/forecast"

    def __init__(self, base_url: Optional[str] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.base_url = base_url or self.base_url

    def fetch_grid(self, bounds: Bounds, step: float, forecast_days: int = 3) -> List[GridCell]:
        points = grid_points(bounds, step)
        params = {
            "latitude": ",".join(str(lat) for lat, _ in points),
            "longitude": ",".join(str(lon) for _, lon in points),
            "hourly": ",".join(HOURLY_VARIABLES),
            "wind_speed_unit": "ms",
            "timeformat": "unixtime",
            "forecast_days": forecast_days,
            "timezone": "UTC",
        }
        self._log.debug("Requesting %s points at step %s", len(points), step)
        response = self._request("GET", self.base_url, params=params)
        data = self._json(response)
        # a single location comes back as a bare object
        locations = [data] if isinstance(data, dict) else data
        if not isinstance(locations, list):
            raise MalformedResponse("unexpected forecast payload")
        if len(locations) != len(points):
            raise MalformedResponse(f"expected {len(points)} locations, got {len(locations)}")
        return [self._build_cell(lat, lon, location) for (lat, lon), location in zip(points, locations)]

    def _build_cell(self, lat: float, lon: float, location: object) -> GridCell:
        if not isinstance(location, dict):
            raise MalformedResponse("location is not an object")
        hourly = location.get("hourly")
        if not isinstance(hourly, dict):
            raise MalformedResponse("missing hourly data")
        renamed = {"time": hourly.get("time")}
        for variable, series in HOURLY_VARIABLES.items():
            renamed[series] = hourly.get(variable)
        return GridCell(lat=lat, lon=lon, hourly=parse_hourly(renamed))


__all__ = ["HOURLY_VARIABLES", "OpenMeteoGridProvider", "grid_points"]
