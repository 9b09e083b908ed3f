from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

import requests
from requests import Response

from ..entities import Bounds, GridCell, HourlySeries


REQUIRED_SERIES = ("time", "wind_10m", "gusts", "precip", "snow", "temp")
OPTIONAL_SERIES = ("wind_120m", "cloud", "vis")


class UpstreamError(RuntimeError):
    """Non-success response or transport failure from the grid upstream."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class QuotaExceeded(UpstreamError):
    """Raised when the upstream reports a rate/usage limit."""


class MalformedResponse(UpstreamError):
    """Raised when the upstream payload lacks fields the grid needs."""


@dataclass
class RequestConfig:
    timeout: float = 10.0


class GridProvider:
    """Base class for upstream grid sources talking HTTP.

    Subclasses implement :meth:`fetch_grid`, returning one
    :class:`GridCell` per sampled point of ``bounds``.
    """

    name = "base"

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        request_config: Optional[RequestConfig] = None,
    ) -> None:
        self.request_config = request_config or RequestConfig()
        self.session = session or requests.Session()
        self._log = logging.getLogger(self.__class__.__name__)

    def fetch_grid(self, bounds: Bounds, step: float, forecast_days: int = 3) -> List[GridCell]:
        raise NotImplementedError

    def _handle_response(self, response: Response) -> Response:
        if response.status_code == 429:
            self._log.warning("Quota exceeded: %s", response.text)
            raise QuotaExceeded("quota exceeded", status=429)
        if response.status_code >= 400:
            self._log.error("Upstream returned %s: %s", response.status_code, response.text)
            raise UpstreamError(f"HTTP {response.status_code}: {response.text}", status=response.status_code)
        return response

    def _request(self, method: str, url: str, **kwargs) -> Response:
        try:
            response = self.session.request(
                method,
                url,
                timeout=self.request_config.timeout,
                **kwargs,
            )
        except requests.Timeout as exc:
            self._log.error("Request timed out", exc_info=exc)
            raise UpstreamError("timeout") from exc
        except requests.RequestException as exc:
            self._log.error("Request failed", exc_info=exc)
            raise UpstreamError(f"request failed: {exc}") from exc
        return self._handle_response(response)

    def _json(self, response: Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            self._log.error("Failed to decode JSON", exc_info=exc)
            raise MalformedResponse("invalid json", status=response.status_code) from exc


def parse_cell(payload: Mapping[str, Any]) -> GridCell:
    """Build a :class:`GridCell` from the ``{lat, lon, hourly}`` wire shape."""
    if not isinstance(payload, Mapping):
        raise MalformedResponse("cell is not an object")
    try:
        lat = float(payload["lat"])
        lon = float(payload["lon"])
        hourly = payload["hourly"]
    except (KeyError, TypeError, ValueError) as exc:
        raise MalformedResponse(f"cell missing coordinates or hourly data: {exc}") from exc
    return GridCell(lat=lat, lon=lon, hourly=parse_hourly(hourly))


def parse_hourly(hourly: Any) -> HourlySeries:
    if not isinstance(hourly, Mapping):
        raise MalformedResponse("hourly is not an object")
    series: Dict[str, tuple] = {}
    for name in REQUIRED_SERIES:
        values = hourly.get(name)
        if values is None:
            raise MalformedResponse(f"hourly series {name!r} missing")
        series[name] = tuple(values)
    for name in OPTIONAL_SERIES:
        series[name] = tuple(hourly.get(name) or ())
    length = len(series["time"])
    if not length:
        raise MalformedResponse("hourly series 'time' is empty")
    for name in REQUIRED_SERIES:
        if len(series[name]) != length:
            raise MalformedResponse(f"hourly series {name!r} has {len(series[name])} values, expected {length}")
    return HourlySeries(**series)


__all__ = [
    "GridProvider",
    "MalformedResponse",
    "QuotaExceeded",
    "RequestConfig",
    "UpstreamError",
    "parse_cell",
    "parse_hourly",
]
