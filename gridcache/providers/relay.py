from __future__ import annotations

from typing import List, Optional

from .base import GridProvider, MalformedResponse, UpstreamError, parse_cell
from ..entities import Bounds, GridCell


class RelayGridProvider(GridProvider):
    """Grid source behind an HTTP relay function.

    The relay accepts ``{latMin, latMax, lonMin, lonMax, step, forecastDays}``
    and answers ``{"cells": [...]}`` in the cell wire shape.
    """

    name = "relay"

    def __init__(self, url: str, api_key: Optional[str] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.url = url
        self.api_key = api_key

    def fetch_grid(self, bounds: Bounds, step: float, forecast_days: int = 3) -> List[GridCell]:
        body = dict(bounds.as_dict(), step=step, forecastDays=forecast_days)
        headers = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        response = self._request("POST", self.url, json=body, headers=headers)
        data = self._json(response)
        if not isinstance(data, dict):
            raise MalformedResponse("relay response is not an object")
        if data.get("error"):
            raise UpstreamError(f"relay reported error: {data['error']}", status=response.status_code)
        cells = data.get("cells")
        if not isinstance(cells, list):
            raise MalformedResponse("missing cells in relay response")
        return [parse_cell(cell) for cell in cells]


__all__ = ["RelayGridProvider"]
