"""REST API views serving viewport weather grids."""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Mapping, Tuple

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from gridcache.cache import GridCache
from gridcache.entities import Bounds, snap_outward
from gridcache.providers.base import GridProvider, RequestConfig, UpstreamError
from gridcache.providers.openmeteo import OpenMeteoGridProvider
from gridcache.providers.relay import RelayGridProvider
from gridcache.services.grid import GridService


logger = logging.getLogger(__name__)


def build_provider() -> GridProvider:
    request_config = RequestConfig(timeout=settings.GRID_HTTP_TIMEOUT)
    if settings.GRID_PROVIDER == "relay":
        return RelayGridProvider(
            url=settings.GRID_RELAY_URL,
            api_key=settings.GRID_RELAY_API_KEY,
            request_config=request_config,
        )
    return OpenMeteoGridProvider(base_url=settings.OPEN_METEO_URL, request_config=request_config)


@lru_cache(maxsize=1)
def get_grid_service() -> GridService:
    cache = GridCache(ttl=settings.GRID_CACHE_TTL, max_entries=settings.GRID_CACHE_MAX_ENTRIES)
    return GridService(
        provider=build_provider(),
        cache=cache,
        point_ceiling=settings.GRID_POINT_CEILING,
        forecast_days=settings.GRID_FORECAST_DAYS,
    )


def _parse_coordinate(params: Mapping[str, str], name: str, limit: float) -> float:
    raw_value = params.get(name)
    if raw_value is None:
        raise ValueError(f"Missing {name}")
    try:
        value = float(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a valid floating point number") from exc
    if not -limit <= value <= limit:
        raise ValueError(f"{name} must be between {-limit:g} and {limit:g}")
    return value


def parse_viewport(params: Mapping[str, str]) -> Tuple[Bounds, float]:
    """Read ``south/north/west/east/step`` and snap the box to the quarter-degree grid."""
    south = _parse_coordinate(params, "south", 90.0)
    north = _parse_coordinate(params, "north", 90.0)
    west = _parse_coordinate(params, "west", 180.0)
    east = _parse_coordinate(params, "east", 180.0)
    try:
        step = float(params.get("step", GridService.DEFAULT_STEP))
    except ValueError as exc:
        raise ValueError("step must be a valid floating point number") from exc
    if step < GridService.MIN_STEP:
        raise ValueError(f"step must be at least {GridService.MIN_STEP}")
    if south > north or west > east:
        raise ValueError("south/west must not exceed north/east")
    return snap_outward(south, north, west, east), step


class GridView(APIView):
    """Return the weather grid for a viewport, fetching upstream when needed."""

    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):  # noqa: D401
        try:
            bounds, step = parse_viewport(request.query_params)
        except ValueError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            grid = get_grid_service().fetch(bounds, step)
        except UpstreamError as exc:
            logger.warning("Grid upstream failed: %s", exc)
            return Response(
                {"detail": str(exc), "upstream_status": exc.status},
                status=status.HTTP_502_BAD_GATEWAY,
            )
        payload = grid.as_dict()
        payload["bounds"] = bounds.as_dict()
        return Response(payload, status=status.HTTP_200_OK)


class CachedGridView(APIView):
    """Return a cached grid covering the viewport without calling upstream."""

    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):  # noqa: D401
        try:
            bounds, step = parse_viewport(request.query_params)
        except ValueError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        grid = get_grid_service().find_covering(bounds, step)
        if grid is None:
            return Response(status=status.HTTP_204_NO_CONTENT)
        payload = grid.as_dict()
        payload["bounds"] = bounds.as_dict()
        return Response(payload, status=status.HTTP_200_OK)
