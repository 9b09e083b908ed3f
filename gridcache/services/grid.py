from __future__ import annotations

import logging
from typing import Any, Optional

from ..cache import GridCache
from ..coverage import find_covering
from ..entities import Bounds, CacheEntry, GridResponse, cache_key
from ..planner import DEFAULT_POINT_CEILING, plan
from ..providers.base import GridProvider, UpstreamError


class Cancelled(Exception):
    """The caller lost interest in the grid before it could be returned."""


class GridService:
    """Serve viewport grids from cache, falling back to one upstream call.

    ``cancel`` may be any object with ``is_set()``, usually a
    :class:`threading.Event`. It is checked right before the upstream call
    and again once the call returns or fails; a request already on the wire
    is left to finish and its result dropped.
    """

    DEFAULT_STEP = 0.25
    MIN_STEP = 0.01
    FORECAST_DAYS = 3

    def __init__(
        self,
        provider: GridProvider,
        cache: Optional[GridCache] = None,
        *,
        point_ceiling: int = DEFAULT_POINT_CEILING,
        forecast_days: int = FORECAST_DAYS,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.provider = provider
        self.cache = cache if cache is not None else GridCache()
        self.point_ceiling = point_ceiling
        self.forecast_days = forecast_days
        self._log = logger or logging.getLogger(self.__class__.__name__)

    # Public API ---------------------------------------------------------
    def fetch(self, bounds: Bounds, step: float = DEFAULT_STEP, cancel: Optional[Any] = None) -> GridResponse:
        if step < self.MIN_STEP:
            raise ValueError(f"step must be at least {self.MIN_STEP}")
        key = cache_key(bounds, step)
        exact = self.cache.get(key)
        if exact is not None:
            self._log.debug("Exact cache hit for %s", key)
            return exact.data

        covering = self.find_covering(bounds, step)
        if covering is not None:
            self._log.debug("Covering cache hit for %s", key)
            return covering

        self._check_cancelled(cancel, "before upstream call", key)
        # rounding to hundredths must not refine the requested step
        effective_step = max(step, round(plan(bounds, step, self.point_ceiling), 2))
        self._log.info(
            "Fetching grid %s from %s at step %s", key, self.provider.name, effective_step
        )
        try:
            cells = self.provider.fetch_grid(bounds, effective_step, forecast_days=self.forecast_days)
        except UpstreamError as exc:
            self._check_cancelled(cancel, "while upstream call failed", key, cause=exc)
            raise
        self._check_cancelled(cancel, "after upstream call", key)

        result = GridResponse(cells=tuple(cells), step=effective_step)
        self.cache.put(key, CacheEntry(data=result, bounds=bounds, inserted_at=self.cache.now()))
        return result

    def find_covering(self, bounds: Bounds, step: float = DEFAULT_STEP) -> Optional[GridResponse]:
        return find_covering(self.cache, bounds, step, self.point_ceiling)

    # Helpers ------------------------------------------------------------
    def _check_cancelled(
        self, cancel: Optional[Any], stage: str, key: str, cause: Optional[BaseException] = None
    ) -> None:
        if cancel is not None and cancel.is_set():
            self._log.info("Grid request %s cancelled %s", key, stage)
            raise Cancelled(key) from cause


__all__ = ["Cancelled", "GridService"]
