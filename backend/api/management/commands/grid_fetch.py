"""Management command to fetch a viewport grid using the same stack as the API."""
from __future__ import annotations

import json
from typing import Any

from django.core.management.base import BaseCommand, CommandError

from backend.api.views import get_grid_service, parse_viewport
from gridcache.providers.base import UpstreamError


class Command(BaseCommand):
    help = "Fetch the weather grid covering the provided viewport"

    def add_arguments(self, parser) -> None:  # noqa: D401
        parser.add_argument("--south", type=float, required=True, help="Southern latitude")
        parser.add_argument("--north", type=float, required=True, help="Northern latitude")
        parser.add_argument("--west", type=float, required=True, help="Western longitude")
        parser.add_argument("--east", type=float, required=True, help="Eastern longitude")
        parser.add_argument("--step", type=float, default=0.25, help="Requested step in degrees")
        parser.add_argument("--full", action="store_true", help="Print every cell instead of a summary")

    def handle(self, *args: Any, **options: Any) -> None:  # noqa: D401
        params = {name: str(options[name]) for name in ("south", "north", "west", "east", "step")}
        try:
            bounds, step = parse_viewport(params)
        except ValueError as exc:
            raise CommandError(str(exc)) from exc

        try:
            grid = get_grid_service().fetch(bounds, step)
        except UpstreamError as exc:
            raise CommandError(f"Grid upstream failed: {exc}") from exc

        if options.get("full"):
            payload = grid.as_dict()
        else:
            payload = {"step": grid.step, "cells": len(grid.cells)}
        payload["bounds"] = bounds.as_dict()
        self.stdout.write(json.dumps(payload))
