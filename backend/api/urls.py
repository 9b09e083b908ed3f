"""API URL configuration."""
from __future__ import annotations

from django.urls import path

from backend.api.views import CachedGridView, GridView

urlpatterns = [
    path("grid", GridView.as_view(), name="grid"),
    path("grid/cached", CachedGridView.as_view(), name="grid-cached"),
]
