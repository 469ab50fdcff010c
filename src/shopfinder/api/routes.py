"""
API routes.

Endpoints:
- GET `/api/discover`: run the shop-discovery flow once and return the rendered view.
- GET `/api/distance`: haversine distance (km) between two points plus its badge text.
- GET `/api/health`: liveness + which backend this instance talks to.

Discovery requests are stateless: the caller supplies its own coordinate (or reports
that location was denied), mode and filters. Upstream failures show up as
`error` / `can_retry` in the view, never as a 5xx.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from fastapi import APIRouter, Query

from shopfinder.config.settings import get_settings
from shopfinder.core.geo import distance_km, format_distance
from shopfinder.discovery.fetcher import FetchMode, ShopListFetcher, ShopSource
from shopfinder.discovery.location import (
    GeolocationAcquirer,
    GeolocationOptions,
    LocationErrorCode,
    StaticPermissionProvider,
    StaticPositionProvider,
)
from shopfinder.discovery.session import DiscoverySession
from shopfinder.domain.models import Coordinate, DiscoveryView
from shopfinder.ingestion.shops_client import ShopsClient

router = APIRouter()


@lru_cache
def _shops_client() -> ShopSource:
    return ShopsClient(get_settings())


@router.get("/api/health")
def get_health() -> dict:
    settings = get_settings()
    return {"status": "ok", "name": settings.app.name, "backend": settings.api.base_url}


@router.get("/api/discover", response_model=DiscoveryView)
def get_discover(
    lat: float | None = Query(default=None, ge=-90, le=90),
    lng: float | None = Query(default=None, ge=-180, le=180),
    mode: Literal["nearby", "all"] | None = None,
    search: str = "",
    category: str | None = None,
    location_denied: bool = False,
    nearest_first: bool = False,
) -> DiscoveryView:
    """Discover shops for one viewer.

    Without `lat`/`lng` (or with `location_denied=true`) the listing falls back to all
    shops and carries no distance badges.
    """
    settings = get_settings()
    permissions = StaticPermissionProvider("denied" if location_denied else "granted")
    if lat is not None and lng is not None:
        positions = StaticPositionProvider(Coordinate(lat=lat, lng=lng), permissions=permissions)
    else:
        positions = StaticPositionProvider(error=LocationErrorCode.POSITION_UNAVAILABLE, permissions=permissions)

    acquirer = GeolocationAcquirer(positions, permissions, options=GeolocationOptions.from_settings(settings.discovery.geolocation))
    session = DiscoverySession.from_settings(settings, ShopListFetcher(_shops_client()), acquirer)
    if mode is not None:
        session.mode = FetchMode(mode)

    session.set_search_term(search)
    session.select_category(category or None)
    session.start()
    return session.view(nearest_first=nearest_first)


@router.get("/api/distance")
def get_distance(
    lat1: float = Query(..., ge=-90, le=90),
    lng1: float = Query(..., ge=-180, le=180),
    lat2: float = Query(..., ge=-90, le=90),
    lng2: float = Query(..., ge=-180, le=180),
) -> dict:
    km = distance_km(lat1, lng1, lat2, lng2)
    return {"distance_km": km, "label": format_distance(km)}
