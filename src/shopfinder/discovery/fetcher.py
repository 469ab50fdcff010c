"""
Shop list fetching with a nearby/all mode switch.

Endpoint choice:
- mode ALL, location denied, or a sentinel coordinate -> all shops
- otherwise                                             -> shops near the coordinate

After retrieval, shops with a real location get `distance` (km from the viewer) attached,
but only when the viewer coordinate itself is real. The de-duplicated set of categories
across the result feeds the filter chips.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, Protocol

from shopfinder.core.geo import distance_km
from shopfinder.domain.models import Coordinate, Shop

logger = logging.getLogger(__name__)


class FetchMode(str, Enum):
    NEARBY = "nearby"
    ALL = "all"


class ShopSource(Protocol):
    def list_all(self) -> list[Shop]: ...

    def list_near(self, lat: float, lng: float) -> list[Shop]: ...


@dataclass(frozen=True)
class ShopListing:
    shops: list[Shop]
    categories: list[str] = field(default_factory=list)
    source: Literal["nearby", "all"] = "all"


def use_all_shops(mode: FetchMode, coordinate: Coordinate | None, location_denied: bool) -> bool:
    return mode is FetchMode.ALL or location_denied or coordinate is None or coordinate.is_sentinel


def annotate_distances(shops: list[Shop], coordinate: Coordinate | None) -> list[Shop]:
    """Return copies of `shops` with `distance` set where both ends are known."""
    if coordinate is None or coordinate.is_sentinel:
        return [shop.model_copy(update={"distance": None}) for shop in shops]

    annotated: list[Shop] = []
    for shop in shops:
        distance = None
        if shop.has_location:
            distance = distance_km(coordinate.lat, coordinate.lng, shop.location.lat, shop.location.lng)
        annotated.append(shop.model_copy(update={"distance": distance}))
    return annotated


def collect_categories(shops: list[Shop]) -> list[str]:
    """Unique categories across `shops`, in first-seen order."""
    return list(dict.fromkeys(c for shop in shops for c in shop.categories))


class ShopListFetcher:
    def __init__(self, source: ShopSource):
        self._source = source

    def fetch(
        self,
        mode: FetchMode,
        coordinate: Coordinate | None,
        *,
        location_denied: bool = False,
    ) -> ShopListing:
        """Fetch, annotate and summarize one shop listing. Transport errors propagate."""
        if use_all_shops(mode, coordinate, location_denied):
            logger.debug("Fetching all shops (mode=%s denied=%s)", mode.value, location_denied)
            shops = self._source.list_all()
            source: Literal["nearby", "all"] = "all"
        else:
            shops = self._source.list_near(coordinate.lat, coordinate.lng)
            source = "nearby"

        shops = annotate_distances(shops, coordinate)
        return ShopListing(shops=shops, categories=collect_categories(shops), source=source)
