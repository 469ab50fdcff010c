"""
Shop discovery session.

`DiscoverySession` is the single owner of all discovery state: where the viewer is,
whether location was denied, the current mode, the fetched shops, the active filters
and the last error. Every mutation goes through one of its methods, and every failure
(location or network) is converted into state here rather than raised to the caller.

Typical flow:
1. `start()` acquires the location once and fetches the first listing.
2. `on_location_change()` feeds map picks / GPS updates through the movement gate.
3. `set_mode()` switches between nearby and all shops and re-fetches immediately.
4. `view()` renders the current state for the CLI or the API.

Fetches are synchronous and applied in the order they are issued, so the most
recently requested listing is always the one on display.
"""

from __future__ import annotations

import logging

import httpx

from shopfinder.config.settings import Settings
from shopfinder.discovery.fetcher import FetchMode, ShopListFetcher, annotate_distances, use_all_shops
from shopfinder.discovery.filters import filter_shops, sort_by_distance
from shopfinder.discovery.gate import MovementGate
from shopfinder.discovery.location import GeolocationAcquirer, LocationStatus
from shopfinder.domain.models import SENTINEL_COORDINATE, Coordinate, DiscoveryView, Shop, ShopCard

logger = logging.getLogger(__name__)

FETCH_ERROR_MESSAGE = "Failed to load shops. Please try again later."
FILTERED_EMPTY_MESSAGE = "Try changing your search criteria or filters"
NEARBY_EMPTY_MESSAGE = "There are no shops near your current location."
ALL_EMPTY_MESSAGE = "There are no shops to show yet."

# Map picks closer than this (in degrees) to the current coordinate are ignored.
_COORDINATE_EPSILON = 0.000001


class DiscoverySession:
    def __init__(
        self,
        fetcher: ShopListFetcher,
        acquirer: GeolocationAcquirer,
        *,
        gate: MovementGate | None = None,
        mode: FetchMode = FetchMode.NEARBY,
        coordinate_precision: int = 6,
    ):
        self._fetcher = fetcher
        self._acquirer = acquirer
        self._gate = gate or MovementGate()
        self._precision = coordinate_precision

        self.mode = mode
        self.coordinate: Coordinate = SENTINEL_COORDINATE
        self.location_denied = False
        self.location_message: str | None = None

        self.shops: list[Shop] = []
        self.categories: list[str] = []
        self.search_term = ""
        self.selected_category: str | None = None

        self.is_loading = False
        self.error: str | None = None
        self.fetch_count = 0

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        fetcher: ShopListFetcher,
        acquirer: GeolocationAcquirer,
    ) -> "DiscoverySession":
        return cls(
            fetcher,
            acquirer,
            gate=MovementGate(settings.discovery.movement_threshold_km),
            mode=FetchMode(settings.discovery.default_mode),
            coordinate_precision=settings.discovery.coordinate_precision,
        )

    @property
    def gate(self) -> MovementGate:
        return self._gate

    @property
    def location_available(self) -> bool:
        return not self.location_denied and not self.coordinate.is_sentinel

    # --- location -----------------------------------------------------------------

    def _apply_location(self, status: LocationStatus) -> None:
        self.location_denied = status.denied
        self.location_message = status.message
        if status.denied:
            self.coordinate = SENTINEL_COORDINATE
        else:
            self.coordinate = status.coordinate.rounded(self._precision)

    def start(self) -> None:
        """Acquire the viewer's location once and load the first listing."""
        self._apply_location(self._acquirer.acquire())
        self.refresh()

    def on_location_change(self, lat: float, lng: float) -> bool:
        """Accept a new viewer coordinate (map pick or GPS update).

        Returns True when the change triggered a fetch. Moves within the gate's
        threshold only re-annotate distances on the shops already loaded.
        """
        new = Coordinate(lat=lat, lng=lng).rounded(self._precision)
        if (
            abs(new.lat - self.coordinate.lat) <= _COORDINATE_EPSILON
            and abs(new.lng - self.coordinate.lng) <= _COORDINATE_EPSILON
        ):
            return False

        self.coordinate = new
        if new.is_sentinel:
            # No real location any more: fall back to the all-shops listing.
            self._gate.reset()
            self.refresh()
            return True
        if not use_all_shops(self.mode, new, self.location_denied) and self._gate.should_fetch(new):
            self.refresh()
            return True

        self.shops = annotate_distances(self.shops, new)
        return False

    def enable_location_access(self) -> None:
        """Re-request location permission; on success switch back to a located listing."""
        status = self._acquirer.enable_location_access()
        if status.denied:
            self.location_denied = True
            self.location_message = status.message
            return
        self._apply_location(status)
        self._gate.reset()
        self.refresh()

    def reset_to_current_location(self) -> bool:
        """Jump back to the device position after the viewer moved the map elsewhere.

        A position obtained after an earlier denial clears the denial and reloads a
        located listing.
        """
        status = self._acquirer.acquire()
        if status.denied:
            self.location_message = status.message
            return False
        if self.location_denied:
            self._apply_location(status)
            self._gate.reset()
            self.refresh()
            return True
        return self.on_location_change(status.coordinate.lat, status.coordinate.lng)

    # --- fetching -----------------------------------------------------------------

    def set_mode(self, mode: FetchMode) -> bool:
        """Switch between nearby and all shops. A real switch always re-fetches."""
        if mode is self.mode:
            return False
        self.mode = mode
        self.refresh()
        return True

    def refresh(self) -> None:
        """Fetch a listing for the current mode and coordinate, recording any failure as state."""
        self.is_loading = True
        self.error = None
        if not use_all_shops(self.mode, self.coordinate, self.location_denied):
            self._gate.mark_fetched(self.coordinate)
        self.fetch_count += 1
        try:
            listing = self._fetcher.fetch(self.mode, self.coordinate, location_denied=self.location_denied)
        except (httpx.HTTPError, ValueError):
            logger.exception("Error fetching shops (mode=%s)", self.mode.value)
            self.error = FETCH_ERROR_MESSAGE
        else:
            self.shops = listing.shops
            self.categories = listing.categories
        finally:
            self.is_loading = False

    def retry(self) -> None:
        """The "Try Again" action: a plain re-fetch, no backoff."""
        self.refresh()

    # --- filters ------------------------------------------------------------------

    def set_search_term(self, term: str) -> None:
        self.search_term = term

    def select_category(self, category: str | None) -> None:
        self.selected_category = category

    def clear_filters(self) -> None:
        self.search_term = ""
        self.selected_category = None

    def visible_shops(self, *, nearest_first: bool = False) -> list[Shop]:
        shops = filter_shops(self.shops, self.search_term, self.selected_category)
        return sort_by_distance(shops) if nearest_first else shops

    # --- rendering ----------------------------------------------------------------

    def _card(self, shop: Shop) -> ShopCard:
        show_distance = self.location_available and shop.distance is not None
        return ShopCard(
            id=shop.id,
            name=shop.name,
            address=shop.full_address,
            business_hours=shop.business_hours,
            categories=shop.categories,
            logo_url=shop.logo.url if shop.logo else None,
            distance_km=shop.distance if show_distance else None,
            distance_badge=shop.distance_label if show_distance else None,
        )

    def _empty_message(self, visible: list[Shop]) -> str | None:
        if visible or self.is_loading or self.error:
            return None
        if self.search_term or self.selected_category:
            return FILTERED_EMPTY_MESSAGE
        if use_all_shops(self.mode, self.coordinate, self.location_denied):
            return ALL_EMPTY_MESSAGE
        return NEARBY_EMPTY_MESSAGE

    def view(self, *, nearest_first: bool = False) -> DiscoveryView:
        visible = self.visible_shops(nearest_first=nearest_first)
        filtered = bool(self.search_term or self.selected_category)
        return DiscoveryView(
            mode=self.mode.value,
            coordinate=None if self.coordinate.is_sentinel else self.coordinate,
            location_denied=self.location_denied,
            location_message=self.location_message,
            can_enable_location=self.location_denied,
            is_loading=self.is_loading,
            error=self.error,
            can_retry=self.error is not None,
            search_term=self.search_term,
            selected_category=self.selected_category,
            categories=self.categories,
            total_shops=len(self.shops),
            shops=[self._card(shop) for shop in visible],
            empty_message=self._empty_message(visible),
            can_clear_filters=filtered,
        )

