"""Suppress re-fetches caused by GPS jitter."""

from __future__ import annotations

from shopfinder.core.geo import distance_km
from shopfinder.domain.models import Coordinate

DEFAULT_THRESHOLD_KM = 0.05


class MovementGate:
    """Remembers where shops were last fetched and says whether a new coordinate is far enough away.

    `last_fetched` is a plain attribute: it is written only by whoever performs the
    fetch (via `mark_fetched`) and read only for the threshold comparison.
    """

    def __init__(self, threshold_km: float = DEFAULT_THRESHOLD_KM):
        self.threshold_km = threshold_km
        self.last_fetched: Coordinate | None = None

    def should_fetch(self, coordinate: Coordinate) -> bool:
        if self.last_fetched is None:
            return True
        moved = distance_km(self.last_fetched.lat, self.last_fetched.lng, coordinate.lat, coordinate.lng)
        return moved > self.threshold_km

    def mark_fetched(self, coordinate: Coordinate) -> None:
        self.last_fetched = coordinate

    def reset(self) -> None:
        self.last_fetched = None
