"""
Geolocation acquisition.

Where the viewer is comes from a `PositionProvider` (a browser bridge, a device GPS, a
fixed coordinate from the command line) and whether we may ask comes from a
`PermissionProvider`. `GeolocationAcquirer` wraps both and turns every failure into a
`LocationStatus` instead of raising:

- success            -> coordinate set, location available
- denied / timeout / unavailable / unsupported -> sentinel coordinate, `denied=True`

Downstream, a denied status switches the fetch to "all shops" and hides distance badges.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Literal, Protocol

from shopfinder.config.settings import GeolocationSettings
from shopfinder.domain.models import SENTINEL_COORDINATE, Coordinate

logger = logging.getLogger(__name__)

PermissionState = Literal["granted", "denied", "prompt"]

DENIED_INSTRUCTIONS = (
    "Location access is blocked. Enable it for this site in your browser settings, "
    "then try again."
)
UNAVAILABLE_MESSAGE = "Location unavailable. Showing all shops instead."


class LocationErrorCode(str, Enum):
    PERMISSION_DENIED = "permission_denied"
    POSITION_UNAVAILABLE = "position_unavailable"
    TIMEOUT = "timeout"
    UNSUPPORTED = "unsupported"


class LocationError(Exception):
    """Raised by position providers when no coordinate can be produced."""

    def __init__(self, code: LocationErrorCode, message: str | None = None):
        super().__init__(message or code.value)
        self.code = code


@dataclass(frozen=True)
class GeolocationOptions:
    enable_high_accuracy: bool = True
    timeout_seconds: float = 10
    maximum_age_seconds: float = 0

    @classmethod
    def from_settings(cls, settings: GeolocationSettings) -> "GeolocationOptions":
        return cls(
            enable_high_accuracy=settings.enable_high_accuracy,
            timeout_seconds=settings.timeout_seconds,
            maximum_age_seconds=settings.maximum_age_seconds,
        )


class PositionProvider(Protocol):
    def get_current_position(self, options: GeolocationOptions) -> Coordinate: ...


class PermissionProvider(Protocol):
    def query(self, name: str) -> PermissionState: ...


@dataclass(frozen=True)
class LocationStatus:
    """Outcome of one location request."""

    coordinate: Coordinate
    denied: bool
    error: LocationErrorCode | None = None
    message: str | None = None

    @property
    def available(self) -> bool:
        return not self.denied and not self.coordinate.is_sentinel


class StaticPositionProvider:
    """Always answers with the same coordinate, or always fails with the same error.

    With neither configured it behaves like a client without geolocation support.
    When `permissions` is given, a "denied" answer fails the request the way a
    browser does once the site is blocked.
    """

    def __init__(
        self,
        coordinate: Coordinate | None = None,
        error: LocationErrorCode | None = None,
        permissions: PermissionProvider | None = None,
    ):
        self.coordinate = coordinate
        self.error = error
        self.permissions = permissions
        self.calls = 0

    def get_current_position(self, options: GeolocationOptions) -> Coordinate:
        self.calls += 1
        if self.permissions is not None and self.permissions.query("geolocation") == "denied":
            raise LocationError(LocationErrorCode.PERMISSION_DENIED)
        if self.error is not None:
            raise LocationError(self.error)
        if self.coordinate is None:
            raise LocationError(LocationErrorCode.UNSUPPORTED)
        return self.coordinate


class StaticPermissionProvider:
    def __init__(self, state: PermissionState = "prompt"):
        self.state: PermissionState = state
        self.queries: list[str] = []

    def query(self, name: str) -> PermissionState:
        self.queries.append(name)
        return self.state


class GeolocationAcquirer:
    def __init__(
        self,
        positions: PositionProvider | None,
        permissions: PermissionProvider | None = None,
        options: GeolocationOptions | None = None,
    ):
        self._positions = positions
        self._permissions = permissions
        self._options = options or GeolocationOptions()

    @property
    def options(self) -> GeolocationOptions:
        return self._options

    def acquire(self) -> LocationStatus:
        """Request the current position once; failures degrade to a denied status."""
        if self._positions is None:
            logger.info("Geolocation is not supported by this client")
            return LocationStatus(
                SENTINEL_COORDINATE, denied=True, error=LocationErrorCode.UNSUPPORTED, message=UNAVAILABLE_MESSAGE
            )
        try:
            coordinate = self._positions.get_current_position(self._options)
        except LocationError as exc:
            logger.warning("Error getting location: %s", exc.code.value)
            message = DENIED_INSTRUCTIONS if exc.code is LocationErrorCode.PERMISSION_DENIED else UNAVAILABLE_MESSAGE
            return LocationStatus(SENTINEL_COORDINATE, denied=True, error=exc.code, message=message)
        return LocationStatus(coordinate, denied=False)

    def enable_location_access(self) -> LocationStatus:
        """Handle an explicit "Enable Location Access" request.

        A permanently denied permission cannot be re-prompted from here, so the
        returned status carries instructions and no position request is made.
        `granted` and `prompt` retry the position request.
        """
        if self._permissions is None:
            return self.acquire()

        state = self._permissions.query("geolocation")
        logger.info("Geolocation permission state: %s", state)
        if state == "denied":
            return LocationStatus(
                SENTINEL_COORDINATE,
                denied=True,
                error=LocationErrorCode.PERMISSION_DENIED,
                message=DENIED_INSTRUCTIONS,
            )
        return self.acquire()
