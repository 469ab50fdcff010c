"""
Domain models (Pydantic).

These types are the stable "contract" between layers:
- backend payloads (`Shop`, `ShopsEnvelope`) parsed by the shops client
- viewer state (`Coordinate`) produced by geolocation or map picks
- rendered discovery output (`DiscoveryView`) consumed by the CLI and the API

Absent collections are normalized here, at the parse boundary, so discovery code
never has to guard against `None` categories or half-filled locations.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shopfinder.core.geo import format_distance


class Coordinate(BaseModel):
    """A latitude/longitude pair in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)

    @property
    def is_sentinel(self) -> bool:
        """True when this is the "no real location yet" placeholder.

        Either component being exactly zero counts as unset.
        """
        return self.lat == 0 or self.lng == 0

    def rounded(self, precision: int) -> "Coordinate":
        return Coordinate(lat=round(self.lat, precision), lng=round(self.lng, precision))


SENTINEL_COORDINATE = Coordinate(lat=0.0, lng=0.0)


class ShopLogo(BaseModel):
    url: str
    filename: str | None = None


class Shop(BaseModel):
    """A storefront as returned by the marketplace backend.

    `distance` is attached client-side (kilometers from the viewer) and is never sent back.
    None means "unknown", not zero.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(default="", alias="_id")
    name: str = Field(default="", alias="shopName")
    description: str | None = None
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = Field(default="", alias="zipCode")
    country: str = ""
    business_hours: str | None = Field(default=None, alias="businessHours")
    phone: str | None = None
    email: str | None = None
    owner: str | None = None
    owner_name: str | None = Field(default=None, alias="ownerName")
    is_approved: bool = Field(default=False, alias="isApproved")
    logo: ShopLogo | None = None
    location: Coordinate | None = None
    categories: list[str] = Field(default_factory=list)
    distance: float | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("address", "city", "state", "zip_code", "country", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("categories", mode="before")
    @classmethod
    def _default_categories(cls, value: Any) -> list[str]:
        if not value:
            return []
        if isinstance(value, str):
            return [value]
        return [str(c) for c in value if c]

    @field_validator("location", mode="before")
    @classmethod
    def _drop_malformed_location(cls, value: Any) -> Any:
        # A location without both numeric components is treated as absent.
        if not isinstance(value, dict):
            return value if isinstance(value, Coordinate) else None
        lat, lng = value.get("lat"), value.get("lng")
        if not isinstance(lat, (int, float)) or not isinstance(lng, (int, float)):
            return None
        if not (-90 <= lat <= 90 and -180 <= lng <= 180):
            return None
        return {"lat": lat, "lng": lng}

    @field_validator("logo", mode="before")
    @classmethod
    def _drop_empty_logo(cls, value: Any) -> Any:
        if isinstance(value, dict) and not value.get("url"):
            return None
        return value

    @property
    def has_location(self) -> bool:
        return self.location is not None and not self.location.is_sentinel

    @property
    def distance_label(self) -> str | None:
        if self.distance is None:
            return None
        return format_distance(self.distance)

    @property
    def full_address(self) -> str:
        return ", ".join(part for part in (self.address, self.city, self.state) if part)


class ShopsEnvelope(BaseModel):
    """The `{success, data}` wrapper every shops endpoint responds with."""

    success: bool = False
    data: Any = None
    error: str | None = None


class ShopCard(BaseModel):
    """One rendered shop entry: the shop plus its (optional) distance badge."""

    id: str
    name: str
    address: str
    business_hours: str | None = None
    categories: list[str] = Field(default_factory=list)
    logo_url: str | None = None
    distance_km: float | None = None
    distance_badge: str | None = None


class DiscoveryView(BaseModel):
    """Everything a shop-discovery page needs to render, derived from session state."""

    mode: Literal["nearby", "all"]
    coordinate: Coordinate | None = None
    location_denied: bool = False
    location_message: str | None = None
    can_enable_location: bool = False
    is_loading: bool = False
    error: str | None = None
    can_retry: bool = False
    search_term: str = ""
    selected_category: str | None = None
    categories: list[str] = Field(default_factory=list)
    total_shops: int = 0
    shops: list[ShopCard] = Field(default_factory=list)
    empty_message: str | None = None
    can_clear_filters: bool = False
