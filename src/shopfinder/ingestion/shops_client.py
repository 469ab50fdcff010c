"""
Marketplace shops client.

Thin wrapper over the backend's shop routes:
- `GET /api/shops`                          all (approved) shops
- `GET /api/shops/coordinates?lat=&lng=`    shops near a point (radius/ranking is server-side)
- `GET /api/shops/{id}`                     one shop
- `GET /api/shops?ownerId=`                 shops registered by one owner

Every route answers `{success: bool, data: ...}`. This client unwraps that envelope and
parses shops into `Shop` models; it does not catch transport errors.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from shopfinder.config.settings import Settings
from shopfinder.core.http import get_json
from shopfinder.domain.models import Shop, ShopsEnvelope

logger = logging.getLogger(__name__)


class ShopsApiError(ValueError):
    """The backend answered, but not with a usable `{success: true, data}` envelope."""


class ShopsClient:
    """Fetches shops from the marketplace backend configured in `settings.api`."""

    def __init__(self, settings: Settings):
        self._settings = settings

    def _url(self, path: str) -> str:
        return self._settings.api.base_url.rstrip("/") + path

    def _get_envelope(self, path: str, params: dict[str, Any] | None = None) -> ShopsEnvelope:
        payload = get_json(
            self._url(path),
            params=params,
            timeout_seconds=self._settings.app.http_timeout_seconds,
        )
        if not isinstance(payload, dict):
            raise ShopsApiError(f"Unexpected response from {path}: expected a JSON object")
        try:
            envelope = ShopsEnvelope.model_validate(payload)
        except ValidationError as exc:
            raise ShopsApiError(f"Malformed response from {path}: {exc}") from exc
        if not envelope.success:
            raise ShopsApiError(envelope.error or f"Request to {path} was not successful")
        return envelope

    def _parse_shop_list(self, path: str, data: Any) -> list[Shop]:
        if data is None:
            return []
        if not isinstance(data, list):
            raise ShopsApiError(f"Unexpected data from {path}: expected a list of shops")

        shops: list[Shop] = []
        for raw in data:
            try:
                shops.append(Shop.model_validate(raw))
            except ValidationError as exc:
                logger.warning("Skipping unparseable shop from %s: %s", path, exc.errors()[:1])
        return shops

    def list_all(self) -> list[Shop]:
        """Return every shop the backend lists publicly."""
        path = self._settings.api.all_shops_path
        envelope = self._get_envelope(path)
        shops = self._parse_shop_list(path, envelope.data)
        logger.info("Fetched %d shops (all)", len(shops))
        return shops

    def list_near(self, lat: float, lng: float) -> list[Shop]:
        """Return shops near `(lat, lng)` as ranked by the backend."""
        path = self._settings.api.nearby_shops_path
        envelope = self._get_envelope(path, params={"lat": lat, "lng": lng})
        shops = self._parse_shop_list(path, envelope.data)
        logger.info("Fetched %d shops near lat=%.6f lng=%.6f", len(shops), lat, lng)
        return shops

    def list_owner_shops(self, owner_id: str) -> list[Shop]:
        """Return the shops registered by `owner_id`."""
        path = self._settings.api.all_shops_path
        envelope = self._get_envelope(path, params={"ownerId": owner_id})
        return self._parse_shop_list(path, envelope.data)

    def get_shop(self, shop_id: str) -> Shop | None:
        """Return one shop, or None when the backend has no data for it."""
        path = self._settings.api.shop_path.format(shop_id=shop_id)
        envelope = self._get_envelope(path)
        if envelope.data is None:
            return None
        try:
            return Shop.model_validate(envelope.data)
        except ValidationError as exc:
            raise ShopsApiError(f"Malformed shop from {path}: {exc}") from exc
