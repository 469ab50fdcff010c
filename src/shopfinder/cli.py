"""
Shopfinder CLI entrypoint.

This CLI is intended for quick local checks against a marketplace backend without a browser.
It delegates the discovery flow to `shopfinder.discovery.session.DiscoverySession`.
"""

from __future__ import annotations

import argparse
import json
from typing import Any

import httpx

from shopfinder.config.settings import get_settings
from shopfinder.core.geo import distance_km, format_distance
from shopfinder.core.logging import configure_logging
from shopfinder.discovery.fetcher import FetchMode, ShopListFetcher
from shopfinder.discovery.location import (
    GeolocationAcquirer,
    GeolocationOptions,
    LocationErrorCode,
    StaticPermissionProvider,
    StaticPositionProvider,
)
from shopfinder.discovery.session import DiscoverySession
from shopfinder.domain.models import Coordinate, DiscoveryView, Shop
from shopfinder.ingestion.shops_client import ShopsApiError, ShopsClient


def _print_view(view: DiscoveryView) -> None:
    if view.coordinate is not None:
        print(f"Showing shops near: lat={view.coordinate.lat:.6f} lng={view.coordinate.lng:.6f} ({view.mode})")
    else:
        print(f"Showing all shops ({view.mode})")
    if view.location_message:
        print(f"  {view.location_message}")

    if view.error:
        print(f"Error: {view.error}")
        return
    if view.categories:
        print("Categories: " + ", ".join(view.categories))
    if not view.shops:
        print(view.empty_message or "No shops found")
        return

    for i, card in enumerate(view.shops, start=1):
        badge = f"  [{card.distance_badge}]" if card.distance_badge else ""
        print(f"{i:>2}. {card.name}{badge}")
        if card.address:
            print(f"    {card.address}")
        if card.business_hours:
            print(f"    hours: {card.business_hours}")
        if card.categories:
            print(f"    categories: {', '.join(card.categories)}")


def _print_shop(shop: Shop) -> None:
    print(f"{shop.name} ({shop.id})")
    if shop.full_address:
        print(f"  {shop.full_address}")
    if shop.description:
        print(f"  {shop.description}")
    if shop.location is not None:
        print(f"  location: lat={shop.location.lat:.6f} lng={shop.location.lng:.6f}")


def _cmd_discover(args: argparse.Namespace) -> int:
    """Handle the `discover` subcommand."""
    settings = get_settings()

    permissions = StaticPermissionProvider("denied" if args.deny_location else args.permission)
    if args.lat is not None and args.lng is not None:
        positions = StaticPositionProvider(Coordinate(lat=float(args.lat), lng=float(args.lng)), permissions=permissions)
    else:
        positions = StaticPositionProvider(error=LocationErrorCode.POSITION_UNAVAILABLE, permissions=permissions)

    acquirer = GeolocationAcquirer(positions, permissions, options=GeolocationOptions.from_settings(settings.discovery.geolocation))
    session = DiscoverySession.from_settings(settings, ShopListFetcher(ShopsClient(settings)), acquirer)
    if args.mode:
        session.mode = FetchMode(args.mode)
    session.set_search_term(args.search or "")
    session.select_category(args.category)
    session.start()
    if args.enable_location and session.location_denied:
        session.enable_location_access()

    view = session.view(nearest_first=bool(args.nearest_first))
    if args.json:
        print(json.dumps(view.model_dump(mode="json"), ensure_ascii=False, indent=2))
    else:
        _print_view(view)
    return 1 if view.error else 0


def _cmd_distance(args: argparse.Namespace) -> int:
    km = distance_km(args.lat1, args.lng1, args.lat2, args.lng2)
    print(f"{km:.3f} km ({format_distance(km)})")
    return 0


def _cmd_shop(args: argparse.Namespace) -> int:
    client = ShopsClient(get_settings())
    try:
        shop = client.get_shop(args.shop_id)
    except (httpx.HTTPError, ShopsApiError) as exc:
        print(f"Error fetching shop {args.shop_id}: {exc}")
        return 1
    if shop is None:
        print(f"Shop {args.shop_id} not found")
        return 1
    if args.json:
        print(json.dumps(shop.model_dump(mode="json", by_alias=True), ensure_ascii=False, indent=2))
    else:
        _print_shop(shop)
    return 0


def _cmd_owner_shops(args: argparse.Namespace) -> int:
    client = ShopsClient(get_settings())
    try:
        shops = client.list_owner_shops(args.owner_id)
    except (httpx.HTTPError, ShopsApiError) as exc:
        print(f"Error fetching shops for owner {args.owner_id}: {exc}")
        return 1
    if not shops:
        print("No shops registered yet.")
    for shop in shops:
        _print_shop(shop)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the Shopfinder CLI."""
    parser = argparse.ArgumentParser(prog="shopfinder")
    sub = parser.add_subparsers(dest="command", required=True)

    disc = sub.add_parser("discover", help="List shops near a coordinate (or all shops without one).")
    disc.add_argument("--lat", type=float, default=None)
    disc.add_argument("--lng", type=float, default=None)
    disc.add_argument(
        "--deny-location",
        action="store_true",
        help="Behave as if location permission was denied (all shops, no distances).",
    )
    disc.add_argument(
        "--permission",
        choices=["granted", "denied", "prompt"],
        default="granted",
        help="Geolocation permission state reported for this client.",
    )
    disc.add_argument(
        "--enable-location",
        action="store_true",
        help="If location ended up denied, request access again (as the Enable Location Access button does).",
    )
    disc.add_argument("--mode", choices=[m.value for m in FetchMode], default=None)
    disc.add_argument("--search", type=str, default="", help="Match shop name, description or city.")
    disc.add_argument("--category", type=str, default=None)
    disc.add_argument("--nearest-first", action="store_true", help="Sort by distance; unknown distances last.")
    disc.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    disc.set_defaults(func=_cmd_discover)

    dist = sub.add_parser("distance", help="Great-circle distance between two points.")
    dist.add_argument("lat1", type=float)
    dist.add_argument("lng1", type=float)
    dist.add_argument("lat2", type=float)
    dist.add_argument("lng2", type=float)
    dist.set_defaults(func=_cmd_distance)

    shop = sub.add_parser("shop", help="Show one shop by id.")
    shop.add_argument("shop_id")
    shop.add_argument("--json", action="store_true")
    shop.set_defaults(func=_cmd_shop)

    owner = sub.add_parser("owner-shops", help="List the shops registered by one owner.")
    owner.add_argument("owner_id")
    owner.set_defaults(func=_cmd_owner_shops)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m shopfinder.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
