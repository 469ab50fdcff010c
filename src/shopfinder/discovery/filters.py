from __future__ import annotations

from shopfinder.domain.models import Shop


def matches_search(shop: Shop, search_term: str) -> bool:
    """Case-insensitive substring match on name, description or city; empty term matches all."""
    if not search_term:
        return True
    needle = search_term.lower()
    return (
        needle in shop.name.lower()
        or needle in (shop.description or "").lower()
        or needle in shop.city.lower()
    )


def matches_category(shop: Shop, selected_category: str | None) -> bool:
    return selected_category is None or selected_category in shop.categories


def filter_shops(shops: list[Shop], search_term: str = "", selected_category: str | None = None) -> list[Shop]:
    """Apply search and category filters. Order is preserved; there is no relevance ranking."""
    return [
        shop
        for shop in shops
        if matches_search(shop, search_term) and matches_category(shop, selected_category)
    ]


def sort_by_distance(shops: list[Shop]) -> list[Shop]:
    """Nearest first; shops with unknown distance keep their relative order at the end."""
    return sorted(shops, key=lambda s: (s.distance is None, s.distance if s.distance is not None else 0.0))
