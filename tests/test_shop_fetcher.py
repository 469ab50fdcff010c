import pytest

from shopfinder.discovery.fetcher import FetchMode, ShopListFetcher, collect_categories
from shopfinder.domain.models import SENTINEL_COORDINATE, Coordinate, Shop


class StubShopSource:
    def __init__(self, shops):
        self._shops = shops
        self.calls = []

    def list_all(self):
        self.calls.append(("all",))
        return list(self._shops)

    def list_near(self, lat, lng):
        self.calls.append(("near", lat, lng))
        return list(self._shops)


def _shops():
    return [
        Shop(_id="1", shopName="Joe's Bakery", location={"lat": 40.001, "lng": -73.0}, categories=["bakery"]),
        Shop(_id="2", shopName="No Pin Deli", categories=["deli", "bakery"]),
        Shop(_id="3", shopName="Mario's Pizza", location={"lat": 40.0, "lng": -73.01}, categories=None),
    ]


def test_nearby_mode_with_real_coordinate_calls_nearby_endpoint():
    source = StubShopSource(_shops())
    listing = ShopListFetcher(source).fetch(FetchMode.NEARBY, Coordinate(lat=40.0, lng=-73.0))
    assert source.calls == [("near", 40.0, -73.0)]
    assert listing.source == "nearby"


@pytest.mark.parametrize("mode", [FetchMode.NEARBY, FetchMode.ALL])
def test_denied_location_always_uses_all_shops(mode):
    source = StubShopSource(_shops())
    listing = ShopListFetcher(source).fetch(mode, Coordinate(lat=40.0, lng=-73.0), location_denied=True)
    assert source.calls == [("all",)]
    assert listing.source == "all"


def test_all_mode_uses_all_shops_even_with_a_coordinate():
    source = StubShopSource(_shops())
    ShopListFetcher(source).fetch(FetchMode.ALL, Coordinate(lat=40.0, lng=-73.0))
    assert source.calls == [("all",)]


def test_sentinel_coordinate_uses_all_shops_and_attaches_no_distance():
    source = StubShopSource(_shops())
    listing = ShopListFetcher(source).fetch(FetchMode.NEARBY, SENTINEL_COORDINATE)
    assert source.calls == [("all",)]
    assert all(shop.distance is None for shop in listing.shops)


def test_distances_attached_only_to_shops_with_location():
    source = StubShopSource(_shops())
    listing = ShopListFetcher(source).fetch(FetchMode.NEARBY, Coordinate(lat=40.0, lng=-73.0))
    by_id = {shop.id: shop for shop in listing.shops}
    assert by_id["1"].distance == pytest.approx(0.111, abs=0.002)
    assert by_id["2"].distance is None
    assert by_id["3"].distance == pytest.approx(0.852, abs=0.01)


def test_categories_are_unique_in_first_seen_order():
    listing = ShopListFetcher(StubShopSource(_shops())).fetch(FetchMode.ALL, None)
    assert listing.categories == ["bakery", "deli"]
    assert collect_categories([]) == []
