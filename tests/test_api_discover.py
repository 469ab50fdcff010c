import httpx
from starlette.testclient import TestClient

from shopfinder.api.app import app
from shopfinder.domain.models import Shop


class _StubShopsClient:
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def list_all(self):
        self.calls.append(("all",))
        if self.fail:
            raise httpx.ConnectError("backend down")
        return [Shop(_id="a", shopName="Corner Bakery", location={"lat": 10.001, "lng": 10.0}, categories=["bakery"])]

    def list_near(self, lat, lng):
        self.calls.append(("near", lat, lng))
        return [
            Shop(_id="a", shopName="Corner Bakery", location={"lat": 10.001, "lng": 10.0}, categories=["bakery"]),
            Shop(_id="b", shopName="Pizza Place", categories=["pizza"]),
        ]


def test_discover_nearby_includes_distance_badges(monkeypatch):
    import shopfinder.api.routes as routes

    stub = _StubShopsClient()
    monkeypatch.setattr(routes, "_shops_client", lambda: stub)

    with TestClient(app) as c:
        resp = c.get("/api/discover", params={"lat": 10.0, "lng": 10.0})
    assert resp.status_code == 200
    data = resp.json()
    assert stub.calls == [("near", 10.0, 10.0)]
    assert data["mode"] == "nearby"
    assert data["categories"] == ["bakery", "pizza"]
    assert data["shops"][0]["distance_badge"] == "111m away"
    assert data["shops"][1]["distance_badge"] is None


def test_discover_with_denied_location_lists_all_shops(monkeypatch):
    import shopfinder.api.routes as routes

    stub = _StubShopsClient()
    monkeypatch.setattr(routes, "_shops_client", lambda: stub)

    with TestClient(app) as c:
        resp = c.get("/api/discover", params={"lat": 10.0, "lng": 10.0, "location_denied": "true", "mode": "nearby"})
    data = resp.json()
    assert stub.calls == [("all",)]
    assert data["location_denied"] is True
    assert data["can_enable_location"] is True
    assert data["shops"][0]["distance_badge"] is None


def test_discover_reports_upstream_failure_in_view(monkeypatch):
    import shopfinder.api.routes as routes

    monkeypatch.setattr(routes, "_shops_client", lambda: _StubShopsClient(fail=True))

    with TestClient(app) as c:
        resp = c.get("/api/discover")
    assert resp.status_code == 200
    data = resp.json()
    assert data["error"]
    assert data["can_retry"] is True


def test_distance_endpoint():
    with TestClient(app) as c:
        resp = c.get("/api/distance", params={"lat1": 0, "lng1": 0, "lat2": 1, "lng2": 0})
    assert resp.status_code == 200
    data = resp.json()
    assert 110 < data["distance_km"] < 112
    assert data["label"] == "111.2km away"
