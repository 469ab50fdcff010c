from shopfinder import cli
from shopfinder.discovery.location import DENIED_INSTRUCTIONS
from shopfinder.domain.models import Shop


class _StubShopsClient:
    def __init__(self, settings):  # noqa: ARG002
        pass

    def list_all(self):
        return [Shop(_id="1", shopName="Joe's Bakery", address="1 Main St", city="Brooklyn", categories=["bakery"])]

    def list_near(self, lat, lng):
        return [
            Shop(
                _id="1",
                shopName="Joe's Bakery",
                address="1 Main St",
                city="Brooklyn",
                location={"lat": lat + 0.01, "lng": lng},
                categories=["bakery"],
            )
        ]


def test_distance_command_prints_km(capsys):
    assert cli.main(["distance", "0", "0", "1", "0"]) == 0
    out = capsys.readouterr().out
    assert "111.195 km" in out
    assert "111.2km away" in out


def test_discover_command_renders_badges(monkeypatch, capsys):
    monkeypatch.setattr(cli, "ShopsClient", _StubShopsClient)
    assert cli.main(["discover", "--lat", "40.0", "--lng", "-73.0"]) == 0
    out = capsys.readouterr().out
    assert "Showing shops near: lat=40.000000 lng=-73.000000 (nearby)" in out
    assert "Joe's Bakery  [1.1km away]" in out
    assert "Categories: bakery" in out


def test_discover_command_with_denied_location(monkeypatch, capsys):
    monkeypatch.setattr(cli, "ShopsClient", _StubShopsClient)
    assert cli.main(["discover", "--deny-location", "--search", "joe"]) == 0
    out = capsys.readouterr().out
    assert "Showing all shops" in out
    assert "away" not in out
    assert "1 Main St, Brooklyn" in out


def test_discover_command_with_blocked_permission_explains_how_to_enable(monkeypatch, capsys):
    monkeypatch.setattr(cli, "ShopsClient", _StubShopsClient)
    argv = ["discover", "--lat", "40.0", "--lng", "-73.0", "--permission", "denied", "--enable-location"]
    assert cli.main(argv) == 0
    out = capsys.readouterr().out
    assert "Showing all shops" in out
    assert DENIED_INSTRUCTIONS in out
    assert "away" not in out


def test_discover_command_with_prompt_permission_locates_the_viewer(monkeypatch, capsys):
    monkeypatch.setattr(cli, "ShopsClient", _StubShopsClient)
    argv = ["discover", "--lat", "40.0", "--lng", "-73.0", "--permission", "prompt", "--enable-location"]
    assert cli.main(argv) == 0
    out = capsys.readouterr().out
    assert "Showing shops near: lat=40.000000 lng=-73.000000 (nearby)" in out
    assert "Joe's Bakery  [1.1km away]" in out
