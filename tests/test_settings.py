import pytest

from shopfinder.config.settings import get_settings


@pytest.fixture
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_packaged_defaults_match_discovery_constants(fresh_settings, monkeypatch):
    monkeypatch.delenv("SHOPFINDER_CONFIG_PATH", raising=False)
    settings = get_settings()
    assert settings.discovery.movement_threshold_km == 0.05
    assert settings.discovery.geolocation.timeout_seconds == 10
    assert settings.discovery.geolocation.enable_high_accuracy is True
    assert settings.discovery.geolocation.maximum_age_seconds == 0
    assert settings.api.nearby_shops_path == "/api/shops/coordinates"


def test_env_overrides_base_url_and_log_level(fresh_settings, monkeypatch):
    monkeypatch.delenv("SHOPFINDER_CONFIG_PATH", raising=False)
    monkeypatch.setenv("SHOPFINDER_API_BASE_URL", "https://recipes.example/")
    monkeypatch.setenv("SHOPFINDER_LOG_LEVEL", "debug")
    settings = get_settings()
    assert settings.api.base_url == "https://recipes.example"
    assert settings.app.log_level == "debug"


def test_external_yaml_replaces_defaults(fresh_settings, monkeypatch, tmp_path):
    path = tmp_path / "shopfinder.yaml"
    path.write_text("discovery:\n  default_mode: all\n  movement_threshold_km: 0.2\n", encoding="utf-8")
    monkeypatch.setenv("SHOPFINDER_CONFIG_PATH", str(path))
    settings = get_settings()
    assert settings.discovery.default_mode == "all"
    assert settings.discovery.movement_threshold_km == 0.2
    assert settings.discovery.geolocation.timeout_seconds == 10


def test_invalid_mode_is_rejected(fresh_settings, monkeypatch, tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("discovery:\n  default_mode: everywhere\n", encoding="utf-8")
    monkeypatch.setenv("SHOPFINDER_CONFIG_PATH", str(path))
    with pytest.raises(ValueError):
        get_settings()
