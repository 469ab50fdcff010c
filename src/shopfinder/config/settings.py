# src/shopfinder/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/shopfinder/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `SHOPFINDER_CONFIG_PATH` (replaces the packaged defaults)
- environment variables (e.g., `SHOPFINDER_API_BASE_URL`, `SHOPFINDER_LOG_LEVEL`)

Design rule:
- Tuning knobs (movement threshold, geolocation timeout, endpoints) live in YAML,
  not hard-coded in the discovery logic.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field

from shopfinder.core.env import load_dotenv_if_present, resolve_project_path


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `shopfinder.config`."""
    text = resources.files("shopfinder.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "Shopfinder"
    http_timeout_seconds: float = Field(15, gt=0)
    log_level: str = "INFO"


class ApiSettings(BaseModel):
    """Where the marketplace backend lives and which routes it exposes."""

    base_url: str = "http://localhost:3000"
    all_shops_path: str = "/api/shops"
    nearby_shops_path: str = "/api/shops/coordinates"
    shop_path: str = "/api/shops/{shop_id}"


class GeolocationSettings(BaseModel):
    enable_high_accuracy: bool = True
    timeout_seconds: float = Field(10, gt=0)
    maximum_age_seconds: float = Field(0, ge=0)


class DiscoverySettings(BaseModel):
    default_mode: Literal["nearby", "all"] = "nearby"
    movement_threshold_km: float = Field(0.05, ge=0)
    coordinate_precision: int = Field(6, ge=0, le=12)
    geolocation: GeolocationSettings = Field(default_factory=GeolocationSettings)


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)
    discovery: DiscoverySettings = Field(default_factory=DiscoverySettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: the whitelist is kept small on purpose; everything else belongs in YAML.
    """
    load_dotenv_if_present()
    data = dict(data)

    base_url = os.getenv("SHOPFINDER_API_BASE_URL")
    if base_url:
        data.setdefault("api", {})["base_url"] = base_url.rstrip("/")

    log_level = os.getenv("SHOPFINDER_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    timeout = os.getenv("SHOPFINDER_HTTP_TIMEOUT_SECONDS")
    if timeout:
        data.setdefault("app", {})["http_timeout_seconds"] = float(timeout)

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("SHOPFINDER_CONFIG_PATH")
    raw = _read_yaml_file(resolve_project_path(config_path)) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
