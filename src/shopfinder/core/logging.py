"""
Logging setup shared by the CLI and the API app.

Handlers and formatters come from the packaged `config/logging.yaml`, which also pins
`httpx` to WARNING so backend requests do not flood the console. The configured
`app.log_level` (settable through `SHOPFINDER_LOG_LEVEL`) replaces the root level and
every handler level that the YAML declares.
"""

from __future__ import annotations

import logging.config

from shopfinder.config.settings import get_logging_config, get_settings


def configure_logging() -> None:
    """Configure the Python logging system based on packaged YAML config + settings."""
    settings = get_settings()
    # The loaded mapping is cached; copy the parts we override.
    config = dict(get_logging_config())
    config["root"] = dict(config.get("root", {}))
    config["handlers"] = {name: dict(h) for name, h in config.get("handlers", {}).items()}

    level = settings.app.log_level.upper()
    config["root"]["level"] = level
    for handler in config["handlers"].values():
        if "level" in handler:
            handler["level"] = level

    logging.config.dictConfig(config)
