"""YAML config loader with dotted-key lookup."""

from pathlib import Path
from typing import Any

import yaml

from orderbook.config.schema import ClientConfig


def load_config(path: str | Path) -> ClientConfig:
    """Load and validate config from a YAML file.

    A missing or empty file yields the defaults.
    """
    path = Path(path)
    if not path.exists():
        return ClientConfig()
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    return ClientConfig(**raw)


def get_config_value(config: ClientConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'api.page_limit'."""
    obj: Any = config
    for part in dotted_key.split("."):
        if hasattr(obj, part):
            obj = getattr(obj, part)
        elif isinstance(obj, dict):
            obj = obj[part]
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj
