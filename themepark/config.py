"""Park configuration: built-in defaults, overridden by Config/park.yaml."""

import copy
import logging
import os
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = os.path.join("Config", "park.yaml")

DEFAULTS = {
    "logging": {
        "level": "INFO",
        "file": None,
    },
    "files": {
        "bookings": "bookings.dat",
        "history_export": "rideHistory_Demo.csv",
    },
    "booking": {
        "min_advance_minutes": 10,
    },
    "metrics": {
        "enabled": True,
        "out_dir": "results",
    },
    # empty -> the built-in rides from themepark.facilities.ride_instances
    "rides": [],
}


def _merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: Optional[str] = DEFAULT_CONFIG_PATH) -> dict:
    """Read the YAML file at `path` over the defaults. A missing file means defaults."""
    if path is None or not os.path.exists(path):
        logger.info("No configuration file at %s; using defaults", path)
        return copy.deepcopy(DEFAULTS)

    with open(path, encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"configuration in {path} must be a mapping")
    return _merge(DEFAULTS, cfg)
