"""Static reference catalogs loaded from YAML."""

from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

import yaml
from loguru import logger

from src.farm.models import Crop, FarmLocation, Tutorial, WeatherEvent
from src.utils.config import get_project_root

CATALOG_DIR = get_project_root() / "config" / "catalogs"


def load_yaml(path: Path) -> dict:
    with open(path) as f:
        return yaml.safe_load(f) or {}


@lru_cache(maxsize=None)
def crop_catalog() -> Mapping[str, Crop]:
    config = load_yaml(CATALOG_DIR / "crops.yaml")
    crops = {crop_id: Crop(crop_id=crop_id, **spec) for crop_id, spec in config.get("crops", {}).items()}
    logger.debug(f"Loaded {len(crops)} crops")
    return MappingProxyType(crops)


@lru_cache(maxsize=None)
def location_catalog() -> Mapping[str, FarmLocation]:
    config = load_yaml(CATALOG_DIR / "locations.yaml")
    locations = {
        location_id: FarmLocation(location_id=location_id, **spec)
        for location_id, spec in config.get("locations", {}).items()
    }
    logger.debug(f"Loaded {len(locations)} farm locations")
    return MappingProxyType(locations)


@lru_cache(maxsize=None)
def weather_events() -> tuple:
    config = load_yaml(CATALOG_DIR / "weather_events.yaml")
    return tuple(
        WeatherEvent(event_type=e.pop("type"), **e)
        for e in (dict(item) for item in config.get("events", []))
    )


@lru_cache(maxsize=None)
def tutorials() -> tuple:
    config = load_yaml(CATALOG_DIR / "tutorials.yaml")
    return tuple(Tutorial(**t) for t in config.get("tutorials", []))
