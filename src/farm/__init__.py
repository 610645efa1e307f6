"""Farm module."""
from src.farm.models import Crop, FarmLocation, FarmStateStore, GameState, Livestock, Plot, new_game
from src.farm.catalog import crop_catalog, location_catalog, tutorials, weather_events
