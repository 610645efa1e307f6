"""Data sources module."""

from src.data_sources.base import EnvironmentSource, SourceUnavailable
from src.data_sources.cache import SnapshotCache
from src.data_sources.geocode_client import GeocodeClient
from src.data_sources.precipitation_client import PrecipitationClient, precipitation_client
from src.data_sources.soil_client import SoilClient, soil_client
from src.data_sources.synthetic import SyntheticEnvironmentGenerator, synthetic_generator
from src.data_sources.vegetation_client import VegetationClient, vegetation_client
from src.data_sources.weather_client import WeatherClient, weather_client

__all__ = [
    "EnvironmentSource", "SourceUnavailable", "SnapshotCache", "GeocodeClient",
    "WeatherClient", "weather_client", "SoilClient", "soil_client",
    "VegetationClient", "vegetation_client", "PrecipitationClient", "precipitation_client",
    "SyntheticEnvironmentGenerator", "synthetic_generator",
]
