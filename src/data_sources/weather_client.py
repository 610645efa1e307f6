"""Current weather via Open-Meteo (free, no API key)."""

from datetime import datetime, timezone
from typing import Optional

from loguru import logger

from src.data_sources.base import HTTPSource, solar_radiation
from src.data_sources.models import Provenance, WeatherRecord
from src.utils.config import settings


class WeatherClient(HTTPSource):
    """Client for current surface weather."""

    domain = "weather"

    def __init__(self, base_url: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.base_url = base_url or settings.sources.forecast_url

    def _request(self, lat: float, lon: float) -> tuple:
        params = {
            "latitude": lat,
            "longitude": lon,
            "current": "temperature_2m,relative_humidity_2m,wind_speed_10m,surface_pressure,cloud_cover",
            "wind_speed_unit": "kmh",
            "timezone": "UTC",
        }
        return self.base_url, params

    def _parse(self, data: dict, lat: float, lon: float) -> WeatherRecord:
        current = data["current"]
        cloud = float(current["cloud_cover"])

        record = WeatherRecord(
            temperature=round(float(current["temperature_2m"]), 1),
            humidity=float(current["relative_humidity_2m"]),
            wind_speed=round(float(current["wind_speed_10m"]), 1),
            pressure=round(float(current["surface_pressure"]), 1),
            cloud_cover=cloud,
            solar_radiation=solar_radiation(lat, cloud, datetime.now(timezone.utc)),
            source="Open-Meteo (real-time)",
            provenance=Provenance.GENUINE,
        )
        logger.debug(f"Weather at ({lat:.2f}, {lon:.2f}): {record.temperature}°C")
        return record


weather_client = WeatherClient()
