"""Soil moisture and temperature via Open-Meteo land-surface model output."""

from datetime import datetime, timezone
from typing import Optional

from loguru import logger

from src.data_sources.base import HTTPSource
from src.data_sources.models import Provenance, SoilRecord
from src.utils.config import settings


def _clamp01(value: float) -> float:
    return min(max(value, 0.0), 1.0)


class SoilClient(HTTPSource):
    """Client for surface and root-zone soil conditions."""

    domain = "soil"

    def __init__(self, base_url: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.base_url = base_url or settings.sources.forecast_url

    def _request(self, lat: float, lon: float) -> tuple:
        params = {
            "latitude": lat,
            "longitude": lon,
            "hourly": "soil_moisture_0_to_1cm,soil_moisture_9_to_27cm,soil_temperature_0cm",
            "forecast_days": 1,
            "timezone": "UTC",
        }
        return self.base_url, params

    def _parse(self, data: dict, lat: float, lon: float) -> SoilRecord:
        hourly = data["hourly"]
        times = hourly.get("time", [])
        stamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:00")
        i = times.index(stamp) if stamp in times else 0

        surface = hourly["soil_moisture_0_to_1cm"][i]
        root_zone = hourly["soil_moisture_9_to_27cm"][i]
        temperature = hourly["soil_temperature_0cm"][i]
        if surface is None or root_zone is None or temperature is None:
            raise ValueError(f"missing soil values at index {i}")

        record = SoilRecord(
            surface_moisture=round(_clamp01(float(surface)), 3),
            root_zone_moisture=round(_clamp01(float(root_zone)), 3),
            soil_temperature=round(float(temperature), 1),
            source="Open-Meteo land surface model",
            resolution="11km",
            provenance=Provenance.GENUINE,
        )
        logger.debug(f"Soil at ({lat:.2f}, {lon:.2f}): moisture={record.surface_moisture}")
        return record


soil_client = SoilClient()
