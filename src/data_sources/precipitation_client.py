"""Precipitation totals via Open-Meteo daily sums."""

from typing import Optional

from loguru import logger

from src.data_sources.base import HTTPSource, precipitation_type_label
from src.data_sources.models import PrecipitationRecord, Provenance
from src.utils.config import settings


class PrecipitationClient(HTTPSource):
    """Client for daily, weekly and monthly rainfall at a point."""

    domain = "precipitation"

    def __init__(self, base_url: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.base_url = base_url or settings.sources.forecast_url

    def _request(self, lat: float, lon: float) -> tuple:
        params = {
            "latitude": lat,
            "longitude": lon,
            "daily": "precipitation_sum",
            "past_days": 29,
            "forecast_days": 1,
            "timezone": "UTC",
        }
        return self.base_url, params

    def _parse(self, data: dict, lat: float, lon: float) -> PrecipitationRecord:
        sums = [p for p in data["daily"]["precipitation_sum"] if p is not None]
        if not sums:
            raise ValueError("empty precipitation series")

        daily = round(float(sums[-1]), 1)
        record = PrecipitationRecord(
            daily_precipitation=daily,
            weekly_total=round(sum(sums[-7:]), 1),
            monthly_total=round(sum(sums[-30:]), 1),
            precipitation_type=precipitation_type_label(daily),
            source="Open-Meteo daily precipitation",
            resolution="11km",
            provenance=Provenance.GENUINE,
        )
        logger.debug(f"Precipitation at ({lat:.2f}, {lon:.2f}): {daily}mm")
        return record


precipitation_client = PrecipitationClient()
