"""Deterministic synthetic environment for when remote sources are unreachable.

Records are seeded from the rounded coordinate and the hour of the request, so
every caller asking about the same place within the same hour sees the same
conditions. The four domains are drawn from one generator and share the same
seasonal phase and rainfall draw, which keeps them consistent with each other
(wet days are cloudy, cloudy days are dim, wet soil follows rain).
"""

import math
import zlib
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import numpy as np

from src.data_sources.base import precipitation_type_label, solar_radiation, vegetation_health_label
from src.data_sources.models import (
    PrecipitationRecord,
    Provenance,
    SoilRecord,
    VegetationRecord,
    WeatherRecord,
)
from src.utils.constants import CLIMATE_BANDS

NORTHERN_PHASE_DAYS = 80
SOUTHERN_PHASE_DAYS = 260

SOIL_BASELINE = {
    "tropical": {"moisture": 0.55, "fertility": 0.60, "organic_matter": 4.0},
    "temperate": {"moisture": 0.45, "fertility": 0.75, "organic_matter": 3.5},
    "polar": {"moisture": 0.30, "fertility": 0.40, "organic_matter": 6.0},
}

NDVI_BASELINE = {
    "tropical": (0.65, 0.05),
    "temperate": (0.50, 0.25),
    "polar": (0.25, 0.15),
}

# |lat| upper bound -> mean mm/day
RAIN_BASELINE = [(15.0, 8.0), (35.0, 3.5), (60.0, 2.5)]
POLAR_RAIN = 1.0


def climate_band(lat: float) -> str:
    for upper, band in CLIMATE_BANDS:
        if abs(lat) < upper:
            return band
    return "polar"


def seasonal_phase(lat: float, day_of_year: int) -> float:
    """+1 at local midsummer, -1 at local midwinter."""
    offset = NORTHERN_PHASE_DAYS if lat >= 0 else SOUTHERN_PHASE_DAYS
    return math.sin(2 * math.pi * (day_of_year - offset) / 365)


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


@dataclass(frozen=True)
class SyntheticBundle:
    weather: WeatherRecord
    soil: SoilRecord
    vegetation: VegetationRecord
    precipitation: PrecipitationRecord

    def record(self, domain: str):
        return getattr(self, domain)


class SyntheticEnvironmentGenerator:
    """Believable weather, soil, vegetation and rainfall without network access."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed

    def _rng(self, lat: float, lon: float, now: datetime) -> np.random.Generator:
        key = f"{lat:.2f}:{lon:.2f}:{now:%Y%m%d%H}".encode()
        entropy = [zlib.crc32(key)]
        if self.seed is not None:
            entropy.append(self.seed)
        return np.random.default_rng(entropy)

    def generate(self, lat: float, lon: float, now: Optional[datetime] = None) -> SyntheticBundle:
        now = now or datetime.now(timezone.utc)
        rng = self._rng(lat, lon, now)
        season = seasonal_phase(lat, now.timetuple().tm_yday)
        band = climate_band(lat)

        precipitation = self._precipitation(rng, lat, season)
        weather = self._weather(rng, lat, now, season, precipitation.daily_precipitation)
        soil = self._soil(rng, band, season, precipitation.daily_precipitation, weather.temperature)
        vegetation = self._vegetation(rng, band, season)

        return SyntheticBundle(
            weather=weather,
            soil=soil,
            vegetation=vegetation,
            precipitation=precipitation,
        )

    def _precipitation(self, rng: np.random.Generator, lat: float, season: float) -> PrecipitationRecord:
        baseline = POLAR_RAIN
        for upper, mm in RAIN_BASELINE:
            if abs(lat) < upper:
                baseline = mm
                break

        expected = baseline * (1 + 0.5 * season)
        daily = max(0.0, expected + float(rng.uniform(-1.0, 1.0)) * baseline)
        daily = round(daily, 1)

        return PrecipitationRecord(
            daily_precipitation=daily,
            weekly_total=round(max(daily, expected) * 7 * float(rng.uniform(0.8, 1.2)), 1),
            monthly_total=round(expected * 30 * float(rng.uniform(0.7, 1.3)), 1),
            precipitation_type=precipitation_type_label(daily),
            source="Simulated (GPM unavailable)",
            resolution="10km",
            provenance=Provenance.SYNTHETIC,
        )

    def _weather(
        self, rng: np.random.Generator, lat: float, now: datetime, season: float, rain_mm: float
    ) -> WeatherRecord:
        seasonal = 12 * season
        diurnal = 4 * math.sin(2 * math.pi * (now.hour - 9) / 24)
        cooling = 0.4 * abs(lat)
        temperature = 27 + seasonal + diurnal - cooling + float(rng.uniform(-3.0, 3.0))

        cloud = _clamp(15 + rain_mm * 6 + float(rng.uniform(0, 30)), 0, 100)
        humidity = _clamp(45 + 30 * min(rain_mm / 10, 1.0) + float(rng.uniform(-10, 10)), 10, 100)

        return WeatherRecord(
            temperature=round(temperature, 1),
            humidity=round(humidity),
            wind_speed=round(float(rng.uniform(5, 20)), 1),
            pressure=round(1013 + float(rng.uniform(-15, 15)) - rain_mm * 0.8, 1),
            cloud_cover=round(cloud),
            solar_radiation=solar_radiation(lat, cloud, now),
            source="Simulated (weather API unavailable)",
            provenance=Provenance.SYNTHETIC,
        )

    def _soil(
        self, rng: np.random.Generator, band: str, season: float, rain_mm: float, air_temp: float
    ) -> SoilRecord:
        base = SOIL_BASELINE[band]
        moisture = base["moisture"] + 0.1 * season + min(rain_mm, 20) * 0.01 + float(rng.uniform(-0.1, 0.1))
        moisture = _clamp(moisture, 0.1, 0.8)
        fertility = _clamp(base["fertility"] + 0.05 * season + float(rng.uniform(-0.05, 0.05)), 0.1, 1.0)

        return SoilRecord(
            surface_moisture=round(moisture, 3),
            root_zone_moisture=round(moisture * 0.8, 3),
            soil_temperature=round(air_temp * 0.8 + float(rng.uniform(-2, 2)), 1),
            organic_matter=round(base["organic_matter"] + float(rng.uniform(-1.5, 1.5)), 1),
            ph=round(float(rng.uniform(6.0, 8.0)), 2),
            salinity=round(float(rng.uniform(0, 3)), 1),
            fertility_index=round(fertility, 3),
            source="Simulated (SMAP unavailable)",
            resolution="36km",
            provenance=Provenance.SYNTHETIC,
        )

    def _vegetation(self, rng: np.random.Generator, band: str, season: float) -> VegetationRecord:
        baseline, amplitude = NDVI_BASELINE[band]
        ndvi = round(_clamp(baseline + amplitude * season + float(rng.uniform(-0.1, 0.1)), 0.1, 0.9), 3)

        return VegetationRecord(
            ndvi=ndvi,
            evi=round(ndvi * 0.8, 3),
            lai=round(ndvi * 6, 2),
            vegetation_health=vegetation_health_label(ndvi),
            source="Simulated (MODIS unavailable)",
            resolution="250m",
            provenance=Provenance.SYNTHETIC,
        )


synthetic_generator = SyntheticEnvironmentGenerator()
