"""Environmental data records and the aggregated snapshot."""

from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class Provenance(str, Enum):
    """Where a domain record came from."""
    GENUINE = "genuine"
    SYNTHETIC = "synthetic"


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lon: float


@dataclass(frozen=True)
class WeatherRecord:
    temperature: float
    humidity: float
    wind_speed: float
    pressure: float
    cloud_cover: float
    solar_radiation: float
    source: str
    provenance: Provenance = Provenance.GENUINE


@dataclass(frozen=True)
class SoilRecord:
    surface_moisture: float
    root_zone_moisture: float
    soil_temperature: float
    source: str
    resolution: str
    organic_matter: Optional[float] = None
    ph: Optional[float] = None
    salinity: Optional[float] = None
    fertility_index: Optional[float] = None
    provenance: Provenance = Provenance.GENUINE


@dataclass(frozen=True)
class VegetationRecord:
    ndvi: float
    evi: float
    lai: float
    vegetation_health: str
    source: str
    resolution: str
    provenance: Provenance = Provenance.GENUINE


@dataclass(frozen=True)
class PrecipitationRecord:
    daily_precipitation: float
    weekly_total: float
    monthly_total: float
    precipitation_type: str
    source: str
    resolution: str
    provenance: Provenance = Provenance.GENUINE


@dataclass(frozen=True)
class LocationDescriptor:
    name: str
    region: str
    country: Optional[str] = None
    resolved_by: str = "coordinate-heuristic"


@dataclass(frozen=True)
class EnvironmentalSnapshot:
    """Aggregated environment for one coordinate at one capture time."""
    weather: WeatherRecord
    soil: SoilRecord
    vegetation: VegetationRecord
    precipitation: PrecipitationRecord
    coordinates: Coordinates
    location: LocationDescriptor
    timestamp: datetime

    @property
    def provenance(self) -> dict:
        return {
            "weather": self.weather.provenance,
            "soil": self.soil.provenance,
            "vegetation": self.vegetation.provenance,
            "precipitation": self.precipitation.provenance,
        }

    def is_genuine(self, domain: str) -> bool:
        return self.provenance[domain] is Provenance.GENUINE

    def to_dict(self) -> dict:
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        data["provenance"] = {k: v.value for k, v in self.provenance.items()}
        for domain in ("weather", "soil", "vegetation", "precipitation"):
            data[domain]["provenance"] = data[domain]["provenance"].value
        return data
