"""Reverse geocoding via Nominatim (OpenStreetMap)."""

from typing import Optional

from src.data_sources.base import HTTPSource
from src.data_sources.models import LocationDescriptor
from src.utils.config import settings


class GeocodeClient(HTTPSource):
    """Resolve a coordinate to a place name."""

    domain = "location"

    def __init__(self, base_url: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.base_url = base_url or settings.sources.geocoding_url

    def reverse(self, lat: float, lon: float) -> LocationDescriptor:
        return self.fetch(lat, lon)

    def _request(self, lat: float, lon: float) -> tuple:
        params = {"format": "jsonv2", "lat": lat, "lon": lon, "zoom": 10}
        return self.base_url, params

    def _parse(self, data: dict, lat: float, lon: float) -> LocationDescriptor:
        if "error" in data:
            raise ValueError(data["error"])

        address = data.get("address", {})
        name = (
            address.get("city")
            or address.get("town")
            or address.get("village")
            or address.get("county")
            or data["display_name"].split(",")[0]
        )
        region = address.get("state") or address.get("region") or address.get("country", "Unknown")
        return LocationDescriptor(
            name=name,
            region=region,
            country=address.get("country"),
            resolved_by="reverse-geocoding",
        )
