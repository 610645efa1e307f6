"""Shared plumbing for environmental data sources."""

import math
from datetime import datetime
from typing import Optional, Protocol

import httpx

from src.utils.config import settings
from src.utils.constants import CLOUD_ATTENUATION, PRECIPITATION_TYPES, VEGETATION_HEALTH


class SourceUnavailable(Exception):
    """A remote source could not produce a usable record."""

    def __init__(self, domain: str, reason: str):
        super().__init__(f"{domain} source unavailable: {reason}")
        self.domain = domain
        self.reason = reason


class EnvironmentSource(Protocol):
    """Anything that can produce one domain record for a coordinate."""

    domain: str

    def fetch(self, lat: float, lon: float): ...


class HTTPSource:
    """Base for sources that make one bounded HTTP call per fetch."""

    domain = "unknown"

    def __init__(self, timeout: Optional[float] = None, transport: Optional[httpx.BaseTransport] = None):
        self.timeout = timeout if timeout is not None else settings.sources.timeout_seconds
        self.transport = transport
        self.headers = {"User-Agent": settings.sources.user_agent}

    def _get_json(self, url: str, params: Optional[dict] = None):
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport, headers=self.headers) as client:
                resp = client.get(url, params=params)
                resp.raise_for_status()
                return resp.json()
        except httpx.HTTPError as e:
            raise SourceUnavailable(self.domain, str(e)) from e
        except ValueError as e:
            raise SourceUnavailable(self.domain, f"bad payload: {e}") from e

    def fetch(self, lat: float, lon: float):
        try:
            return self._parse(self._get_json(*self._request(lat, lon)), lat, lon)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise SourceUnavailable(self.domain, f"malformed payload: {e!r}") from e

    def _request(self, lat: float, lon: float) -> tuple:
        raise NotImplementedError

    def _parse(self, data, lat: float, lon: float):
        raise NotImplementedError


def solar_radiation(lat: float, cloud_cover: float, when: datetime) -> float:
    """Clear-sky radiation from solar declination, attenuated by cloud cover (%)."""
    day_of_year = when.timetuple().tm_yday
    declination = 23.45 * math.sin(math.radians(360 * (284 + day_of_year) / 365))
    clear_sky = max(0.0, 1000 * math.cos(math.radians(lat - declination)))
    cloud = min(max(cloud_cover, 0.0), 100.0) / 100
    return round(clear_sky * (1.0 - cloud * CLOUD_ATTENUATION), 1)


def vegetation_health_label(ndvi: float) -> str:
    for upper, label in VEGETATION_HEALTH:
        if ndvi < upper:
            return label
    return "Excellent"


def precipitation_type_label(daily_mm: float) -> str:
    if daily_mm <= 0:
        return "No Precipitation"
    for upper, label in PRECIPITATION_TYPES:
        if daily_mm < upper:
            return label
    return "Heavy Rain"
