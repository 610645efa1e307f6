"""Environment aggregation: cache, concurrent fetch-or-synthesize, provenance."""

import math
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from datetime import datetime, timedelta, timezone
from typing import Mapping, Optional

from loguru import logger

from src.data_sources.base import EnvironmentSource, SourceUnavailable
from src.data_sources.cache import SnapshotCache, cache_key
from src.data_sources.geocode_client import GeocodeClient
from src.data_sources.models import Coordinates, EnvironmentalSnapshot, LocationDescriptor
from src.data_sources.precipitation_client import precipitation_client
from src.data_sources.soil_client import soil_client
from src.data_sources.synthetic import SyntheticBundle, SyntheticEnvironmentGenerator, synthetic_generator
from src.data_sources.vegetation_client import vegetation_client
from src.data_sources.weather_client import weather_client
from src.farm.catalog import location_catalog
from src.utils.config import settings
from src.utils.constants import DOMAINS, LATITUDE_REGIONS

NEAREST_LOCATION_DEGREES = 2.0

# Grace period on top of the per-call timeout before a task is abandoned
JOIN_GRACE_SECONDS = 1.0


def default_sources() -> dict:
    if not settings.sources.enabled:
        return {}
    return {
        "weather": weather_client,
        "soil": soil_client,
        "vegetation": vegetation_client,
        "precipitation": precipitation_client,
    }


def coarse_location(lat: float, lon: float) -> LocationDescriptor:
    """Coordinate-bucket fallback when no reverse lookup is available."""
    nearest, distance = None, math.inf
    for loc in location_catalog().values():
        d = math.hypot(loc.lat - lat, loc.lon - lon)
        if d < distance:
            nearest, distance = loc, d
    if nearest is not None and distance <= NEAREST_LOCATION_DEGREES:
        return LocationDescriptor(name=nearest.region, region=nearest.climate)

    band = "Antarctic"
    for lower, label in LATITUDE_REGIONS:
        if lat >= lower:
            band = label
            break
    hemisphere = "Western" if lon < 0 else "Eastern"
    return LocationDescriptor(
        name=f"{abs(lat):.1f}°{'N' if lat >= 0 else 'S'}, {abs(lon):.1f}°{'W' if lon < 0 else 'E'}",
        region=f"{band}, {hemisphere} Hemisphere",
    )


class EnvironmentAggregator:
    """Build environmental snapshots that always have all four domains."""

    def __init__(
        self,
        sources: Optional[Mapping[str, EnvironmentSource]] = None,
        synthetic: Optional[SyntheticEnvironmentGenerator] = None,
        geocoder: Optional[GeocodeClient] = None,
        cache: Optional[SnapshotCache] = None,
        max_age: Optional[timedelta] = None,
        timeout: Optional[float] = None,
    ):
        self.sources = dict(default_sources() if sources is None else sources)
        self.synthetic = synthetic or synthetic_generator
        if geocoder is None and settings.sources.geocoding_enabled:
            geocoder = GeocodeClient()
        self.geocoder = geocoder
        self.cache = cache or SnapshotCache()
        self.max_age = max_age or timedelta(minutes=settings.cache.ttl_minutes)
        self.timeout = timeout if timeout is not None else settings.sources.timeout_seconds

    def fetch_environment(self, lat: float, lon: float) -> EnvironmentalSnapshot:
        key = cache_key(lat, lon, settings.cache.key_precision)
        cached, found = self.cache.get(key, self.max_age)
        if found:
            logger.debug(f"Cache hit for {key}")
            return cached

        now = datetime.now(timezone.utc)
        fallback = self.synthetic.generate(lat, lon, now)

        # One worker per task, so each timeout runs from when its task starts
        pool = ThreadPoolExecutor(max_workers=len(DOMAINS) + 1, thread_name_prefix="env-fetch")
        try:
            tasks = {domain: pool.submit(self._fetch_domain, domain, lat, lon) for domain in DOMAINS}
            location_task = pool.submit(self.resolve_location, lat, lon)

            deadline = time.monotonic() + self.timeout + JOIN_GRACE_SECONDS
            records = {domain: self._join(domain, task, fallback, deadline) for domain, task in tasks.items()}
            location = self._join_location(location_task, lat, lon, deadline)
        finally:
            pool.shutdown(wait=False, cancel_futures=True)

        snapshot = EnvironmentalSnapshot(
            weather=records["weather"],
            soil=records["soil"],
            vegetation=records["vegetation"],
            precipitation=records["precipitation"],
            coordinates=Coordinates(lat=lat, lon=lon),
            location=location,
            timestamp=datetime.now(timezone.utc),
        )
        self.cache.set(key, snapshot)

        synthetic = [d for d in DOMAINS if not snapshot.is_genuine(d)]
        logger.info(
            f"Environment for {key} ({location.name}): "
            f"{len(DOMAINS) - len(synthetic)}/{len(DOMAINS)} genuine"
            + (f", synthetic: {', '.join(synthetic)}" if synthetic else "")
        )
        return snapshot

    def _fetch_domain(self, domain: str, lat: float, lon: float):
        source = self.sources.get(domain)
        if source is None:
            return None
        try:
            return source.fetch(lat, lon)
        except SourceUnavailable as e:
            logger.warning(f"{e}; using synthetic {domain}")
        except Exception as e:
            logger.warning(f"{domain} source failed unexpectedly: {e!r}; using synthetic {domain}")
        return None

    def _join(self, domain: str, task: Future, fallback: SyntheticBundle, deadline: float):
        try:
            record = task.result(timeout=max(0.0, deadline - time.monotonic()))
        except FutureTimeout:
            logger.warning(f"{domain} fetch exceeded {self.timeout}s; using synthetic {domain}")
            task.cancel()
            record = None
        return record if record is not None else fallback.record(domain)

    def _join_location(self, task: Future, lat: float, lon: float, deadline: float) -> LocationDescriptor:
        try:
            return task.result(timeout=max(0.0, deadline - time.monotonic()))
        except FutureTimeout:
            task.cancel()
            return coarse_location(lat, lon)

    def resolve_location(self, lat: float, lon: float) -> LocationDescriptor:
        if self.geocoder is not None:
            try:
                return self.geocoder.reverse(lat, lon)
            except SourceUnavailable as e:
                logger.warning(f"{e}; using coordinate heuristic")
            except Exception as e:
                logger.warning(f"Reverse geocoding failed unexpectedly: {e!r}")
        return coarse_location(lat, lon)
