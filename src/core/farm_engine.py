"""Farm simulation engine: game clock, growth state machine, environmental stress."""

import math
import threading
from typing import Mapping, Optional

from loguru import logger

from src.core.aggregator import EnvironmentAggregator
from src.data_sources.models import EnvironmentalSnapshot
from src.farm.catalog import crop_catalog, location_catalog
from src.farm.models import Crop, FarmLocation, FarmStateStore, GameState, Plot
from src.utils.config import settings
from src.utils.constants import (
    FERTILITY_STRESS_THRESHOLD,
    MOISTURE_DRIFT,
    MOISTURE_FLOOR,
    NDVI_STRESS_THRESHOLD,
    SEASONS,
    SOIL_HEALTH_GAIN,
    STAGE_THRESHOLDS,
    STRESS_FACTORS,
)


def season_for_day(day: int, days_per_season: Optional[int] = None) -> str:
    days_per_season = days_per_season or settings.simulation.days_per_season
    return SEASONS[(day // days_per_season) % len(SEASONS)]


def growth_progress(current_day: int, planted_day: int, growth_days: int) -> float:
    return min(max((current_day - planted_day) / growth_days, 0.0), 1.0)


def growth_stage_for(progress: float) -> str:
    for upper, stage in STAGE_THRESHOLDS:
        if progress < upper:
            return stage
    return "mature"


def expected_yield(crop: Crop, plot: Plot) -> int:
    return math.floor(crop.base_yield * plot.health * plot.fertility)


class FarmSimulationEngine:
    """Advance the game one day at a time against the live environment."""

    def __init__(
        self,
        store: FarmStateStore,
        aggregator: Optional[EnvironmentAggregator] = None,
        crops: Optional[Mapping[str, Crop]] = None,
        locations: Optional[Mapping[str, FarmLocation]] = None,
    ):
        self.store = store
        self.aggregator = aggregator or EnvironmentAggregator()
        self.crops = crops if crops is not None else crop_catalog()
        self.locations = locations if locations is not None else location_catalog()

    def farm_location(self, state: GameState) -> FarmLocation:
        return self.locations[state.location_id]

    def tick(self) -> None:
        # Remote fetch happens outside the state lock
        with self.store.transaction() as state:
            location = self.farm_location(state)
        snapshot = self.aggregator.fetch_environment(location.lat, location.lon)

        with self.store.transaction() as state:
            state.day += 1
            state.season = season_for_day(state.day)
            updated = self.update_plots(state, snapshot)
            state.touch()
            day, season = state.day, state.season

        logger.debug(f"Day {day} ({season}): {updated} plots updated")

    def update_plots(self, state: GameState, snapshot: EnvironmentalSnapshot) -> int:
        updated = 0
        for plot in state.plots:
            if plot.is_empty:
                continue
            try:
                self.update_plot(plot, state.day, snapshot)
                updated += 1
            except Exception:
                logger.exception(f"Plot {plot.plot_id} update failed on day {state.day}; skipping")
        return updated

    def update_plot(self, plot: Plot, day: int, snapshot: EnvironmentalSnapshot) -> None:
        crop = self.crops[plot.crop]

        plot.growth_progress = growth_progress(day, plot.planted_day, crop.growth_days)
        plot.growth_stage = growth_stage_for(plot.growth_progress)
        if plot.growth_stage == "mature":
            plot.yield_amount = expected_yield(crop, plot)

        self.apply_stress(plot, crop, snapshot)

        plot.soil_moisture = max(MOISTURE_FLOOR, plot.soil_moisture - MOISTURE_DRIFT)
        if crop.soil_health_impact > 0:
            plot.fertility = min(1.0, plot.fertility + crop.soil_health_impact * SOIL_HEALTH_GAIN)

    def apply_stress(self, plot: Plot, crop: Crop, snapshot: EnvironmentalSnapshot) -> None:
        """Multiplicative health penalties. Synthetic temperature and NDVI never stress a crop."""
        temperature = snapshot.weather.temperature
        if snapshot.is_genuine("weather") and not crop.temp_min <= temperature <= crop.temp_max:
            plot.health *= STRESS_FACTORS["temperature"]

        if plot.soil_moisture < crop.water_need:
            plot.health *= STRESS_FACTORS["water"]
            plot.needs_water = True

        if plot.fertility < FERTILITY_STRESS_THRESHOLD:
            plot.health *= STRESS_FACTORS["nutrient"]
            plot.needs_fertilizer = True

        if snapshot.is_genuine("vegetation") and snapshot.vegetation.ndvi < NDVI_STRESS_THRESHOLD:
            plot.health *= STRESS_FACTORS["vegetation"]

        plot.health = min(max(plot.health, 0.0), 1.0)

    def change_location(self, location_id: str) -> GameState:
        if location_id not in self.locations:
            raise KeyError(location_id)
        with self.store.transaction() as state:
            state.location_id = location_id
            state.touch()
        logger.info(f"Farm moved to {self.locations[location_id].region}")
        return self.store.snapshot()


class SimulationClock:
    """Background thread that ticks the engine at a fixed interval."""

    def __init__(self, engine: FarmSimulationEngine, interval: Optional[float] = None):
        self.engine = engine
        self.interval = interval if interval is not None else settings.simulation.tick_interval_seconds
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="farm-clock", daemon=True)
        self._thread.start()
        logger.info(f"Simulation clock started ({self.interval}s per day)")

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("Simulation clock stopped")

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            try:
                self.engine.tick()
            except Exception:
                logger.exception("Tick failed")
