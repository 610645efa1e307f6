"""Farm data models and the state store shared by the engine and actions."""

import copy
import random
import threading
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Generator, Optional

from src.utils.config import settings
from src.utils.constants import SEASONS


@dataclass(frozen=True)
class Crop:
    """Static crop parameters."""
    crop_id: str
    name: str
    growth_days: int
    water_need: float
    temp_min: float
    temp_max: float
    cost: int
    base_yield: int
    carbon_sequestration: float
    soil_health_impact: float
    pest_resistance: float
    emoji: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class FarmLocation:
    location_id: str
    region: str
    lat: float
    lon: float
    climate: str
    soil_type: str
    elevation_m: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class WeatherEvent:
    event_type: str
    severity: float
    duration_days: int
    impact: str
    probability: float


@dataclass(frozen=True)
class Tutorial:
    step: int
    title: str
    description: str
    data_focus: str
    tip: str


@dataclass
class Plot:
    plot_id: int
    soil_moisture: float
    fertility: float
    health: float = 1.0
    crop: Optional[str] = None
    planted_day: int = 0
    growth_stage: str = "empty"
    growth_progress: float = 0.0
    needs_water: bool = False
    needs_fertilizer: bool = False
    yield_amount: int = 0

    @property
    def is_empty(self) -> bool:
        return self.crop is None

    def reset(self) -> None:
        """Return to the empty variant after harvest. Soil keeps its state."""
        self.crop = None
        self.planted_day = 0
        self.growth_stage = "empty"
        self.growth_progress = 0.0
        self.health = 1.0
        self.yield_amount = 0

    def to_dict(self) -> dict:
        return {
            "id": self.plot_id,
            "crop": self.crop or "",
            "plantedDay": self.planted_day,
            "growthStage": self.growth_stage,
            "growthProgress": self.growth_progress,
            "soilMoisture": self.soil_moisture,
            "fertility": self.fertility,
            "health": self.health,
            "needsWater": self.needs_water,
            "needsFertilizer": self.needs_fertilizer,
            "yield": self.yield_amount,
        }


@dataclass
class Livestock:
    livestock_id: int
    kind: str
    count: int
    health: float
    productivity: float
    feed_need: float
    water_need: float

    def to_dict(self) -> dict:
        return {
            "id": self.livestock_id,
            "type": self.kind,
            "count": self.count,
            "health": self.health,
            "productivity": self.productivity,
            "feedNeed": self.feed_need,
            "waterNeed": self.water_need,
        }


@dataclass
class GameState:
    plots: list
    livestock: list
    day: int = 1
    season: str = SEASONS[0]
    budget: int = 10000
    score: int = 0
    sustainability_score: int = 50
    water_usage: float = 0.0
    carbon_footprint: float = 0.0
    farm_type: str = "smallholder"
    location_id: str = "iowa"
    last_updated: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def plot(self, plot_id: int) -> Optional[Plot]:
        if 0 <= plot_id < len(self.plots):
            return self.plots[plot_id]
        return None

    def herd(self, kind: str) -> Optional[Livestock]:
        return next((l for l in self.livestock if l.kind == kind), None)

    def touch(self) -> None:
        self.last_updated = datetime.now(timezone.utc)

    def to_dict(self) -> dict:
        return {
            "season": self.season,
            "day": self.day,
            "budget": self.budget,
            "score": self.score,
            "plots": [p.to_dict() for p in self.plots],
            "livestock": [l.to_dict() for l in self.livestock],
            "farmType": self.farm_type,
            "location": self.location_id,
            "sustainabilityScore": self.sustainability_score,
            "waterUsage": self.water_usage,
            "carbonFootprint": self.carbon_footprint,
            "lastUpdated": self.last_updated.isoformat(),
        }


def initialize_plots(count: int, rng: Optional[random.Random] = None) -> list:
    rng = rng or random.Random()
    return [
        Plot(
            plot_id=i,
            soil_moisture=0.3 + rng.random() * 0.5,
            fertility=0.7 + rng.random() * 0.3,
        )
        for i in range(count)
    ]


def initialize_livestock() -> list:
    return [
        Livestock(0, "cattle", 5, 0.8, 0.7, 25, 50),
        Livestock(1, "chickens", 20, 0.9, 0.8, 5, 2),
    ]


def new_game(rng: Optional[random.Random] = None) -> GameState:
    sim = settings.simulation
    return GameState(
        plots=initialize_plots(sim.plot_count, rng),
        livestock=initialize_livestock(),
        budget=sim.starting_budget,
        sustainability_score=sim.starting_sustainability,
        farm_type=sim.farm_type,
        location_id=sim.default_location,
    )


class FarmStateStore:
    """Owns one GameState. Every read-check-write runs inside transaction()."""

    def __init__(self, state: Optional[GameState] = None):
        self._state = state or new_game()
        self._lock = threading.Lock()

    @contextmanager
    def transaction(self) -> Generator[GameState, None, None]:
        with self._lock:
            yield self._state

    def snapshot(self) -> GameState:
        with self._lock:
            return copy.deepcopy(self._state)
