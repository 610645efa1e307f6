"""Player actions. Each one validates first, then mutates; rejections leave state untouched."""

import copy
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Mapping, Optional

from loguru import logger

from src.core.farm_engine import expected_yield
from src.farm.catalog import crop_catalog
from src.farm.models import Crop, FarmStateStore, GameState, Livestock, Plot
from src.utils.constants import (
    ACTION_COSTS,
    DRIP_IRRIGATION,
    FERTILIZATION,
    HARVEST_PRICE_PER_UNIT,
    IRRIGATION,
    LEGUME_ROTATION,
    LIVESTOCK_CARE,
)


class RejectionReason(str, Enum):
    UNKNOWN_ACTION = "unknown_action"
    UNKNOWN_PLOT = "unknown_plot"
    UNKNOWN_CROP = "unknown_crop"
    UNKNOWN_LIVESTOCK = "unknown_livestock"
    PLOT_OCCUPIED = "plot_occupied"
    PLOT_NOT_EMPTY = "plot_not_empty"
    NOT_MATURE = "not_mature"
    INSUFFICIENT_BUDGET = "insufficient_budget"
    INVALID_COUNT = "invalid_count"


class ActionRejected(Exception):
    def __init__(self, reason: RejectionReason, message: str):
        super().__init__(message)
        self.reason = reason
        self.message = message


@dataclass(frozen=True)
class Action:
    kind: str
    plot_id: Optional[int] = None
    crop: Optional[str] = None
    livestock: Optional[str] = None
    count: int = 0


def _require_budget(state: GameState, cost: int) -> None:
    if state.budget < cost:
        raise ActionRejected(
            RejectionReason.INSUFFICIENT_BUDGET,
            f"Insufficient budget: need {cost}, have {state.budget}",
        )


class ActionHandler:
    """Single entry point for every player-initiated mutation."""

    def __init__(self, store: FarmStateStore, crops: Optional[Mapping[str, Crop]] = None):
        self.store = store
        self.crops = crops if crops is not None else crop_catalog()
        self._handlers: dict[str, Callable[[GameState, Action], None]] = {
            "plant": self._plant,
            "irrigate": self._irrigate,
            "fertilize": self._fertilize,
            "harvest": self._harvest,
            "rotateToLegume": self._rotate_to_legume,
            "installDripIrrigation": self._install_drip_irrigation,
            "feedLivestock": self._feed_livestock,
            "waterLivestock": self._water_livestock,
        }

    @property
    def kinds(self) -> list:
        return list(self._handlers)

    def apply(self, action: Action) -> GameState:
        handler = self._handlers.get(action.kind)
        if handler is None:
            raise ActionRejected(RejectionReason.UNKNOWN_ACTION, f"Unknown action: {action.kind}")

        with self.store.transaction() as state:
            handler(state, action)
            state.touch()
            result = copy.deepcopy(state)

        logger.info(f"Action {action.kind} applied (day {result.day}, budget {result.budget})")
        return result

    def _plot(self, state: GameState, action: Action) -> Plot:
        plot = state.plot(action.plot_id) if action.plot_id is not None else None
        if plot is None:
            raise ActionRejected(RejectionReason.UNKNOWN_PLOT, f"Invalid plot ID: {action.plot_id}")
        return plot

    def _herd(self, state: GameState, action: Action) -> Livestock:
        herd = state.herd(action.livestock) if action.livestock else None
        if herd is None:
            raise ActionRejected(RejectionReason.UNKNOWN_LIVESTOCK, f"No livestock of type {action.livestock!r}")
        if action.count < 1:
            raise ActionRejected(RejectionReason.INVALID_COUNT, f"Count must be positive, got {action.count}")
        return herd

    def _plant(self, state: GameState, action: Action) -> None:
        plot = self._plot(state, action)
        if not plot.is_empty:
            raise ActionRejected(RejectionReason.PLOT_OCCUPIED, "Plot already has a crop")
        crop = self.crops.get(action.crop) if action.crop else None
        if crop is None:
            raise ActionRejected(RejectionReason.UNKNOWN_CROP, f"Unknown crop: {action.crop!r}")
        _require_budget(state, crop.cost)

        plot.crop = crop.crop_id
        plot.planted_day = state.day
        state.budget -= crop.cost

    def _irrigate(self, state: GameState, action: Action) -> None:
        plot = self._plot(state, action)
        cost = ACTION_COSTS["irrigate"]
        _require_budget(state, cost)

        plot.soil_moisture = min(1.0, plot.soil_moisture + IRRIGATION["moisture_gain"])
        plot.needs_water = False
        state.budget -= cost
        state.score += IRRIGATION["score"]
        # TODO: apply the drip-irrigation water discount once its rate is decided
        state.water_usage += IRRIGATION["water_usage"]

    def _fertilize(self, state: GameState, action: Action) -> None:
        plot = self._plot(state, action)
        cost = ACTION_COSTS["fertilize"]
        _require_budget(state, cost)

        plot.fertility = min(1.0, plot.fertility + FERTILIZATION["fertility_gain"])
        plot.needs_fertilizer = False
        state.budget -= cost
        state.score += FERTILIZATION["score"]
        state.carbon_footprint += FERTILIZATION["carbon_footprint"]

    def _harvest(self, state: GameState, action: Action) -> None:
        plot = self._plot(state, action)
        if plot.growth_stage != "mature":
            raise ActionRejected(RejectionReason.NOT_MATURE, "Crop not ready for harvest")
        crop = self.crops[plot.crop]

        harvested = expected_yield(crop, plot)
        state.budget += harvested * HARVEST_PRICE_PER_UNIT
        state.score += harvested
        plot.reset()
        logger.info(f"Harvested {harvested} {crop.name} from plot {plot.plot_id}")

    def _rotate_to_legume(self, state: GameState, action: Action) -> None:
        plot = self._plot(state, action)
        if not plot.is_empty:
            raise ActionRejected(RejectionReason.PLOT_NOT_EMPTY, "Plot must be empty for rotation")

        plot.fertility = min(1.0, plot.fertility + LEGUME_ROTATION["fertility_gain"])
        state.sustainability_score += LEGUME_ROTATION["sustainability"]

    def _install_drip_irrigation(self, state: GameState, action: Action) -> None:
        cost = ACTION_COSTS["installDripIrrigation"]
        _require_budget(state, cost)

        state.budget -= cost
        state.sustainability_score += DRIP_IRRIGATION["sustainability"]

    def _feed_livestock(self, state: GameState, action: Action) -> None:
        herd = self._herd(state, action)
        cost = ACTION_COSTS["feedLivestock"] * action.count
        _require_budget(state, cost)

        herd.health = min(1.0, herd.health + LIVESTOCK_CARE["feed_health_gain"])
        state.budget -= cost

    def _water_livestock(self, state: GameState, action: Action) -> None:
        herd = self._herd(state, action)
        cost = ACTION_COSTS["waterLivestock"] * action.count
        _require_budget(state, cost)

        herd.productivity = min(1.0, herd.productivity + LIVESTOCK_CARE["water_productivity_gain"])
        state.budget -= cost
