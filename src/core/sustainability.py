"""Derived sustainability indicators for a farm."""

from dataclasses import dataclass, field
from typing import Mapping

from src.farm.models import Crop, GameState
from src.utils.constants import BIODIVERSITY_CROP_TYPES


@dataclass
class SustainabilityReport:
    carbon_sequestration: float
    water_efficiency: float
    soil_health: float
    biodiversity: float
    recommendations: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "carbonSequestration": self.carbon_sequestration,
            "waterEfficiency": self.water_efficiency,
            "soilHealth": self.soil_health,
            "biodiversity": self.biodiversity,
            "recommendations": self.recommendations,
        }


def carbon_sequestration(state: GameState, crops: Mapping[str, Crop]) -> float:
    return sum(crops[p.crop].carbon_sequestration * p.health for p in state.plots if not p.is_empty)


def water_efficiency(state: GameState) -> float:
    if state.water_usage == 0:
        return 1.0
    return state.score / state.water_usage


def soil_health(state: GameState) -> float:
    if not state.plots:
        return 0.0
    return sum(p.fertility for p in state.plots) / len(state.plots)


def biodiversity(state: GameState) -> float:
    planted = {p.crop for p in state.plots if not p.is_empty}
    return min(len(planted) / BIODIVERSITY_CROP_TYPES, 1.0)


def recommendations(carbon: float, water: float, diversity: float) -> list:
    tips = []
    if carbon < 2.0:
        tips.append("Plant cover crops to increase carbon sequestration")
    if water < 0.5:
        tips.append("Implement drip irrigation to improve water efficiency")
    if diversity < 0.6:
        tips.append("Diversify crops to improve biodiversity and reduce pest pressure")
    if not tips:
        tips.append("Great job! Your farm is operating sustainably")
    return tips


def sustainability_report(state: GameState, crops: Mapping[str, Crop]) -> SustainabilityReport:
    carbon = carbon_sequestration(state, crops)
    water = water_efficiency(state)
    diversity = biodiversity(state)
    return SustainabilityReport(
        carbon_sequestration=round(carbon, 3),
        water_efficiency=round(water, 3),
        soil_health=round(soil_health(state), 3),
        biodiversity=round(diversity, 3),
        recommendations=recommendations(carbon, water, diversity),
    )
