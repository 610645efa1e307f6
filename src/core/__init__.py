"""Core module."""
from src.core.aggregator import EnvironmentAggregator, coarse_location
from src.core.farm_engine import FarmSimulationEngine, SimulationClock, growth_stage_for, season_for_day
from src.core.actions import Action, ActionHandler, ActionRejected, RejectionReason
from src.core.sustainability import SustainabilityReport, sustainability_report
from src.core.formatter import format_farm, format_snapshot
