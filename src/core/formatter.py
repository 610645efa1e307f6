"""Plain-text and JSON renderings for the CLI."""

import json

from src.core.sustainability import SustainabilityReport
from src.data_sources.models import EnvironmentalSnapshot
from src.farm.models import GameState


class SnapshotFormatter:
    """Markdown summary of an environmental snapshot."""

    def format(self, snapshot: EnvironmentalSnapshot) -> str:
        w, s, v, p = snapshot.weather, snapshot.soil, snapshot.vegetation, snapshot.precipitation
        tag = {d: prov.value for d, prov in snapshot.provenance.items()}
        lines = [
            f"**Environment: {snapshot.location.name}** ({snapshot.location.region})",
            f"**Coordinates:** {snapshot.coordinates.lat:.4f}, {snapshot.coordinates.lon:.4f}"
            f" | **Captured:** {snapshot.timestamp.strftime('%Y-%m-%d %H:%M')} UTC",
            "",
            f"- Weather [{tag['weather']}]: {w.temperature:.1f}°C, {w.humidity:.0f}% RH,"
            f" cloud {w.cloud_cover:.0f}%, solar {w.solar_radiation:.0f} W/m²",
            f"- Soil [{tag['soil']}]: surface {s.surface_moisture:.2f}, root zone {s.root_zone_moisture:.2f},"
            f" {s.soil_temperature:.1f}°C",
            f"- Vegetation [{tag['vegetation']}]: NDVI {v.ndvi:.3f} ({v.vegetation_health})",
            f"- Precipitation [{tag['precipitation']}]: {p.daily_precipitation:.1f}mm today"
            f" ({p.precipitation_type}), {p.weekly_total:.1f}mm this week",
        ]
        return "\n".join(lines)


class FarmFormatter:
    """Markdown summary of the farm and its sustainability indicators."""

    def format(self, state: GameState, report: SustainabilityReport) -> str:
        planted = [p for p in state.plots if not p.is_empty]
        lines = [
            f"**Day {state.day}** ({state.season}) | **Budget:** {state.budget} | **Score:** {state.score}",
            f"**Sustainability:** {state.sustainability_score} | **Water used:** {state.water_usage:.0f}"
            f" | **Carbon:** {state.carbon_footprint:.1f}",
            "",
        ]

        if planted:
            lines.append("**PLOTS:**")
            for p in planted:
                flags = [f for f, on in (("water", p.needs_water), ("fertilizer", p.needs_fertilizer)) if on]
                lines.append(
                    f"{p.plot_id}. {p.crop} [{p.growth_stage}] {p.growth_progress:.0%}"
                    f" | health {p.health:.2f} | yield {p.yield_amount}"
                    + (f" | needs {', '.join(flags)}" if flags else "")
                )
            lines.append("")
        else:
            lines.append("**No crops planted.**")
            lines.append("")

        lines.extend([
            "---",
            f"Carbon sequestration {report.carbon_sequestration:.2f} | water efficiency"
            f" {report.water_efficiency:.2f} | soil health {report.soil_health:.2f}"
            f" | biodiversity {report.biodiversity:.2f}",
        ])
        lines.extend(f"- {tip}" for tip in report.recommendations)
        return "\n".join(lines)


def format_snapshot(snapshot: EnvironmentalSnapshot, as_json: bool = False) -> str:
    if as_json:
        return json.dumps(snapshot.to_dict(), indent=2, default=str)
    return SnapshotFormatter().format(snapshot)


def format_farm(state: GameState, report: SustainabilityReport, as_json: bool = False) -> str:
    if as_json:
        return json.dumps({"state": state.to_dict(), "sustainability": report.to_dict()}, indent=2, default=str)
    return FarmFormatter().format(state, report)
