"""FastAPI application."""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from pydantic import BaseModel

from src.core import (
    Action,
    ActionHandler,
    ActionRejected,
    EnvironmentAggregator,
    FarmSimulationEngine,
    SimulationClock,
    sustainability_report,
)
from src.farm import FarmStateStore, crop_catalog, location_catalog, tutorials, weather_events
from src.utils.config import settings
from src.utils.logger import setup_logging

store = FarmStateStore()
aggregator = EnvironmentAggregator()
engine = FarmSimulationEngine(store, aggregator)
actions = ActionHandler(store)
clock = SimulationClock(engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the game clock on startup, stop it on shutdown."""
    setup_logging()
    clock.start()
    yield
    clock.stop(timeout=5)


app = FastAPI(
    title="Farm Environment Simulator API",
    description="Farm simulation driven by live or synthetic environmental data",
    version=settings.app.version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.api.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


class ActionRequest(BaseModel):
    action: str
    plotId: Optional[int] = None
    crop: Optional[str] = None


class LivestockRequest(BaseModel):
    action: str
    type: str
    count: int = 1


class LocationRequest(BaseModel):
    location: str


def _apply(action: Action) -> dict:
    try:
        return actions.apply(action).to_dict()
    except ActionRejected as e:
        logger.info(f"Rejected {action.kind}: {e.message}")
        raise HTTPException(status_code=400, detail={"reason": e.reason.value, "detail": e.message})


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "clock": "running" if clock.running else "stopped",
        "sources": "enabled" if aggregator.sources else "synthetic-only",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/api/environment")
def get_environment(
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lon: Optional[float] = Query(None, ge=-180, le=180),
):
    """Aggregated environment for a coordinate (defaults to the farm's location)."""
    if lat is None or lon is None:
        location = engine.farm_location(store.snapshot())
        lat, lon = location.lat, location.lon
    return aggregator.fetch_environment(lat, lon).to_dict()


@app.get("/api/game-state")
async def get_game_state():
    return store.snapshot().to_dict()


@app.post("/api/action")
def perform_action(request: ActionRequest):
    return _apply(Action(kind=request.action, plot_id=request.plotId, crop=request.crop))


@app.post("/api/livestock")
def manage_livestock(request: LivestockRequest):
    kinds = {"feed": "feedLivestock", "water": "waterLivestock"}
    kind = kinds.get(request.action, request.action)
    return _apply(Action(kind=kind, livestock=request.type, count=request.count))


@app.post("/api/location")
def change_location(request: LocationRequest):
    try:
        return engine.change_location(request.location).to_dict()
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown location: {request.location}")


@app.get("/api/crops")
async def get_crops():
    return {crop_id: crop.to_dict() for crop_id, crop in crop_catalog().items()}


@app.get("/api/locations")
async def get_locations():
    return {location_id: loc.to_dict() for location_id, loc in location_catalog().items()}


@app.get("/api/weather-events")
async def get_weather_events():
    return [
        {
            "type": e.event_type,
            "severity": e.severity,
            "duration": e.duration_days,
            "impact": e.impact,
            "probability": e.probability,
        }
        for e in weather_events()
    ]


@app.get("/api/tutorials")
async def get_tutorials():
    return [
        {"step": t.step, "title": t.title, "description": t.description, "dataFocus": t.data_focus, "tip": t.tip}
        for t in tutorials()
    ]


@app.get("/api/sustainability")
async def get_sustainability():
    return sustainability_report(store.snapshot(), crop_catalog()).to_dict()
