"""Configuration loader for the farm simulator."""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


class CacheConfig(BaseModel):
    ttl_minutes: int = 30
    key_precision: int = 2


class SourcesConfig(BaseModel):
    enabled: bool = True
    timeout_seconds: float = 5.0
    forecast_url: str = "https://api.open-meteo.com/v1/forecast"
    modis_url: str = "https://modis.ornl.gov/rst/api/v1/MOD13Q1/subset"
    geocoding_enabled: bool = False
    geocoding_url: str = "https://nominatim.openstreetmap.org/reverse"
    user_agent: str = "farm-env-sim/0.1"


class SimulationConfig(BaseModel):
    tick_interval_seconds: float = 10.0
    plot_count: int = 16
    starting_budget: int = 10000
    starting_sustainability: int = 50
    days_per_season: int = 90
    default_location: str = "iowa"
    farm_type: str = "smallholder"


class APIConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8080
    reload: bool = False
    cors_origins: list[str] = ["http://localhost:3000"]


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"
    rotation: str = "10 MB"
    retention: str = "7 days"


class AppConfig(BaseModel):
    name: str = "farm_env_sim"
    version: str = "0.1.0"
    environment: str = "development"
    debug: bool = True


class Settings(BaseModel):
    app: AppConfig = AppConfig()
    logging: LoggingConfig = LoggingConfig()
    cache: CacheConfig = CacheConfig()
    sources: SourcesConfig = SourcesConfig()
    simulation: SimulationConfig = SimulationConfig()
    api: APIConfig = APIConfig()


def get_project_root() -> Path:
    return Path(__file__).parent.parent.parent


def load_yaml_config(env: str = "development") -> dict[str, Any]:
    config_path = get_project_root() / "config" / "environments" / f"{env}.yaml"
    if not config_path.exists():
        return {}
    with open(config_path, "r") as f:
        return yaml.safe_load(f) or {}


def _flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def get_settings(env: Optional[str] = None) -> Settings:
    env = env or os.getenv("APP_ENV", "development")
    yaml_config = load_yaml_config(env)

    # Override with env vars
    if os.getenv("FARM_SOURCES_ENABLED"):
        yaml_config.setdefault("sources", {})["enabled"] = _flag(os.getenv("FARM_SOURCES_ENABLED"))
    if os.getenv("FARM_SOURCE_TIMEOUT"):
        yaml_config.setdefault("sources", {})["timeout_seconds"] = float(os.getenv("FARM_SOURCE_TIMEOUT"))
    if os.getenv("FARM_GEOCODING_ENABLED"):
        yaml_config.setdefault("sources", {})["geocoding_enabled"] = _flag(os.getenv("FARM_GEOCODING_ENABLED"))
    if os.getenv("FARM_TICK_INTERVAL"):
        yaml_config.setdefault("simulation", {})["tick_interval_seconds"] = float(os.getenv("FARM_TICK_INTERVAL"))
    if os.getenv("FARM_LOCATION"):
        yaml_config.setdefault("simulation", {})["default_location"] = os.getenv("FARM_LOCATION")
    if os.getenv("LOG_LEVEL"):
        yaml_config.setdefault("logging", {})["level"] = os.getenv("LOG_LEVEL")

    return Settings(**yaml_config) if yaml_config else Settings()


settings = get_settings()
