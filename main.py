# 📦 main.py

import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from prometheus_client import start_http_server
from pydantic_settings import BaseSettings
import structlog
import uvicorn

from api.handlers import router as api_router
from engine.geography import load_geography
from engine.matcher import CONFIG_WEIGHTS, DEFAULT_TOP_N, WeightsConfigError, load_weight_profiles
from services.catalog_service import CatalogCache, CsvProviderSource
from utils.load_providers import CatalogUnavailableError

log = structlog.get_logger()

BASE_DIR = Path(__file__).resolve().parent

# ─────────────────────────────
# Settings
class Settings(BaseSettings):
    app_name: str = "CoachMatch Provider Matching"
    version: str = "1.0.0"
    host: str = "0.0.0.0"
    port: int = 8000
    prometheus_port: int = 0
    log_level: str = "INFO"
    catalog_path: Path = BASE_DIR / "data" / "providers.csv"
    weights_path: Optional[Path] = None
    weights_profile: str = "default"
    regions_path: Optional[Path] = None
    match_top_n: int = DEFAULT_TOP_N

settings = Settings()

# ─────────────────────────────
# Logging
def configure_logging(level: str) -> None:
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
    )

# ─────────────────────────────
# API Setup
def create_app(settings: Settings) -> FastAPI:
    configure_logging(settings.log_level)

    profiles = load_weight_profiles(settings.weights_path) if settings.weights_path else CONFIG_WEIGHTS
    if settings.weights_profile not in profiles:
        raise WeightsConfigError(f"Unknown weights profile: {settings.weights_profile!r}")
    geography = load_geography(settings.regions_path)

    app = FastAPI(title=settings.app_name, version=settings.version)
    app.state.settings = settings
    app.state.geography = geography
    app.state.weights = profiles[settings.weights_profile]
    app.state.top_n = settings.match_top_n
    app.state.catalog = CatalogCache(CsvProviderSource(settings.catalog_path, geography=geography))
    app.include_router(api_router)

    # ─────────────────────────────
    # Startup event
    @app.on_event("startup")
    async def startup_event():
        if settings.prometheus_port:
            start_http_server(settings.prometheus_port)
        try:
            app.state.catalog.providers()
        except CatalogUnavailableError as e:
            log.warning("Could not preload provider catalog", path=str(settings.catalog_path), error=str(e))

    return app

app = create_app(settings)

# ─────────────────────────────
# Main entrypoint
if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
    )
