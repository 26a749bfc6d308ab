"""
Main FastAPI application for the HoopForecast API.
"""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator

from hoopforecast.api.routes import players, search
from hoopforecast.core.config import settings
from hoopforecast.core.exceptions import HoopForecastError
from hoopforecast.core.logging import configure_logging, get_logger
from hoopforecast.core.middleware import CorrelationIdMiddleware
from hoopforecast.services.forecast.adapters.espn_schedule_adapter import EspnScheduleAdapter
from hoopforecast.services.forecast.adapters.nba_stats_adapter import NbaStatsAdapter
from hoopforecast.services.forecast.adapters.odds_api_adapter import OddsApiAdapter
from hoopforecast.services.forecast.orchestrator import ReconciliationOrchestrator

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

configure_logging(level=settings.LOG_LEVEL, json_output=settings.LOG_JSON)

logger = get_logger(__name__)


def build_orchestrator() -> ReconciliationOrchestrator:
    """Wire the adapters from settings."""
    return ReconciliationOrchestrator(
        stats_adapter=NbaStatsAdapter(),
        schedule_adapter=EspnScheduleAdapter(),
        odds_adapter=OddsApiAdapter(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan events."""
    # Startup
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION} ({settings.ENVIRONMENT})")

    if not settings.has_odds_api_key():
        if settings.ODDS_FILLER_LINE is not None:
            logger.warning(f"THE_ODDS_API_KEY not set, market lines use filler {settings.ODDS_FILLER_LINE}")
        else:
            logger.warning("THE_ODDS_API_KEY not set, comparisons will report no market line")

    app.state.orchestrator = build_orchestrator()
    logger.info("Application started")

    yield

    # Shutdown
    await app.state.orchestrator.close()
    logger.info("Shutting down application")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="NBA player points predictions compared against sportsbook lines",
    lifespan=lifespan
)

# Add correlation ID middleware (must be added before CORS for proper header handling)
app.add_middleware(CorrelationIdMiddleware)

# Initialize Prometheus metrics BEFORE including routes
instrumentator = Instrumentator()
instrumentator.instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.exception_handler(HoopForecastError)
async def hoopforecast_error_handler(request: Request, exc: HoopForecastError) -> JSONResponse:
    """Map engine errors to a single ``{"error", "detail"}`` body."""
    if exc.status_code >= 500:
        logger.error(f"{exc.kind} on {request.url.path}: {exc.message}")
    else:
        logger.info(f"{exc.kind} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(players.router, prefix="/api")
app.include_router(search.router, prefix="/api")


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "message": "HoopForecast API is running"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("hoopforecast.main:app", host=settings.HOST, port=settings.PORT)
