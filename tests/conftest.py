"""Shared pytest fixtures for HoopForecast tests."""
import json
from typing import AsyncGenerator, Callable, List
from unittest.mock import AsyncMock

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from hoopforecast.models.forecast import (
    GameRecord,
    GameSeries,
    MarketLine,
    MarketLineLookup,
    MarketLineSource,
    NextFixture,
    PlayerIdentity,
)
from hoopforecast.services.forecast.orchestrator import ReconciliationOrchestrator

# Most recent game first
E2E_POINTS = [30, 22, 18, 25, 19, 28, 24, 20, 26, 21]


def make_series(points: List[int], opponents: List[str] = None) -> GameSeries:
    """Build a most-recent-first GameSeries from a list of point totals."""
    opponents = opponents or ["LAL"] * len(points)
    return GameSeries([
        GameRecord(
            sequence_number=index,
            points=pts,
            minutes=34.0,
            opponent_abbreviation=opponent,
            is_home=index % 2 == 0,
            result="W",
        )
        for index, (pts, opponent) in enumerate(zip(points, opponents), start=1)
    ])


def result_set(headers: List[str], rows: List[list], name: str = "ResultSet") -> dict:
    """Wrap rows in the stats.nba.com ``resultSets`` envelope."""
    return {"resultSets": [{"name": name, "headers": headers, "rowSet": rows}]}


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    """AsyncClient whose requests are answered by ``handler``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def json_response(payload, status_code: int = 200, headers: dict = None) -> httpx.Response:
    return httpx.Response(
        status_code,
        content=json.dumps(payload).encode(),
        headers={"content-type": "application/json", **(headers or {})},
    )


@pytest.fixture
def curry() -> PlayerIdentity:
    return PlayerIdentity(
        display_name="Stephen Curry",
        first_name="Stephen",
        last_name="Curry",
        team_abbreviation="GSW",
        provider_id=201939,
        position="G",
    )


@pytest.fixture
def e2e_series() -> GameSeries:
    return make_series(E2E_POINTS)


@pytest.fixture
def market_line_24() -> MarketLineLookup:
    return MarketLineLookup.found(MarketLine(
        line=24.0,
        over_price=-110,
        under_price=-110,
        source=MarketLineSource.THE_ODDS_API,
        bookmaker="FanDuel",
    ))


@pytest.fixture
def next_fixture() -> NextFixture:
    return NextFixture(opponent_abbreviation="NYK", date="Oct 21, 2026", time="7:30 PM ET", is_home=True)


@pytest.fixture
def stats_adapter(curry, e2e_series) -> AsyncMock:
    adapter = AsyncMock()
    adapter.fetch_game_log.return_value = (curry, e2e_series)
    adapter.resolve_player.return_value = curry
    return adapter


@pytest.fixture
def odds_adapter(market_line_24) -> AsyncMock:
    adapter = AsyncMock()
    adapter.fetch_market_line.return_value = market_line_24
    return adapter


@pytest.fixture
def schedule_adapter(next_fixture) -> AsyncMock:
    adapter = AsyncMock()
    adapter.fetch_next_fixture.return_value = next_fixture
    adapter.search_players.return_value = []
    return adapter


@pytest.fixture
def orchestrator(stats_adapter, schedule_adapter, odds_adapter) -> ReconciliationOrchestrator:
    return ReconciliationOrchestrator(
        stats_adapter=stats_adapter,
        schedule_adapter=schedule_adapter,
        odds_adapter=odds_adapter,
        min_games=3,
    )


@pytest.fixture
def mock_orchestrator() -> AsyncMock:
    """Orchestrator stand-in for endpoint tests."""
    return AsyncMock(spec=ReconciliationOrchestrator)


@pytest.fixture(scope="function")
async def async_client(mock_orchestrator) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for testing FastAPI endpoints."""
    from hoopforecast.api.dependencies import get_orchestrator
    from hoopforecast.main import app

    app.dependency_overrides[get_orchestrator] = lambda: mock_orchestrator

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()
