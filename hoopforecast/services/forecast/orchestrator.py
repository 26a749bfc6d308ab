"""Reconciliation orchestrator: prediction versus market line for one player.

This orchestrator coordinates:
- Identity and game log fetching (mandatory)
- Market line lookup (mandatory, concurrent)
- Next fixture lookup (best-effort, concurrent)
- Regression prediction
- Team enrichment and the OVER/UNDER/PUSH recommendation

compare() flow:

    stats adapter ──► history check ──┬─► market line branch ─┐
                                      ├─► next fixture branch ┼─► merge ──► ComparisonResult
                                      └─► predictor ──────────┘

If the stats step fails nothing else is started. The two branches write
disjoint fields of the result, so the merge is deterministic for fixed
upstream responses.
"""
import asyncio
import logging
from typing import List, Optional

from hoopforecast.core.config import settings
from hoopforecast.core.exceptions import (
    HoopForecastError,
    InsufficientHistory,
    MarketDataUnavailable,
    ParseError,
    UpstreamTransportError,
)
from hoopforecast.core.metrics import record_comparison
from hoopforecast.models.forecast import (
    ComparisonResult,
    GameSeries,
    MarketLine,
    MarketLineStatus,
    NextFixture,
    PlayerGameLog,
    PlayerMarketLine,
    PlayerPrediction,
    PlayerSearchResult,
    Recommendation,
    TeamInfo,
)
from hoopforecast.services.forecast.adapters.espn_schedule_adapter import EspnScheduleAdapter
from hoopforecast.services.forecast.adapters.nba_stats_adapter import NbaStatsAdapter
from hoopforecast.services.forecast.adapters.odds_api_adapter import OddsApiAdapter
from hoopforecast.services.forecast.matchers.team_resolver import is_placeholder, resolve_team
from hoopforecast.services.forecast.outcome import BranchOutcome, capture
from hoopforecast.services.forecast.predictor import RegressionPredictor

logger = logging.getLogger(__name__)

MARKET_BRANCH = "market_line"
FIXTURE_BRANCH = "next_fixture"


def derive_recommendation(predicted: Optional[float], line: Optional[float]) -> Recommendation:
    """
    Compare a prediction with a market line.

    Examples:
        >>> derive_recommendation(24.5, 24.0)
        <Recommendation.OVER: 'OVER'>
        >>> derive_recommendation(24.5, None)
        <Recommendation.NOT_AVAILABLE: 'N/A'>
    """
    if predicted is None or line is None:
        return Recommendation.NOT_AVAILABLE
    if predicted > line:
        return Recommendation.OVER
    if predicted < line:
        return Recommendation.UNDER
    return Recommendation.PUSH


class ReconciliationOrchestrator:
    """
    Merges the stats, odds and schedule providers into one comparison.

    The orchestrator holds adapters but no per-request state; one instance
    serves every request.
    """

    def __init__(
        self,
        stats_adapter: NbaStatsAdapter,
        schedule_adapter: EspnScheduleAdapter,
        odds_adapter: OddsApiAdapter,
        predictor: Optional[RegressionPredictor] = None,
        min_games: Optional[int] = None
    ):
        """
        Initialize the orchestrator.

        Args:
            stats_adapter: Identity and game log source
            schedule_adapter: Next fixture and roster search source
            odds_adapter: Market line source
            predictor: Regression predictor (built from min_games when omitted)
            min_games: Fewest games a prediction accepts (defaults to settings)
        """
        self.stats_adapter = stats_adapter
        self.schedule_adapter = schedule_adapter
        self.odds_adapter = odds_adapter
        self.min_games = min_games or settings.MIN_GAMES_FOR_PREDICTION
        self.predictor = predictor or RegressionPredictor(min_games=self.min_games)

    async def game_log(self, player_ref: str) -> PlayerGameLog:
        """Identity plus recent games, no history requirement."""
        identity, series = await self.stats_adapter.fetch_game_log(player_ref)
        return PlayerGameLog(player=identity, games=series)

    async def predict(self, player_ref: str) -> PlayerPrediction:
        """Identity plus next-game prediction."""
        identity, series = await self.stats_adapter.fetch_game_log(player_ref)
        self._require_history(series)
        return PlayerPrediction(player=identity, prediction=self.predictor.predict(series))

    async def market_line(self, player_ref: str) -> PlayerMarketLine:
        """
        Identity plus market line.

        Raises:
            MarketDataUnavailable: no line, or the provider failed
        """
        identity = await self.stats_adapter.resolve_player(player_ref)
        outcome = await capture(MARKET_BRANCH, self.odds_adapter.fetch_market_line(identity))
        return PlayerMarketLine(player=identity, market_line=self._market_line_or_raise(outcome))

    async def search_players(self, query: str) -> List[PlayerSearchResult]:
        return await self.schedule_adapter.search_players(query)

    async def compare(self, player_ref: str) -> ComparisonResult:
        """
        Build the full comparison for a player.

        Raises:
            PlayerNotFound: no player matches the reference
            InsufficientHistory: fewer than ``min_games`` games this season
            UpstreamTransportError: the stats provider failed
            MarketDataUnavailable: no usable market line
        """
        try:
            result = await self._compare(player_ref)
        except HoopForecastError as e:
            record_comparison(e.kind)
            logger.warning(f"Comparison for '{player_ref}' failed: {e.kind}: {e.message}")
            raise

        record_comparison(result.recommendation.value)
        return result

    async def _compare(self, player_ref: str) -> ComparisonResult:
        identity, series = await self.stats_adapter.fetch_game_log(player_ref)
        self._require_history(series)

        market_task = asyncio.create_task(
            capture(MARKET_BRANCH, self.odds_adapter.fetch_market_line(identity))
        )
        fixture_task = asyncio.create_task(
            capture(
                FIXTURE_BRANCH,
                self.schedule_adapter.fetch_next_fixture(identity.team_abbreviation, identity),
            )
        )

        try:
            prediction = self.predictor.predict(series)
        except Exception:
            market_task.cancel()
            fixture_task.cancel()
            raise

        market_outcome, fixture_outcome = await asyncio.gather(market_task, fixture_task)

        market_line = self._market_line_or_raise(market_outcome)
        next_fixture = self._fixture_or_none(fixture_outcome)

        recommendation = derive_recommendation(prediction.predicted_points, market_line.line)

        logger.info(
            f"{identity.display_name}: predicted {prediction.predicted_points} vs line "
            f"{market_line.line} → {recommendation.value}"
        )

        return ComparisonResult(
            player=identity,
            games=series,
            prediction=prediction,
            market_line=market_line,
            recommendation=recommendation,
            team=resolve_team(identity.team_abbreviation),
            opponent=self._opponent(series, next_fixture),
            next_fixture=next_fixture,
        )

    def _require_history(self, series: GameSeries):
        if len(series) < self.min_games:
            raise InsufficientHistory(len(series), self.min_games)

    def _market_line_or_raise(self, outcome: BranchOutcome) -> MarketLine:
        """Unwrap the mandatory market branch; any failure or absence is fatal."""
        if not outcome.ok:
            error = outcome.error
            if isinstance(error, ParseError):
                reason = MarketDataUnavailable.INVALID_PAYLOAD
            elif isinstance(error, UpstreamTransportError):
                reason = MarketDataUnavailable.UNREACHABLE
            else:
                logger.error(f"Unexpected error in {outcome.branch} branch", exc_info=error)
                reason = MarketDataUnavailable.UNREACHABLE
            raise MarketDataUnavailable(reason, str(error)) from error

        lookup = outcome.value
        if lookup.status != MarketLineStatus.FOUND or lookup.market_line is None or lookup.market_line.line is None:
            raise MarketDataUnavailable(
                lookup.reason or MarketDataUnavailable.NO_LINE,
                lookup.detail or "no line listed",
            )
        return lookup.market_line

    def _fixture_or_none(self, outcome: BranchOutcome) -> Optional[NextFixture]:
        """Unwrap the best-effort fixture branch; failures degrade to no fixture."""
        if not outcome.ok:
            logger.warning(f"Next fixture unavailable: {type(outcome.error).__name__}: {outcome.error}")
            return None
        return outcome.value

    def _opponent(self, series: GameSeries, next_fixture: Optional[NextFixture]) -> Optional[TeamInfo]:
        """Opponent of the next fixture, else of the most recent game."""
        if next_fixture is not None:
            return resolve_team(next_fixture.opponent_abbreviation)

        if len(series) and not is_placeholder(series[0].opponent_abbreviation):
            return resolve_team(series[0].opponent_abbreviation)

        return None

    async def close(self):
        """Close every adapter's HTTP client."""
        await asyncio.gather(
            self.stats_adapter.close(),
            self.schedule_adapter.close(),
            self.odds_adapter.close(),
        )
