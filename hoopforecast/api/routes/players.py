"""
Player forecast routes.

``player_ref`` is either an NBA.com person id ("201939") or a player name
("Stephen Curry"). Engine errors are turned into ``{"error", "detail"}``
responses by the handler registered in ``hoopforecast.main``.
"""
from fastapi import APIRouter, Depends

from hoopforecast.api.dependencies import get_orchestrator
from hoopforecast.models.forecast import (
    ComparisonResult,
    PlayerGameLog,
    PlayerMarketLine,
    PlayerPrediction,
)
from hoopforecast.services.forecast.orchestrator import ReconciliationOrchestrator

router = APIRouter(prefix="/player", tags=["player"])


@router.get("/{player_ref}/stats", response_model=PlayerGameLog)
async def get_player_stats(
    player_ref: str,
    orchestrator: ReconciliationOrchestrator = Depends(get_orchestrator)
):
    """
    Get a player's recent regular-season games, most recent first.

    Example: /api/player/Stephen%20Curry/stats
    """
    return await orchestrator.game_log(player_ref)


@router.get("/{player_ref}/prediction", response_model=PlayerPrediction)
async def get_player_prediction(
    player_ref: str,
    orchestrator: ReconciliationOrchestrator = Depends(get_orchestrator)
):
    """Predict next-game points from the recent scoring trend."""
    return await orchestrator.predict(player_ref)


@router.get("/{player_ref}/odds", response_model=PlayerMarketLine)
async def get_player_odds(
    player_ref: str,
    orchestrator: ReconciliationOrchestrator = Depends(get_orchestrator)
):
    """Get the player's points prop line."""
    return await orchestrator.market_line(player_ref)


@router.get("/{player_ref}/compare", response_model=ComparisonResult)
async def compare_player(
    player_ref: str,
    orchestrator: ReconciliationOrchestrator = Depends(get_orchestrator)
):
    """
    Compare the prediction with the market line.

    Returns the game log, prediction, market line, OVER/UNDER/PUSH
    recommendation, team and opponent enrichment, and the next fixture
    when the schedule provider has one.
    """
    return await orchestrator.compare(player_ref)
