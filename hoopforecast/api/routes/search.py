"""Player search across current NBA rosters."""
from typing import List

from fastapi import APIRouter, Depends, Query

from hoopforecast.api.dependencies import get_orchestrator
from hoopforecast.models.forecast import PlayerSearchResult
from hoopforecast.services.forecast.orchestrator import ReconciliationOrchestrator

router = APIRouter(prefix="/search", tags=["search"])


@router.get("", response_model=List[PlayerSearchResult])
async def search_players(
    q: str = Query(..., min_length=2, description="Part of a player name"),
    orchestrator: ReconciliationOrchestrator = Depends(get_orchestrator)
):
    """
    Search for players by name.

    Prefix matches are listed first. Example: /api/search?q=curry
    """
    return await orchestrator.search_players(q.strip())
