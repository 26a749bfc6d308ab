"""API adapters for normalizing data from upstream providers.

Each adapter turns one provider's payloads into the canonical models in
``hoopforecast.models.forecast``.

Available adapters:
- nba_stats_adapter: stats.nba.com identity and game logs
- espn_schedule_adapter: ESPN schedules and roster search
- odds_api_adapter: The Odds API player points lines

Base classes:
- BaseAPIAdapter: Lazy httpx client, timeouts and error mapping
"""
from hoopforecast.services.forecast.adapters.base_adapter import BaseAPIAdapter
from hoopforecast.services.forecast.adapters.espn_schedule_adapter import EspnScheduleAdapter
from hoopforecast.services.forecast.adapters.nba_stats_adapter import NbaStatsAdapter
from hoopforecast.services.forecast.adapters.odds_api_adapter import OddsApiAdapter

__all__ = [
    "BaseAPIAdapter",
    "EspnScheduleAdapter",
    "NbaStatsAdapter",
    "OddsApiAdapter",
]
