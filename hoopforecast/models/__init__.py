"""Canonical data models."""
from hoopforecast.models.forecast import (
    ComparisonResult,
    GameRecord,
    GameSeries,
    MarketLine,
    MarketLineLookup,
    MarketLineSource,
    MarketLineStatus,
    NextFixture,
    PlayerGameLog,
    PlayerIdentity,
    PlayerMarketLine,
    PlayerPrediction,
    PlayerSearchResult,
    Prediction,
    Recommendation,
    RegressionFit,
    TeamInfo,
)

__all__ = [
    "ComparisonResult",
    "GameRecord",
    "GameSeries",
    "MarketLine",
    "MarketLineLookup",
    "MarketLineSource",
    "MarketLineStatus",
    "NextFixture",
    "PlayerGameLog",
    "PlayerIdentity",
    "PlayerMarketLine",
    "PlayerPrediction",
    "PlayerSearchResult",
    "Prediction",
    "Recommendation",
    "RegressionFit",
    "TeamInfo",
]
