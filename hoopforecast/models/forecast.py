"""
Canonical data model for player forecasts.

Every upstream adapter normalizes its payloads into these models; nothing
downstream of an adapter sees provider field names. All models are created
fresh per request and never persisted.
"""
from datetime import date as DateType
from enum import Enum
from typing import Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field, RootModel, model_validator


class Recommendation(str, Enum):
    """Directional call of the prediction against the market line."""
    OVER = "OVER"
    UNDER = "UNDER"
    PUSH = "PUSH"
    NOT_AVAILABLE = "N/A"


class MarketLineSource(str, Enum):
    """Provenance of a market line."""
    THE_ODDS_API = "theoddsapi"
    FILLER = "default"


class MarketLineStatus(str, Enum):
    FOUND = "found"
    NO_LINE = "no_line"


class PlayerIdentity(BaseModel):
    """A resolved player. Immutable once resolved."""
    model_config = ConfigDict(frozen=True)

    display_name: str
    first_name: str = ""
    last_name: str = ""
    team_abbreviation: str = "N/A"
    provider_id: Optional[int] = None
    position: Optional[str] = None


class GameRecord(BaseModel):
    """One game from a player's log. ``sequence_number`` 1 is the most recent game."""
    sequence_number: int = Field(..., ge=1)
    date: Optional[DateType] = None
    points: int = Field(..., ge=0)
    minutes: float = Field(0.0, ge=0)
    opponent_abbreviation: str = "N/A"
    is_home: bool = False
    result: Optional[str] = None


class GameSeries(RootModel[List[GameRecord]]):
    """
    A player's recent games, most-recent-first.

    Sequence numbers must increase strictly as recency decreases.
    """
    root: List[GameRecord] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_order(self) -> "GameSeries":
        numbers = [game.sequence_number for game in self.root]
        if any(later <= earlier for earlier, later in zip(numbers, numbers[1:])):
            raise ValueError("sequence_number must increase strictly with decreasing recency")
        return self

    def __iter__(self) -> Iterator[GameRecord]:
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __getitem__(self, index: int) -> GameRecord:
        return self.root[index]

    def chronological(self) -> List[GameRecord]:
        """Oldest game first, the orientation the trend fit expects."""
        return list(reversed(self.root))


class RegressionFit(BaseModel):
    slope: float
    intercept: float
    r_squared: float = Field(..., ge=0.0, le=1.0)


class Prediction(BaseModel):
    predicted_points: float
    confidence: float = Field(..., ge=0.0, le=100.0)
    error_margin: float = Field(..., ge=0.0)
    games_used: int
    fit: RegressionFit


class MarketLine(BaseModel):
    line: Optional[float] = None
    over_price: Optional[int] = None
    under_price: Optional[int] = None
    source: MarketLineSource
    bookmaker: Optional[str] = None


class MarketLineLookup(BaseModel):
    """
    Tagged result of a market line fetch: a line, or a reportable absence.

    ``reason`` is a machine code (``no_line``, ``not_configured``); ``detail``
    says what was looked for.
    """
    status: MarketLineStatus
    market_line: Optional[MarketLine] = None
    reason: Optional[str] = None
    detail: Optional[str] = None

    @classmethod
    def found(cls, market_line: MarketLine) -> "MarketLineLookup":
        return cls(status=MarketLineStatus.FOUND, market_line=market_line)

    @classmethod
    def no_line(cls, reason: str, detail: Optional[str] = None) -> "MarketLineLookup":
        return cls(status=MarketLineStatus.NO_LINE, reason=reason, detail=detail)


class NextFixture(BaseModel):
    opponent_abbreviation: str
    date: str
    time: str
    is_home: bool


class TeamInfo(BaseModel):
    """Display enrichment for a team; unknown teams carry null name and logo."""
    abbreviation: Optional[str] = None
    display_name: Optional[str] = None
    logo_url: Optional[str] = None


class PlayerSearchResult(BaseModel):
    provider_id: str
    display_name: str
    first_name: str = ""
    last_name: str = ""
    team_abbreviation: Optional[str] = None
    team_name: Optional[str] = None
    position: Optional[str] = None
    jersey: Optional[str] = None
    headshot_url: Optional[str] = None


class PlayerGameLog(BaseModel):
    player: PlayerIdentity
    games: GameSeries


class PlayerPrediction(BaseModel):
    player: PlayerIdentity
    prediction: Prediction


class PlayerMarketLine(BaseModel):
    player: PlayerIdentity
    market_line: MarketLine


class ComparisonResult(BaseModel):
    """Merged forecast-versus-market view for one player."""
    player: PlayerIdentity
    games: GameSeries
    prediction: Prediction
    market_line: MarketLine
    recommendation: Recommendation
    team: TeamInfo
    opponent: Optional[TeamInfo] = None
    next_fixture: Optional[NextFixture] = None
