"""NBA.com stats adapter: player identity and recent game logs.

NBA.com is the single authoritative identity provider:
- A numeric reference is a PERSON_ID, resolved via ``commonplayerinfo``
- Anything else is a name, searched in ``commonallplayers``

Game logs come from ``playergamelog`` (regular season, current season).

Payload shape (all three endpoints):
    {"resultSets": [{"name": "...", "headers": [...], "rowSet": [[...], ...]}]}

Data transformation:
- Rows are zipped with headers into dicts; no NBA.com column name leaves
  this module
- GAME_DATE / PTS / MIN / WL / MATCHUP → GameRecord
"""
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

import httpx

from hoopforecast.core.config import settings
from hoopforecast.core.exceptions import ParseError, PlayerNotFound
from hoopforecast.core.logging import get_logger
from hoopforecast.models.forecast import GameRecord, GameSeries, PlayerIdentity
from hoopforecast.services.forecast.adapters.base_adapter import BaseAPIAdapter
from hoopforecast.services.forecast.matchers.matchup_parser import parse_matchup
from hoopforecast.services.forecast.matchers.team_resolver import is_placeholder
from hoopforecast.services.forecast.utils.name_normalizer import (
    are_names_equal,
    name_similarity,
    normalize,
    split_player_name,
    FUZZY_MATCH_THRESHOLD,
)
from hoopforecast.utils.timezone import current_season

logger = get_logger(__name__)

NBA_STATS_BASE_URL = "https://stats.nba.com/stats"

# stats.nba.com rejects requests that do not look like they come from nba.com
NBA_STATS_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "application/json, text/plain, */*",
    "Accept-Language": "en-US,en;q=0.9",
    "Referer": "https://www.nba.com/",
    "Origin": "https://www.nba.com",
}

LEAGUE_ID = "00"
SEASON_TYPE = "Regular Season"

GAME_DATE_FORMATS = (
    "%b %d, %Y",          # "NOV 12, 2025"
    "%Y-%m-%dT%H:%M:%S",  # "2025-11-12T00:00:00"
    "%Y-%m-%d",           # "2025-11-12"
    "%Y%m%d",             # "20251112"
)


def result_set_rows(payload: Any, adapter: str, name: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Zip a stats.nba.com result set into a list of row dicts.

    Args:
        payload: Decoded JSON response
        adapter: Adapter name for error reporting
        name: Result set name to select (first set when omitted)

    Raises:
        ParseError: payload lacks a usable ``resultSets`` entry
    """
    if not isinstance(payload, dict):
        raise ParseError(adapter, "response is not a JSON object")

    result_sets = payload.get("resultSets")
    if not isinstance(result_sets, list) or not result_sets:
        raise ParseError(adapter, "missing resultSets")

    if not all(isinstance(rs, dict) for rs in result_sets):
        raise ParseError(adapter, "resultSets entry is not an object")

    selected = result_sets[0]
    if name is not None:
        selected = next((rs for rs in result_sets if rs.get("name") == name), None)
        if selected is None:
            raise ParseError(adapter, f"missing result set {name}")

    headers = selected.get("headers")
    rows = selected.get("rowSet")
    if not isinstance(headers, list) or not isinstance(rows, list):
        raise ParseError(adapter, "result set without headers/rowSet")
    if not all(isinstance(row, list) for row in rows):
        raise ParseError(adapter, "rowSet entry is not a list")

    return [dict(zip(headers, row)) for row in rows]


def parse_game_date(value: Any) -> Optional[date]:
    """
    Parse any of the GAME_DATE formats NBA.com has used.

    Examples:
        >>> parse_game_date("NOV 12, 2025")
        datetime.date(2025, 11, 12)
        >>> parse_game_date("20251112")
        datetime.date(2025, 11, 12)
        >>> parse_game_date("yesterday") is None
        True
    """
    if not value:
        return None

    text = str(value).strip()
    for fmt in GAME_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    logger.debug(f"Unparsable GAME_DATE: {text!r}")
    return None


def parse_minutes(value: Any) -> float:
    """
    Convert MIN to decimal minutes.

    Examples:
        >>> parse_minutes("34:30")
        34.5
        >>> parse_minutes(34)
        34.0
    """
    if value is None or value == "":
        return 0.0

    text = str(value).strip()
    try:
        if ":" in text:
            mins, secs = text.split(":", 1)
            return round(int(mins) + int(secs) / 60, 2)
        return max(0.0, float(text))
    except ValueError:
        return 0.0


def parse_points(value: Any) -> Optional[int]:
    """
    PTS as a non-negative int, or None when missing or unparsable.

    Rows without usable points are dropped by the caller rather than
    counted as scoreless games.
    """
    try:
        return max(0, int(float(value)))
    except (TypeError, ValueError):
        return None


def normalize_game(row: Dict[str, Any], sequence_number: int, points: int) -> GameRecord:
    """Map one playergamelog row (with its already parsed points) to a GameRecord."""
    matchup = parse_matchup(row.get("MATCHUP"))

    return GameRecord(
        sequence_number=sequence_number,
        date=parse_game_date(row.get("GAME_DATE")),
        points=points,
        minutes=parse_minutes(row.get("MIN")),
        opponent_abbreviation=matchup.opponent,
        is_home=matchup.is_home,
        result=row.get("WL") or None,
    )


class NbaStatsAdapter(BaseAPIAdapter):
    """
    Adapter for the stats.nba.com JSON API.

    Usage:
        adapter = NbaStatsAdapter()
        identity, series = await adapter.fetch_game_log("LeBron James")
    """

    name = "nba_stats"

    def __init__(
        self,
        timeout: Optional[float] = None,
        season: Optional[str] = None,
        game_limit: Optional[int] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize the NBA.com stats adapter.

        Args:
            timeout: Request timeout in seconds (defaults to settings)
            season: Fixed season such as "2025-26" (defaults to settings, then today's season)
            game_limit: Games kept per series (defaults to settings)
            client: Pre-built HTTP client
        """
        super().__init__(
            NBA_STATS_BASE_URL,
            timeout=timeout or settings.NBA_STATS_TIMEOUT,
            headers=NBA_STATS_HEADERS,
            client=client,
        )
        self._season = season
        self.game_limit = game_limit or settings.GAME_LOG_LIMIT

    @property
    def season(self) -> str:
        """Season string, derived per call so a long-running process rolls over in October."""
        return self._season or settings.CURRENT_SEASON or current_season()

    async def fetch_game_log(self, player_ref: str) -> Tuple[PlayerIdentity, GameSeries]:
        """
        Resolve a player reference and fetch their recent regular-season games.

        Args:
            player_ref: NBA.com PERSON_ID or a player name

        Returns:
            (PlayerIdentity, GameSeries) with the series most-recent-first

        Raises:
            PlayerNotFound: no player matches the reference
            UpstreamTransportError: NBA.com unreachable or malformed
        """
        identity = await self.resolve_player(player_ref)
        series = await self.fetch_games(identity.provider_id)

        logger.info(
            f"Fetched {len(series)} games for {identity.display_name} "
            f"({identity.team_abbreviation}, {self.season})"
        )
        return identity, series

    async def resolve_player(self, player_ref: str) -> PlayerIdentity:
        """Resolve a PERSON_ID or a name to a PlayerIdentity."""
        ref = (player_ref or "").strip()
        if not ref:
            raise PlayerNotFound(player_ref, "Player reference is empty")

        if ref.isdigit():
            identity = await self.get_player_info(int(ref))
        else:
            identity = await self.search_player(ref)

        if identity is None:
            raise PlayerNotFound(ref)
        return identity

    async def search_player(self, player_name: str) -> Optional[PlayerIdentity]:
        """
        Find a single player by name in ``commonallplayers``.

        Match order:
        1. Normalized name equality
        2. Normalized substring ("curry" → "Stephen Curry")
        3. Fuzzy match (WRatio >= FUZZY_MATCH_THRESHOLD), best score wins
        """
        payload = await self._get_json(
            "commonallplayers",
            params={"LeagueID": LEAGUE_ID, "Season": self.season, "IsOnlyCurrentSeason": 1},
        )
        rows = result_set_rows(payload, self.name)

        target = normalize(player_name)
        if not target:
            return None

        candidates = [row for row in rows if row.get("DISPLAY_FIRST_LAST")]

        match = next(
            (row for row in candidates if are_names_equal(row["DISPLAY_FIRST_LAST"], player_name)),
            None,
        )

        if match is None:
            match = next(
                (row for row in candidates if target in normalize(row["DISPLAY_FIRST_LAST"])),
                None,
            )

        if match is None:
            scored = [
                (name_similarity(row["DISPLAY_FIRST_LAST"], player_name), row)
                for row in candidates
            ]
            scored = [item for item in scored if item[0] >= FUZZY_MATCH_THRESHOLD]
            if scored:
                score, match = max(scored, key=lambda item: item[0])
                logger.info(
                    f"Fuzzy matched '{player_name}' → '{match['DISPLAY_FIRST_LAST']}' (score {score:.0f})"
                )

        if match is None:
            logger.info(f"No NBA.com player matches '{player_name}'")
            return None

        display_name = match["DISPLAY_FIRST_LAST"]
        first_name, last_name = split_player_name(display_name)

        return PlayerIdentity(
            display_name=display_name,
            first_name=first_name,
            last_name=last_name,
            team_abbreviation=self._team_or_placeholder(match.get("TEAM_ABBREVIATION")),
            provider_id=self._person_id(match),
        )

    async def get_player_info(self, player_id: int) -> Optional[PlayerIdentity]:
        """Look up a player by PERSON_ID via ``commonplayerinfo``."""
        payload = await self._get_json("commonplayerinfo", params={"PlayerID": player_id})
        rows = result_set_rows(payload, self.name)

        if not rows:
            return None

        row = rows[0]
        display_name = row.get("DISPLAY_FIRST_LAST") or ""
        if not display_name:
            display_name = f"{row.get('FIRST_NAME') or ''} {row.get('LAST_NAME') or ''}".strip()
        if not display_name:
            return None

        first_name, last_name = split_player_name(display_name)

        return PlayerIdentity(
            display_name=display_name,
            first_name=row.get("FIRST_NAME") or first_name,
            last_name=row.get("LAST_NAME") or last_name,
            team_abbreviation=self._team_or_placeholder(row.get("TEAM_ABBREVIATION")),
            provider_id=player_id,
            position=row.get("POSITION") or None,
        )

    async def fetch_games(self, player_id: Optional[int]) -> GameSeries:
        """Fetch the current season's regular-season log, most recent first, capped."""
        if player_id is None:
            return GameSeries([])

        payload = await self._get_json(
            "playergamelog",
            params={
                "LeagueID": LEAGUE_ID,
                "PlayerID": player_id,
                "Season": self.season,
                "SeasonType": SEASON_TYPE,
            },
        )
        rows = result_set_rows(payload, self.name)

        if rows and "PTS" not in rows[0]:
            raise ParseError(self.name, "game log has no PTS column")

        # NBA.com already returns the log newest first
        games = []
        for row in rows:
            if len(games) >= self.game_limit:
                break
            points = parse_points(row.get("PTS"))
            if points is None:
                logger.warning(f"Skipping game {row.get('Game_ID')} with unusable PTS {row.get('PTS')!r}")
                continue
            games.append(normalize_game(row, sequence_number=len(games) + 1, points=points))

        return GameSeries(games)

    def _person_id(self, row: Dict[str, Any]) -> int:
        try:
            return int(row["PERSON_ID"])
        except (KeyError, TypeError, ValueError) as e:
            raise ParseError(self.name, f"invalid PERSON_ID {row.get('PERSON_ID')!r}") from e

    @staticmethod
    def _team_or_placeholder(abbreviation: Optional[str]) -> str:
        if is_placeholder(abbreviation):
            return "N/A"
        return abbreviation.strip().upper()
