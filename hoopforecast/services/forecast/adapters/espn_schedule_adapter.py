"""
ESPN site API adapter: team schedules and roster-based player search.

ESPN API Endpoints:
- Base URL: https://site.web.api.espn.com/apis/site/v2/sports/basketball/nba
- /teams/{espn_team_id}/schedule  → next fixture
- /teams                          → team list for roster search
- /teams/{espn_team_id}/roster    → athletes per team

ESPN abbreviations differ from NBA.com (GS, NY, SA, NO, UTAH, WSH); every
abbreviation is translated through the team resolver before it leaves this
module.

Timezone: event dates are UTC; "today" and fixture dates are US/Eastern.
"""
import asyncio
from datetime import date, datetime
from typing import Any, Dict, List, Optional

import httpx

from hoopforecast.core.config import settings
from hoopforecast.core.exceptions import ParseError, UpstreamTransportError
from hoopforecast.core.logging import get_logger
from hoopforecast.models.forecast import NextFixture, PlayerIdentity, PlayerSearchResult
from hoopforecast.services.forecast.adapters.base_adapter import BaseAPIAdapter
from hoopforecast.services.forecast.matchers.team_resolver import (
    Team,
    canonical_abbreviation,
    get_team,
)
from hoopforecast.services.forecast.utils.name_normalizer import are_names_equal, normalize
from hoopforecast.utils.timezone import (
    eastern_today,
    format_fixture_date,
    format_fixture_time,
    parse_utc,
    utc_to_eastern,
)

logger = get_logger(__name__)

ESPN_BASE_URL = "https://site.web.api.espn.com/apis/site/v2/sports/basketball/nba"
ESPN_PARAMS = {"region": "us", "lang": "en", "contentorigin": "espn"}

MAX_SEARCH_RESULTS = 25


class EspnScheduleAdapter(BaseAPIAdapter):
    """
    Adapter for ESPN's public NBA endpoints.

    Usage:
        adapter = EspnScheduleAdapter()
        fixture = await adapter.fetch_next_fixture("GSW")
        players = await adapter.search_players("curry")
    """

    name = "espn"

    def __init__(self, timeout: Optional[float] = None, client: Optional[httpx.AsyncClient] = None):
        super().__init__(ESPN_BASE_URL, timeout=timeout or settings.ESPN_TIMEOUT, client=client)

    async def fetch_next_fixture(
        self,
        team_abbreviation: Optional[str],
        player: Optional[PlayerIdentity] = None,
        today: Optional[date] = None
    ) -> Optional[NextFixture]:
        """
        Find the team's earliest game on or after today (Eastern calendar day).

        Args:
            team_abbreviation: Any provider abbreviation for the team
            player: When the abbreviation does not resolve, the player's
                team is looked up through the ESPN rosters instead
            today: Override for the current Eastern date

        Returns:
            NextFixture, or None when the team is unknown or nothing is scheduled

        Raises:
            UpstreamTransportError: ESPN unreachable or malformed
        """
        team = get_team(team_abbreviation)

        if team is None and player is not None:
            logger.info(
                f"Team '{team_abbreviation}' unresolved for {player.display_name}, "
                f"falling back to ESPN rosters"
            )
            team = get_team(await self.find_player_team(player))

        if team is None:
            logger.info(f"No team to look up a schedule for ('{team_abbreviation}')")
            return None

        payload = await self._get_json(f"teams/{team.espn_team_id}/schedule", params=ESPN_PARAMS)

        events = payload.get("events") if isinstance(payload, dict) else None
        if not isinstance(events, list):
            raise ParseError(self.name, "schedule without events")

        today = today or eastern_today()

        dated = []
        for event in events:
            start = parse_utc(event.get("date"))
            if start is not None:
                dated.append((start, event))
        dated.sort(key=lambda item: item[0])

        for start, event in dated:
            local_start = utc_to_eastern(start)
            if local_start.date() < today:
                continue

            fixture = self._fixture_from_event(event, team, local_start)
            if fixture is not None:
                logger.info(
                    f"Next fixture for {team.abbreviation}: {fixture.opponent_abbreviation} "
                    f"on {fixture.date} ({'home' if fixture.is_home else 'away'})"
                )
                return fixture

        logger.info(f"No upcoming fixture for {team.abbreviation} in {len(events)} events")
        return None

    def _fixture_from_event(
        self,
        event: Dict[str, Any],
        team: Team,
        local_start: datetime
    ) -> Optional[NextFixture]:
        competitions = event.get("competitions") or []
        if not competitions:
            return None

        opponent = None
        is_home = False

        for competitor in competitions[0].get("competitors") or []:
            raw = (competitor.get("team") or {}).get("abbreviation") or ""
            abbreviation = canonical_abbreviation(raw) or raw.upper()

            if abbreviation == team.abbreviation:
                is_home = competitor.get("homeAway") == "home"
            elif abbreviation:
                opponent = abbreviation

        if opponent is None:
            return None

        return NextFixture(
            opponent_abbreviation=opponent,
            date=format_fixture_date(local_start),
            time=format_fixture_time(local_start),
            is_home=is_home,
        )

    async def search_players(self, query: str) -> List[PlayerSearchResult]:
        """
        Search every NBA roster for players whose name contains ``query``.

        Rosters are fetched concurrently; a team whose roster request fails is
        skipped. Results are de-duplicated by ESPN id, ranked prefix matches
        first and then alphabetically, and capped at MAX_SEARCH_RESULTS.

        Raises:
            UpstreamTransportError: the team list itself could not be fetched
        """
        needle = normalize(query)
        if not needle:
            return []

        payload = await self._get_json("teams", params={**ESPN_PARAMS, "limit": 50})
        try:
            teams = payload["sports"][0]["leagues"][0]["teams"]
        except (KeyError, IndexError, TypeError) as e:
            raise ParseError(self.name, f"teams list missing ({e})") from e

        rosters = await asyncio.gather(
            *(self._search_roster(entry.get("team") or {}, needle) for entry in teams[:30])
        )

        unique: Dict[str, PlayerSearchResult] = {}
        for roster in rosters:
            for result in roster:
                unique.setdefault(result.provider_id, result)

        ranked = sorted(
            unique.values(),
            key=lambda r: (not normalize(r.display_name).startswith(needle), normalize(r.display_name)),
        )

        logger.info(f"ESPN search '{query}': {len(ranked)} match(es) across {len(teams)} teams")
        return ranked[:MAX_SEARCH_RESULTS]

    async def _search_roster(self, team: Dict[str, Any], needle: str) -> List[PlayerSearchResult]:
        team_id = team.get("id")
        if not team_id:
            return []

        try:
            payload = await self._get_json(f"teams/{team_id}/roster", params=ESPN_PARAMS)
        except UpstreamTransportError as e:
            logger.warning(f"Skipping roster for ESPN team {team_id}: {e}")
            return []

        raw_abbreviation = team.get("abbreviation") or ""
        team_abbreviation = canonical_abbreviation(raw_abbreviation) or raw_abbreviation.upper() or None
        team_name = team.get("displayName") or team.get("name")

        results = []
        for athlete in _flatten_athletes(payload):
            first = athlete.get("firstName") or ""
            last = athlete.get("lastName") or ""
            full_name = f"{first} {last}".strip()
            display_name = athlete.get("displayName") or full_name

            names = (full_name, display_name, athlete.get("shortName") or "")
            if not any(needle in normalize(name) for name in names if name):
                continue

            if athlete.get("id") is None or not display_name:
                continue

            position = athlete.get("position") or {}
            results.append(PlayerSearchResult(
                provider_id=str(athlete["id"]),
                display_name=display_name,
                first_name=first,
                last_name=last,
                team_abbreviation=team_abbreviation,
                team_name=team_name,
                position=position.get("abbreviation") or position.get("name"),
                jersey=athlete.get("jersey"),
                headshot_url=(athlete.get("headshot") or {}).get("href"),
            ))

        return results

    async def find_player_team(self, player: PlayerIdentity) -> Optional[str]:
        """Canonical abbreviation of the team whose ESPN roster lists the player."""
        for result in await self.search_players(player.display_name):
            if are_names_equal(result.display_name, player.display_name, fuzzy=True):
                return result.team_abbreviation
        return None


def _flatten_athletes(payload: Any) -> List[Dict[str, Any]]:
    """ESPN rosters are either a flat athlete list or position groups with ``items``."""
    if not isinstance(payload, dict):
        return []

    athletes = []
    for entry in payload.get("athletes") or []:
        if isinstance(entry, dict) and isinstance(entry.get("items"), list):
            athletes.extend(entry["items"])
        elif isinstance(entry, dict):
            athletes.append(entry)
    return athletes
