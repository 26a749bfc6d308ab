"""The Odds API adapter: player points prop lines.

Flow:
1. GET /sports/basketball_nba/events                       → upcoming events
2. Keep events involving the player's team (all events if the team is unknown)
3. GET /sports/basketball_nba/events/{id}/odds?markets=player_points
   for the kept events, concurrently
4. Pick the player's Over/Under outcomes from one bookmaker

Player props payload (per event):
    {"bookmakers": [{"key": "draftkings", "title": "DraftKings",
                     "markets": [{"key": "player_points",
                                  "outcomes": [{"name": "Over", "description": "Stephen Curry",
                                                "price": -115, "point": 27.5}, ...]}]}]}

Quota Tracking: Response headers x-requests-remaining, x-requests-used
"""
import asyncio
from typing import Any, Dict, List, Optional, Tuple

import httpx

from hoopforecast.core.config import is_real_api_key, settings
from hoopforecast.core.exceptions import MarketDataUnavailable, ParseError, UpstreamTransportError
from hoopforecast.core.logging import get_logger
from hoopforecast.core.metrics import update_odds_api_quota
from hoopforecast.models.forecast import (
    MarketLine,
    MarketLineLookup,
    MarketLineSource,
    PlayerIdentity,
)
from hoopforecast.services.forecast.adapters.base_adapter import BaseAPIAdapter
from hoopforecast.services.forecast.matchers.team_resolver import get_team, team_from_odds_name
from hoopforecast.services.forecast.utils.name_normalizer import are_names_equal

logger = get_logger(__name__)

THE_ODDS_API_BASE = "https://api.the-odds-api.com/v4"
SPORT_KEY = "basketball_nba"
PLAYER_POINTS_MARKET = "player_points"

# Event odds statuses that mean "no props for this event" rather than an outage
_EMPTY_EVENT_STATUSES = (404, 422)

# Alert thresholds on a 20,000 request monthly quota
QUOTA_CRITICAL = 1000
QUOTA_WARNING = 4000


class OddsApiAdapter(BaseAPIAdapter):
    """
    Adapter for The Odds API v4.

    Without an API key the adapter makes no requests: it returns the
    configured filler line (source ``default``) or a ``not_configured``
    absence.
    """

    name = "the_odds_api"

    def __init__(
        self,
        api_key: Optional[str] = None,
        regions: Optional[str] = None,
        bookmakers: Optional[List[str]] = None,
        filler_line: Optional[float] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize the Odds API adapter.

        Args:
            api_key: The Odds API key (defaults to settings)
            regions: Bookmaker regions, e.g. "us" (defaults to settings)
            bookmakers: Preferred bookmaker keys in priority order (defaults to settings)
            filler_line: Line used only when no API key is configured (defaults to settings)
            timeout: Request timeout in seconds (defaults to settings)
            client: Pre-built HTTP client
        """
        super().__init__(THE_ODDS_API_BASE, timeout=timeout or settings.ODDS_API_TIMEOUT, client=client)
        self.api_key = settings.THE_ODDS_API_KEY if api_key is None else api_key
        self.regions = regions or settings.ODDS_API_REGIONS
        self.bookmakers = [b.lower() for b in bookmakers] if bookmakers is not None else settings.ODDS_BOOKMAKERS
        self.filler_line = settings.ODDS_FILLER_LINE if filler_line is None else filler_line

        self.requests_remaining: Optional[int] = None
        self.requests_used: Optional[int] = None

    def has_api_key(self) -> bool:
        return is_real_api_key(self.api_key)

    async def fetch_market_line(self, player: PlayerIdentity) -> MarketLineLookup:
        """
        Look up the player's points prop line.

        Returns:
            MarketLineLookup FOUND with a MarketLine, or NO_LINE with a reason

        Raises:
            UpstreamTransportError: The Odds API unreachable or malformed
        """
        if not self.has_api_key():
            if self.filler_line is not None:
                logger.warning(
                    f"THE_ODDS_API_KEY not configured, using filler line {self.filler_line} "
                    f"for {player.display_name}"
                )
                return MarketLineLookup.found(MarketLine(
                    line=float(self.filler_line),
                    source=MarketLineSource.FILLER,
                ))
            logger.warning("THE_ODDS_API_KEY not configured and no ODDS_FILLER_LINE set")
            return MarketLineLookup.no_line(
                MarketDataUnavailable.NOT_CONFIGURED,
                "THE_ODDS_API_KEY is not configured",
            )

        events = await self._fetch_events()
        events = self._events_for_team(events, player.team_abbreviation)

        if not events:
            return MarketLineLookup.no_line(
                MarketDataUnavailable.NO_LINE,
                f"No upcoming event for {player.team_abbreviation}",
            )

        event_odds = await asyncio.gather(*(self._fetch_event_odds(event["id"]) for event in events))

        market_line = self._select_line([odds for odds in event_odds if odds], player.display_name)
        if market_line is None:
            logger.info(f"No {PLAYER_POINTS_MARKET} line for {player.display_name} in {len(events)} event(s)")
            return MarketLineLookup.no_line(
                MarketDataUnavailable.NO_LINE,
                f"No {PLAYER_POINTS_MARKET} line listed for {player.display_name}",
            )

        logger.info(
            f"Market line for {player.display_name}: {market_line.line} "
            f"({market_line.bookmaker}, O {market_line.over_price} / U {market_line.under_price})"
        )
        return MarketLineLookup.found(market_line)

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        response = await super()._get(path, {"apiKey": self.api_key, **(params or {})})
        self._update_quota_from_headers(response)
        return response

    async def _fetch_events(self) -> List[Dict[str, Any]]:
        payload = await self._get_json(f"sports/{SPORT_KEY}/events")
        if not isinstance(payload, list):
            raise ParseError(self.name, "events response is not a list")
        return [event for event in payload if isinstance(event, dict) and event.get("id")]

    def _events_for_team(self, events: List[Dict[str, Any]], team_abbreviation: str) -> List[Dict[str, Any]]:
        team = get_team(team_abbreviation)
        if team is None:
            return events

        kept = []
        for event in events:
            teams = (team_from_odds_name(event.get("home_team")), team_from_odds_name(event.get("away_team")))
            if team in teams:
                kept.append(event)
        return kept

    async def _fetch_event_odds(self, event_id: str) -> Optional[Dict[str, Any]]:
        try:
            payload = await self._get_json(
                f"sports/{SPORT_KEY}/events/{event_id}/odds",
                params={
                    "regions": self.regions,
                    "markets": PLAYER_POINTS_MARKET,
                    "oddsFormat": "american",
                },
            )
        except UpstreamTransportError as e:
            if e.status in _EMPTY_EVENT_STATUSES:
                logger.debug(f"No props for event {event_id} (HTTP {e.status})")
                return None
            raise

        if not isinstance(payload, dict):
            raise ParseError(self.name, f"odds for event {event_id} is not an object")
        return payload

    def _select_line(self, event_odds: List[Dict[str, Any]], player_name: str) -> Optional[MarketLine]:
        """
        Pair the player's Over/Under outcomes per bookmaker and pick one.

        Exact (normalized) name matches win over fuzzy matches; among the
        bookmakers quoting the player, the configured preference order wins,
        then payload order.
        """
        for fuzzy in (False, True):
            quotes = self._collect_quotes(event_odds, player_name, fuzzy)
            if quotes:
                return self._preferred(quotes)
        return None

    def _collect_quotes(
        self,
        event_odds: List[Dict[str, Any]],
        player_name: str,
        fuzzy: bool
    ) -> List[Tuple[str, MarketLine]]:
        quotes = []
        for odds in event_odds:
            for bookmaker in self._objects(odds.get("bookmakers"), "bookmakers"):
                sides: Dict[str, Dict[str, Any]] = {}
                for market in self._objects(bookmaker.get("markets"), "markets"):
                    if market.get("key") != PLAYER_POINTS_MARKET:
                        continue
                    for outcome in self._objects(market.get("outcomes"), "outcomes"):
                        side = (outcome.get("name") or "").strip().lower()
                        if side not in ("over", "under") or outcome.get("point") is None:
                            continue
                        if are_names_equal(outcome.get("description") or "", player_name, fuzzy=fuzzy):
                            sides.setdefault(side, outcome)

                if not sides:
                    continue

                over = sides.get("over")
                under = sides.get("under")
                point = (over or under)["point"]
                try:
                    line = float(point)
                except (TypeError, ValueError) as e:
                    raise ParseError(self.name, f"non-numeric point {point!r}") from e

                quotes.append(((bookmaker.get("key") or "").lower(), MarketLine(
                    line=line,
                    over_price=_price(over),
                    under_price=_price(under),
                    source=MarketLineSource.THE_ODDS_API,
                    bookmaker=bookmaker.get("title") or bookmaker.get("key"),
                )))
        return quotes

    def _objects(self, value: Any, field: str) -> List[Dict[str, Any]]:
        """A payload list of objects; absent counts as empty, anything else is malformed."""
        if value is None:
            return []
        if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
            raise ParseError(self.name, f"{field} is not a list of objects")
        return value

    def _preferred(self, quotes: List[Tuple[str, MarketLine]]) -> MarketLine:
        for preferred_key in self.bookmakers:
            for key, quote in quotes:
                if key == preferred_key:
                    return quote
        return quotes[0][1]

    def _update_quota_from_headers(self, response: httpx.Response):
        """
        Update quota tracking from response headers.

        The Odds API returns:
        - x-requests-remaining: Requests left in current billing period
        - x-requests-used: Requests used in current billing period
        """
        try:
            remaining = response.headers.get("x-requests-remaining")
            used = response.headers.get("x-requests-used")

            if remaining:
                self.requests_remaining = int(float(remaining))
            if used:
                self.requests_used = int(float(used))
        except (ValueError, TypeError) as e:
            logger.warning(f"Failed to parse quota headers: {e}")
            return

        if self.requests_remaining is None:
            return

        update_odds_api_quota(self.requests_remaining, self.requests_used)

        if self.requests_remaining < QUOTA_CRITICAL:
            logger.error(f"CRITICAL: Odds API quota critically low, {self.requests_remaining} requests remaining")
        elif self.requests_remaining < QUOTA_WARNING:
            logger.warning(f"Odds API quota running low, {self.requests_remaining} requests remaining")
        else:
            logger.debug(f"Odds API quota: {self.requests_remaining} remaining, {self.requests_used} used")


def _price(outcome: Optional[Dict[str, Any]]) -> Optional[int]:
    if not outcome or outcome.get("price") is None:
        return None
    try:
        return int(round(float(outcome["price"])))
    except (TypeError, ValueError):
        return None
