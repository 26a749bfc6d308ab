"""Tests for NbaStatsAdapter against canned stats.nba.com payloads.

Test Strategy:
1. Test name resolution (exact, accent-insensitive, substring, fuzzy, miss)
2. Test numeric PERSON_ID resolution via commonplayerinfo
3. Test game log normalization and the ten-game cap
4. Test transport failures (timeout, HTTP status, malformed payloads)

Each test follows the pattern:
- Given: A MockTransport answering with a canned NBA.com payload
- When: An adapter method is called
- Then: Canonical models (or the mapped error) come back
"""
import sys
from datetime import date
from pathlib import Path

import httpx
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))
from conftest import json_response, mock_client, result_set

from hoopforecast.core.exceptions import ParseError, PlayerNotFound, UpstreamTransportError
from hoopforecast.services.forecast.adapters.nba_stats_adapter import (
    NbaStatsAdapter,
    parse_game_date,
    parse_minutes,
    parse_points,
    result_set_rows,
)

ALL_PLAYERS = result_set(
    ["PERSON_ID", "DISPLAY_LAST_COMMA_FIRST", "DISPLAY_FIRST_LAST", "ROSTERSTATUS", "TEAM_ABBREVIATION"],
    [
        [2544, "James, LeBron", "LeBron James", 1, "LAL"],
        [201939, "Curry, Stephen", "Stephen Curry", 1, "GSW"],
        [1629029, "Dončić, Luka", "Luka Dončić", 1, "DAL"],
        [1626162, "Oubre Jr., Kelly", "Kelly Oubre Jr.", 1, "PHI"],
        [1630000, "Agent, Free", "Free Agent", 0, ""],
    ],
    name="CommonAllPlayers",
)

PLAYER_INFO = result_set(
    ["PERSON_ID", "FIRST_NAME", "LAST_NAME", "DISPLAY_FIRST_LAST", "POSITION", "TEAM_ABBREVIATION"],
    [[201939, "Stephen", "Curry", "Stephen Curry", "Guard", "GSW"]],
    name="CommonPlayerInfo",
)

GAME_LOG_HEADERS = ["SEASON_ID", "Player_ID", "Game_ID", "GAME_DATE", "MATCHUP", "WL", "MIN", "PTS"]


def game_log(rows):
    return result_set(GAME_LOG_HEADERS, rows, name="PlayerGameLog")


def game_row(day: int, matchup: str = "GSW vs. LAL", pts=25, minutes="34:30", wl="W"):
    return ["22025", 201939, f"00225000{day:02d}", f"NOV {day:02d}, 2025", matchup, wl, minutes, pts]


def stats_handler(game_rows=None, player_info=PLAYER_INFO, calls=None):
    """Route stats.nba.com endpoints to canned payloads."""
    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        endpoint = request.url.path.rsplit("/", 1)[-1]
        if endpoint == "commonallplayers":
            return json_response(ALL_PLAYERS)
        if endpoint == "commonplayerinfo":
            return json_response(player_info)
        if endpoint == "playergamelog":
            return json_response(game_log(game_rows if game_rows is not None else []))
        return httpx.Response(404)
    return handler


def make_adapter(handler) -> NbaStatsAdapter:
    return NbaStatsAdapter(timeout=5.0, season="2025-26", game_limit=10, client=mock_client(handler))


class TestNameResolution:
    """Test suite for resolving names through commonallplayers."""

    @pytest.mark.asyncio
    async def test_exact_name(self):
        adapter = make_adapter(stats_handler())

        identity = await adapter.resolve_player("Stephen Curry")

        assert identity.provider_id == 201939
        assert identity.display_name == "Stephen Curry"
        assert identity.first_name == "Stephen"
        assert identity.last_name == "Curry"
        assert identity.team_abbreviation == "GSW"

    @pytest.mark.asyncio
    async def test_accent_insensitive(self):
        adapter = make_adapter(stats_handler())

        identity = await adapter.resolve_player("luka doncic")

        assert identity.provider_id == 1629029

    @pytest.mark.asyncio
    async def test_suffix_insensitive(self):
        adapter = make_adapter(stats_handler())

        identity = await adapter.resolve_player("Kelly Oubre")

        assert identity.provider_id == 1626162
        assert identity.last_name == "Oubre Jr."

    @pytest.mark.asyncio
    async def test_substring(self):
        adapter = make_adapter(stats_handler())

        identity = await adapter.resolve_player("curry")

        assert identity.display_name == "Stephen Curry"

    @pytest.mark.asyncio
    async def test_fuzzy(self):
        adapter = make_adapter(stats_handler())

        identity = await adapter.resolve_player("Stephen Cury")

        assert identity.provider_id == 201939

    @pytest.mark.asyncio
    async def test_not_found(self):
        adapter = make_adapter(stats_handler())

        with pytest.raises(PlayerNotFound) as exc_info:
            await adapter.resolve_player("Zzyzx Qwerty")

        assert "Zzyzx Qwerty" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_empty_reference(self):
        adapter = make_adapter(stats_handler())

        with pytest.raises(PlayerNotFound):
            await adapter.resolve_player("   ")

    @pytest.mark.asyncio
    async def test_free_agent_team_is_placeholder(self):
        adapter = make_adapter(stats_handler())

        identity = await adapter.resolve_player("Free Agent")

        assert identity.team_abbreviation == "N/A"

    @pytest.mark.asyncio
    async def test_request_parameters_and_headers(self):
        calls = []
        adapter = make_adapter(stats_handler(calls=calls))

        await adapter.resolve_player("Stephen Curry")

        request = calls[0]
        assert request.url.params["Season"] == "2025-26"
        assert request.url.params["LeagueID"] == "00"
        assert request.headers["Referer"] == "https://www.nba.com/"
        assert request.headers["Origin"] == "https://www.nba.com"


class TestIdResolution:
    """Test suite for numeric PERSON_ID references."""

    @pytest.mark.asyncio
    async def test_numeric_reference_uses_player_info(self):
        calls = []
        adapter = make_adapter(stats_handler(calls=calls))

        identity = await adapter.resolve_player("201939")

        assert calls[0].url.path.endswith("/commonplayerinfo")
        assert calls[0].url.params["PlayerID"] == "201939"
        assert identity.display_name == "Stephen Curry"
        assert identity.position == "Guard"
        assert identity.provider_id == 201939

    @pytest.mark.asyncio
    async def test_unknown_id(self):
        empty = result_set(PLAYER_INFO["resultSets"][0]["headers"], [])
        adapter = make_adapter(stats_handler(player_info=empty))

        with pytest.raises(PlayerNotFound):
            await adapter.resolve_player("999999999")


class TestGameLog:
    """Test suite for playergamelog normalization."""

    @pytest.mark.asyncio
    async def test_fetch_game_log(self):
        rows = [
            game_row(12, "GSW @ LAL", pts=31, minutes="36:30", wl="L"),
            game_row(10, "GSW vs. BOS", pts=22, minutes="34", wl="W"),
            game_row(8, "GSW vs. NYK", pts=18, minutes=30, wl="W"),
        ]
        adapter = make_adapter(stats_handler(game_rows=rows))

        identity, series = await adapter.fetch_game_log("Stephen Curry")

        assert identity.provider_id == 201939
        assert [game.sequence_number for game in series] == [1, 2, 3]
        assert [game.points for game in series] == [31, 22, 18]

        latest = series[0]
        assert latest.date == date(2025, 11, 12)
        assert latest.opponent_abbreviation == "LAL"
        assert latest.is_home is False
        assert latest.minutes == 36.5
        assert latest.result == "L"

        assert series[1].is_home is True
        assert series[1].minutes == 34.0
        assert series[2].minutes == 30.0

    @pytest.mark.asyncio
    async def test_game_log_capped_at_limit(self):
        rows = [game_row(day, pts=day) for day in range(28, 14, -1)]  # 14 games
        adapter = make_adapter(stats_handler(game_rows=rows))

        _, series = await adapter.fetch_game_log("Stephen Curry")

        assert len(series) == 10
        # Newest first, as NBA.com returns them
        assert series[0].points == 28
        assert series[9].points == 19

    @pytest.mark.asyncio
    async def test_game_log_request(self):
        calls = []
        adapter = make_adapter(stats_handler(game_rows=[], calls=calls))

        _, series = await adapter.fetch_game_log("201939")

        log_request = calls[-1]
        assert log_request.url.path.endswith("/playergamelog")
        assert log_request.url.params["PlayerID"] == "201939"
        assert log_request.url.params["SeasonType"] == "Regular Season"
        assert len(series) == 0

    @pytest.mark.asyncio
    async def test_missing_pts_column_is_parse_error(self):
        def handler(request):
            if request.url.path.endswith("/playergamelog"):
                return json_response(result_set(["GAME_DATE", "MATCHUP"], [["NOV 12, 2025", "GSW vs. LAL"]]))
            return stats_handler()(request)

        adapter = make_adapter(handler)

        with pytest.raises(ParseError):
            await adapter.fetch_game_log("Stephen Curry")

    @pytest.mark.asyncio
    async def test_rows_without_points_are_skipped(self):
        rows = [
            game_row(12, pts=31),
            game_row(11, pts=None),
            game_row(10, pts="DNP"),
            game_row(8, pts=18),
        ]
        adapter = make_adapter(stats_handler(game_rows=rows))

        _, series = await adapter.fetch_game_log("Stephen Curry")

        assert [game.points for game in series] == [31, 18]
        assert [game.sequence_number for game in series] == [1, 2]
        assert series[1].date == date(2025, 11, 8)

    @pytest.mark.asyncio
    async def test_cap_counts_only_usable_games(self):
        rows = [game_row(28, pts=None)] + [game_row(day, pts=day) for day in range(27, 14, -1)]
        adapter = make_adapter(stats_handler(game_rows=rows))

        _, series = await adapter.fetch_game_log("Stephen Curry")

        assert len(series) == 10
        assert series[0].points == 27


class TestMalformedPayloads:
    """Test suite for payload shapes that must surface as ParseError."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [
        {"resultSets": ["junk"]},
        {"resultSets": [None]},
        {"resultSets": [{"name": "CommonAllPlayers", "headers": ["PERSON_ID"], "rowSet": [None]}]},
        {"resultSets": [{"name": "CommonAllPlayers", "headers": ["PERSON_ID"], "rowSet": ["201939"]}]},
    ])
    async def test_malformed_result_sets(self, payload):
        adapter = make_adapter(lambda request: json_response(payload))

        with pytest.raises(ParseError) as exc_info:
            await adapter.fetch_game_log("Stephen Curry")

        assert exc_info.value.adapter == "nba_stats"

    def test_named_result_set_lookup_rejects_junk_entries(self):
        payload = {"resultSets": [{"name": "Other", "headers": [], "rowSet": []}, "junk"]}

        with pytest.raises(ParseError):
            result_set_rows(payload, "nba_stats", name="PlayerGameLog")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("person_id", [None, "abc"])
    async def test_invalid_person_id(self, person_id):
        players = result_set(
            ["PERSON_ID", "DISPLAY_FIRST_LAST", "TEAM_ABBREVIATION"],
            [[person_id, "Stephen Curry", "GSW"]],
            name="CommonAllPlayers",
        )
        adapter = make_adapter(lambda request: json_response(players))

        with pytest.raises(ParseError):
            await adapter.fetch_game_log("Stephen Curry")


class TestTransportErrors:
    """Test suite for upstream failure mapping."""

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        adapter = make_adapter(handler)

        with pytest.raises(UpstreamTransportError) as exc_info:
            await adapter.fetch_game_log("Stephen Curry")

        assert exc_info.value.timed_out is True
        assert exc_info.value.adapter == "nba_stats"

    @pytest.mark.asyncio
    async def test_http_status(self):
        adapter = make_adapter(lambda request: httpx.Response(500))

        with pytest.raises(UpstreamTransportError) as exc_info:
            await adapter.fetch_game_log("Stephen Curry")

        assert exc_info.value.status == 500
        assert not isinstance(exc_info.value, ParseError)

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        adapter = make_adapter(lambda request: httpx.Response(200, content=b"<html>blocked</html>"))

        with pytest.raises(ParseError):
            await adapter.fetch_game_log("Stephen Curry")

    @pytest.mark.asyncio
    async def test_missing_result_sets(self):
        adapter = make_adapter(lambda request: json_response({"resource": "commonallplayers"}))

        with pytest.raises(ParseError):
            await adapter.fetch_game_log("Stephen Curry")


class TestFieldParsers:
    """Test suite for per-field normalization."""

    @pytest.mark.parametrize("value,expected", [
        ("NOV 12, 2025", date(2025, 11, 12)),
        ("Nov 12, 2025", date(2025, 11, 12)),
        ("2025-11-12", date(2025, 11, 12)),
        ("2025-11-12T00:00:00", date(2025, 11, 12)),
        ("20251112", date(2025, 11, 12)),
        ("yesterday", None),
        (None, None),
    ])
    def test_parse_game_date(self, value, expected):
        assert parse_game_date(value) == expected

    @pytest.mark.parametrize("value,expected", [
        ("34:30", 34.5), ("34", 34.0), (34, 34.0), (None, 0.0), ("", 0.0), ("DNP", 0.0),
    ])
    def test_parse_minutes(self, value, expected):
        assert parse_minutes(value) == expected

    @pytest.mark.parametrize("value,expected", [
        (31, 31), ("31", 31), (None, None), ("", None), ("DNP", None), (-2, 0), (27.0, 27),
    ])
    def test_parse_points(self, value, expected):
        assert parse_points(value) == expected
