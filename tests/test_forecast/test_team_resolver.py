"""Unit tests for cross-provider team resolution.

Test Strategy:
1. Test canonical abbreviations for ESPN and historical codes
2. Test display enrichment (name, logo)
3. Test provider id lookups (ESPN id, Odds API name)
4. Test unknown and placeholder values never raise
"""
import pytest

from hoopforecast.services.forecast.matchers.team_resolver import (
    TEAMS,
    canonical_abbreviation,
    espn_team_id,
    is_placeholder,
    resolve_team,
    team_from_odds_name,
)


class TestCanonicalAbbreviation:
    """Test suite for abbreviation normalization."""

    @pytest.mark.parametrize("raw,expected", [
        ("GS", "GSW"),
        ("NY", "NYK"),
        ("SA", "SAS"),
        ("NO", "NOP"),
        ("UTAH", "UTA"),
        ("WSH", "WAS"),
        ("PHO", "PHX"),
        ("BRK", "BKN"),
        ("CHO", "CHA"),
    ])
    def test_provider_divergences(self, raw, expected):
        assert canonical_abbreviation(raw) == expected

    def test_canonical_codes_map_to_themselves(self):
        for team in TEAMS:
            assert canonical_abbreviation(team.abbreviation) == team.abbreviation

    def test_case_and_whitespace_insensitive(self):
        assert canonical_abbreviation(" gs ") == "GSW"

    @pytest.mark.parametrize("raw", [None, "", "XYZ", "N/A"])
    def test_unknown_is_none(self, raw):
        assert canonical_abbreviation(raw) is None

    def test_thirty_distinct_teams(self):
        assert len({team.abbreviation for team in TEAMS}) == 30
        assert len({team.espn_team_id for team in TEAMS}) == 30


class TestResolveTeam:
    """Test suite for display enrichment."""

    def test_known_team(self):
        info = resolve_team("GS")

        assert info.abbreviation == "GSW"
        assert info.display_name == "Golden State Warriors"
        assert info.logo_url == "https://cdn.nba.com/logos/nba/1610612744/global/L/logo.svg"

    def test_unknown_team_keeps_raw_value(self):
        """Unknown abbreviations never raise; name and logo are null."""
        info = resolve_team("xyz")

        assert info.abbreviation == "XYZ"
        assert info.display_name is None
        assert info.logo_url is None

    def test_missing_team(self):
        info = resolve_team(None)

        assert info.abbreviation is None
        assert info.display_name is None


class TestProviderLookups:
    """Test suite for ESPN and Odds API identifiers."""

    def test_espn_team_id(self):
        assert espn_team_id("GSW") == "9"
        assert espn_team_id("UTAH") == "26"
        assert espn_team_id("XYZ") is None

    def test_odds_name_lookup(self):
        assert team_from_odds_name("Los Angeles Clippers").abbreviation == "LAC"
        assert team_from_odds_name("LA Clippers").abbreviation == "LAC"
        assert team_from_odds_name("philadelphia 76ers").abbreviation == "PHI"

    def test_odds_name_unknown(self):
        assert team_from_odds_name("Seattle SuperSonics") is None
        assert team_from_odds_name(None) is None

    @pytest.mark.parametrize("value,expected", [
        ("", True), (None, True), ("N/A", True), ("fa", True), ("GSW", False),
    ])
    def test_is_placeholder(self, value, expected):
        assert is_placeholder(value) is expected
