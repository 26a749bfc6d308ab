"""Team identity resolution across providers.

NBA.com, ESPN and The Odds API name the same franchise differently:

    NBA.com   ESPN   The Odds API
    GSW       GS     Golden State Warriors
    NYK       NY     New York Knicks
    SAS       SA     San Antonio Spurs
    NOP       NO     New Orleans Pelicans
    UTA       UTAH   Utah Jazz
    WAS       WSH    Washington Wizards

The canonical vocabulary is the NBA.com tricode. All lookups are pure
functions over constant tables; unknown inputs resolve to None rather than
raising, so enrichment can never abort a request.
"""
from typing import Dict, NamedTuple, Optional

from hoopforecast.models.forecast import TeamInfo
from hoopforecast.services.forecast.utils.name_normalizer import normalize_team_name

NBA_LOGO_URL = "https://cdn.nba.com/logos/nba/{nba_team_id}/global/L/logo.svg"

# Placeholder values providers use when a player has no team
PLACEHOLDER_ABBREVIATIONS = frozenset({"", "N/A", "NA", "FA", "NONE"})


class Team(NamedTuple):
    abbreviation: str
    display_name: str
    nba_team_id: int
    espn_team_id: str
    espn_abbreviation: str
    odds_api_name: str


TEAMS = (
    Team("ATL", "Atlanta Hawks", 1610612737, "1", "ATL", "Atlanta Hawks"),
    Team("BOS", "Boston Celtics", 1610612738, "2", "BOS", "Boston Celtics"),
    Team("BKN", "Brooklyn Nets", 1610612751, "17", "BKN", "Brooklyn Nets"),
    Team("CHA", "Charlotte Hornets", 1610612766, "30", "CHA", "Charlotte Hornets"),
    Team("CHI", "Chicago Bulls", 1610612741, "4", "CHI", "Chicago Bulls"),
    Team("CLE", "Cleveland Cavaliers", 1610612739, "5", "CLE", "Cleveland Cavaliers"),
    Team("DAL", "Dallas Mavericks", 1610612742, "6", "DAL", "Dallas Mavericks"),
    Team("DEN", "Denver Nuggets", 1610612743, "7", "DEN", "Denver Nuggets"),
    Team("DET", "Detroit Pistons", 1610612765, "8", "DET", "Detroit Pistons"),
    Team("GSW", "Golden State Warriors", 1610612744, "9", "GS", "Golden State Warriors"),
    Team("HOU", "Houston Rockets", 1610612745, "10", "HOU", "Houston Rockets"),
    Team("IND", "Indiana Pacers", 1610612754, "11", "IND", "Indiana Pacers"),
    Team("LAC", "LA Clippers", 1610612746, "12", "LAC", "Los Angeles Clippers"),
    Team("LAL", "Los Angeles Lakers", 1610612747, "13", "LAL", "Los Angeles Lakers"),
    Team("MEM", "Memphis Grizzlies", 1610612763, "29", "MEM", "Memphis Grizzlies"),
    Team("MIA", "Miami Heat", 1610612748, "14", "MIA", "Miami Heat"),
    Team("MIL", "Milwaukee Bucks", 1610612749, "15", "MIL", "Milwaukee Bucks"),
    Team("MIN", "Minnesota Timberwolves", 1610612750, "16", "MIN", "Minnesota Timberwolves"),
    Team("NOP", "New Orleans Pelicans", 1610612740, "3", "NO", "New Orleans Pelicans"),
    Team("NYK", "New York Knicks", 1610612752, "18", "NY", "New York Knicks"),
    Team("OKC", "Oklahoma City Thunder", 1610612760, "25", "OKC", "Oklahoma City Thunder"),
    Team("ORL", "Orlando Magic", 1610612753, "19", "ORL", "Orlando Magic"),
    Team("PHI", "Philadelphia 76ers", 1610612755, "20", "PHI", "Philadelphia 76ers"),
    Team("PHX", "Phoenix Suns", 1610612756, "21", "PHX", "Phoenix Suns"),
    Team("POR", "Portland Trail Blazers", 1610612757, "22", "POR", "Portland Trail Blazers"),
    Team("SAC", "Sacramento Kings", 1610612758, "23", "SAC", "Sacramento Kings"),
    Team("SAS", "San Antonio Spurs", 1610612759, "24", "SA", "San Antonio Spurs"),
    Team("TOR", "Toronto Raptors", 1610612761, "28", "TOR", "Toronto Raptors"),
    Team("UTA", "Utah Jazz", 1610612762, "26", "UTAH", "Utah Jazz"),
    Team("WAS", "Washington Wizards", 1610612764, "27", "WSH", "Washington Wizards"),
)

# Historical / third-party abbreviations not covered by the ESPN column
_EXTRA_ALIASES = {
    "PHO": "PHX",
    "BRK": "BKN",
    "CHO": "CHA",
    "NOH": "NOP",
    "GOS": "GSW",
    "UTH": "UTA",
}

_TEAMS_BY_ABBREVIATION: Dict[str, Team] = {team.abbreviation: team for team in TEAMS}

_ALIASES: Dict[str, str] = {
    **{team.abbreviation: team.abbreviation for team in TEAMS},
    **{team.espn_abbreviation: team.abbreviation for team in TEAMS},
    **_EXTRA_ALIASES,
}

_TEAMS_BY_NAME: Dict[str, Team] = {
    **{normalize_team_name(team.display_name): team for team in TEAMS},
    **{normalize_team_name(team.odds_api_name): team for team in TEAMS},
}


def is_placeholder(abbreviation: Optional[str]) -> bool:
    """True for empty/"N/A"-style team values that identify no team."""
    return (abbreviation or "").strip().upper() in PLACEHOLDER_ABBREVIATIONS


def canonical_abbreviation(abbreviation: Optional[str]) -> Optional[str]:
    """
    Map any provider abbreviation to the NBA.com tricode.

    Examples:
        >>> canonical_abbreviation("GS")
        'GSW'
        >>> canonical_abbreviation("utah")
        'UTA'
        >>> canonical_abbreviation("XYZ") is None
        True
    """
    if not abbreviation:
        return None
    return _ALIASES.get(abbreviation.strip().upper())


def get_team(abbreviation: Optional[str]) -> Optional[Team]:
    canonical = canonical_abbreviation(abbreviation)
    if canonical is None:
        return None
    return _TEAMS_BY_ABBREVIATION[canonical]


def espn_team_id(abbreviation: Optional[str]) -> Optional[str]:
    """ESPN numeric team id (as a string) for any provider abbreviation."""
    team = get_team(abbreviation)
    return team.espn_team_id if team else None


def team_from_odds_name(name: Optional[str]) -> Optional[Team]:
    """Resolve a full team name as published by The Odds API."""
    if not name:
        return None
    return _TEAMS_BY_NAME.get(normalize_team_name(name))


def resolve_team(abbreviation: Optional[str]) -> TeamInfo:
    """
    Resolve an abbreviation to display enrichment.

    Unknown abbreviations keep the raw value (upper-cased) with a null
    display name and logo.
    """
    team = get_team(abbreviation)
    if team is None:
        raw = (abbreviation or "").strip().upper()
        return TeamInfo(abbreviation=raw or None)

    return TeamInfo(
        abbreviation=team.abbreviation,
        display_name=team.display_name,
        logo_url=NBA_LOGO_URL.format(nba_team_id=team.nba_team_id),
    )
