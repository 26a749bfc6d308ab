"""Parser for NBA.com matchup strings.

Grammar::

    MATCHUP  := TEAM SEP TEAM [trailing text]
    SEP      := "vs." | "vs" | "@"
    TEAM     := 2-4 letters

The first team is always the player's team, the second the opponent.
``vs.`` marks a home game, ``@`` an away game:

    "GSW vs. LAL"  → opponent LAL, home
    "GSW @ LAL"    → opponent LAL, away

Anything that does not match the grammar falls back to opponent ``N/A``
and away.
"""
import re
from typing import NamedTuple, Optional

UNKNOWN_OPPONENT = "N/A"

_MATCHUP_RE = re.compile(
    r'^\s*(?P<team>[A-Za-z]{2,4})\s*(?P<sep>vs\.?|@)\s*(?P<opponent>[A-Za-z]{2,4})\b',
    re.IGNORECASE,
)


class Matchup(NamedTuple):
    team: Optional[str]
    opponent: str
    is_home: bool


def parse_matchup(matchup: Optional[str]) -> Matchup:
    """
    Split a matchup string into (team, opponent, is_home).

    Examples:
        >>> parse_matchup("GSW vs. LAL")
        Matchup(team='GSW', opponent='LAL', is_home=True)
        >>> parse_matchup("GSW @ LAL")
        Matchup(team='GSW', opponent='LAL', is_home=False)
        >>> parse_matchup("TBD")
        Matchup(team=None, opponent='N/A', is_home=False)
    """
    match = _MATCHUP_RE.match(matchup or "")
    if not match:
        return Matchup(team=None, opponent=UNKNOWN_OPPONENT, is_home=False)

    return Matchup(
        team=match.group("team").upper(),
        opponent=match.group("opponent").upper(),
        is_home=match.group("sep") != "@",
    )
