"""Name normalization utilities for player and team name matching.

Providers spell the same player differently:
- Suffixes: "Jaren Jackson Jr." vs "Jaren Jackson"
- Punctuation: "P.J. Washington" → "PJ Washington"
- Accents: "Nikola Jokić" → "Nikola Jokic"
- Case and spacing: "LEBRON  JAMES" → "lebron james"
"""
import re
import unicodedata
from typing import Tuple

from rapidfuzz import fuzz

# Common name suffixes that should be removed for comparison
SUFFIXES = {'jr', 'sr', 'ii', 'iii', 'iv', 'v'}

# WRatio score at or above which two normalized names are the same player
FUZZY_MATCH_THRESHOLD = 90


def normalize(name: str) -> str:
    """
    Normalize a player name for comparison.

    Examples:
        >>> normalize("P.J. Washington")
        'pj washington'
        >>> normalize("Jaren Jackson Jr.")
        'jaren jackson'
        >>> normalize("Luka Dončić")
        'luka doncic'
    """
    if not name:
        return ""

    name = _remove_suffix(name)
    name = _strip_accents(name)
    name = name.lower()
    name = re.sub(r'[^\w\s]', '', name)

    return ' '.join(name.split())


def normalize_team_name(team_name: str) -> str:
    """Lowercase, strip punctuation and collapse whitespace in a team name."""
    if not team_name:
        return ""

    normalized = re.sub(r'[^\w\s]', '', team_name.lower())
    return ' '.join(normalized.split())


def name_similarity(name1: str, name2: str) -> float:
    """WRatio similarity (0-100) between two names after normalization."""
    norm1 = normalize(name1)
    norm2 = normalize(name2)
    if not norm1 or not norm2:
        return 0.0
    return fuzz.WRatio(norm1, norm2)


def are_names_equal(name1: str, name2: str, fuzzy: bool = False) -> bool:
    """
    Check if two names refer to the same player.

    Args:
        name1: First name
        name2: Second name
        fuzzy: Also accept a WRatio score >= FUZZY_MATCH_THRESHOLD

    Returns:
        True if names match after normalization
    """
    norm1 = normalize(name1)
    norm2 = normalize(name2)

    if not norm1 or not norm2:
        return False

    if norm1 == norm2:
        return True

    if fuzzy:
        return fuzz.WRatio(norm1, norm2) >= FUZZY_MATCH_THRESHOLD

    return False


def split_player_name(name: str) -> Tuple[str, str]:
    """
    Split a display name into first and last name.

    The first word is the first name; everything after it, suffix included,
    is the last name:
    - "Jayson Tatum" → ("Jayson", "Tatum")
    - "Jaren Jackson Jr." → ("Jaren", "Jackson Jr.")
    - "Nene" → ("Nene", "")
    """
    parts = (name or "").split()

    if not parts:
        return ("", "")

    return (parts[0], ' '.join(parts[1:]))


def _remove_suffix(name: str) -> str:
    parts = name.split()

    if len(parts) > 1 and parts[-1].lower().replace('.', '') in SUFFIXES:
        return ' '.join(parts[:-1])

    return name


def _strip_accents(name: str) -> str:
    """Convert 'č' → 'c', 'ś' → 's', 'ž' → 'z', etc."""
    normalized = unicodedata.normalize('NFD', name)
    return ''.join(
        c for c in normalized
        if unicodedata.category(c) != 'Mn'
    )
