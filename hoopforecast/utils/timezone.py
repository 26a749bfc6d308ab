"""
Timezone and season utilities.

Upstream schedules are published in UTC; fixture dates and "today" are
evaluated on the US/Eastern calendar, where NBA games are scheduled.

Eastern Time Zones:
- EST (Eastern Standard Time): UTC-5, November - March
- EDT (Eastern Daylight Time): UTC-4, March - November
- DST transitions: Second Sunday in March → First Sunday in November
"""
from datetime import date, datetime, timezone, timedelta
from typing import Optional, Tuple

EASTERN_STANDARD_OFFSET = timedelta(hours=-5)  # EST is UTC-5
EASTERN_DAYLIGHT_OFFSET = timedelta(hours=-4)  # EDT is UTC-4

# NBA season rolls over in October (e.g., Oct 2026 starts "2026-27")
SEASON_START_MONTH = 10


def parse_utc(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp as an aware UTC datetime.

    Accepts the ``Z`` suffix and ESPN's minute-precision form
    (``2026-10-21T23:30Z``). Returns None for empty or unparsable input.
    """
    if not value:
        return None

    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def utc_to_eastern(utc_datetime: Optional[datetime]) -> Optional[datetime]:
    """
    Convert UTC datetime to Eastern Time (EST/EDT).

    Args:
        utc_datetime: UTC datetime (naive or timezone-aware)

    Returns:
        Eastern Time datetime as naive datetime

    Examples (EST is 5 hours behind UTC, EDT 4):
        >>> utc_to_eastern(datetime(2026, 2, 1, 0, 30))
        datetime.datetime(2026, 1, 31, 19, 30)
        >>> utc_to_eastern(datetime(2025, 7, 15, 23, 0))
        datetime.datetime(2025, 7, 15, 19, 0)
    """
    if utc_datetime is None:
        return None

    if utc_datetime.tzinfo is None:
        utc_datetime = utc_datetime.replace(tzinfo=timezone.utc)
    else:
        utc_datetime = utc_datetime.astimezone(timezone.utc)

    dst_start, dst_end = _get_dst_transitions_eastern(utc_datetime.year)
    offset = EASTERN_DAYLIGHT_OFFSET if dst_start <= utc_datetime < dst_end else EASTERN_STANDARD_OFFSET

    return (utc_datetime + offset).replace(tzinfo=None)


def eastern_today(now: Optional[datetime] = None) -> date:
    """Today's calendar date in Eastern Time."""
    return utc_to_eastern(now or datetime.now(timezone.utc)).date()


def current_season(today: Optional[date] = None) -> str:
    """
    NBA season string for a date.

    Examples:
        >>> current_season(date(2026, 10, 19))
        '2026-27'
        >>> current_season(date(2027, 3, 1))
        '2026-27'
    """
    today = today or eastern_today()
    start_year = today.year if today.month >= SEASON_START_MONTH else today.year - 1
    return f"{start_year}-{str(start_year + 1)[-2:]}"


def format_fixture_date(eastern_dt: datetime) -> str:
    """Format as ``Oct 21, 2026``."""
    return f"{eastern_dt.strftime('%b')} {eastern_dt.day}, {eastern_dt.year}"


def format_fixture_time(eastern_dt: datetime) -> str:
    """
    Format as ``7:30 PM ET``.

    Midnight means the upstream published a date without a tip-off time,
    which is reported as ``TBD``.
    """
    if eastern_dt.hour == 0 and eastern_dt.minute == 0:
        return "TBD"

    hour = eastern_dt.hour % 12 or 12
    suffix = "AM" if eastern_dt.hour < 12 else "PM"
    return f"{hour}:{eastern_dt.minute:02d} {suffix} ET"


def _get_dst_transitions_eastern(year: int) -> Tuple[datetime, datetime]:
    """
    Get DST transition instants for a given year (Eastern Time).

    DST starts: Second Sunday in March at 2:00 AM local time
    DST ends: First Sunday in November at 2:00 AM local time

    Returns:
        Tuple of (dst_start, dst_end) as aware UTC datetimes
    """
    def find_nth_sunday(year: int, month: int, n: int) -> datetime:
        """Find the nth Sunday of the given month."""
        day = 1
        sunday_count = 0
        while True:
            dt = datetime(year, month, day)
            if dt.weekday() == 6:  # Sunday
                sunday_count += 1
                if sunday_count == n:
                    return dt
            day += 1

    # Second Sunday in March at 2:00 AM EST = 7:00 AM UTC
    dst_start_local = find_nth_sunday(year, 3, 2).replace(hour=2)
    dst_start_utc = (dst_start_local + timedelta(hours=5)).replace(tzinfo=timezone.utc)

    # First Sunday in November at 2:00 AM EDT = 6:00 AM UTC
    dst_end_local = find_nth_sunday(year, 11, 1).replace(hour=2)
    dst_end_utc = (dst_end_local + timedelta(hours=4)).replace(tzinfo=timezone.utc)

    return dst_start_utc, dst_end_utc
