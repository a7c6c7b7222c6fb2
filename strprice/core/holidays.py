"""Holiday and rental-week calendar utilities.

Computes the six standard anchor holidays for a year and answers the single
question every other component relies on: which rental week a date belongs to.
Weekdays in this module use the 0=Sunday ... 6=Saturday numbering of the
``week_start_day`` setting.
"""

from datetime import date, timedelta
from typing import Dict, List, Mapping, Optional
import calendar

from .models import AnchorDate, AnchorRelationship, DateKind, Week, WEEK_LENGTH


SUNDAY, MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY = range(7)

# Fixed iteration order; the nearest-anchor tie-break depends on it
STANDARD_HOLIDAY_KEYS = (
    "new_years_day",
    "memorial_day",
    "independence_day",
    "labor_day",
    "thanksgiving",
    "christmas_day",
)


def day_of_week(d: date) -> int:
    """Weekday of ``d`` with 0=Sunday and 6=Saturday."""
    return d.isoweekday() % 7


def holidays_for_year(year: int) -> Dict[str, AnchorDate]:
    """Get the six standard anchor holidays for a year, in fixed order."""
    return {
        "new_years_day": AnchorDate(
            key="new_years_day", name="New Year's Day", date=date(year, 1, 1), kind=DateKind.FIXED
        ),
        "memorial_day": AnchorDate(
            key="memorial_day", name="Memorial Day",
            date=_get_last_weekday(year, 5, MONDAY),  # Last Monday in May
            kind=DateKind.FLOATING,
        ),
        "independence_day": AnchorDate(
            key="independence_day", name="July 4th", date=date(year, 7, 4), kind=DateKind.FIXED
        ),
        "labor_day": AnchorDate(
            key="labor_day", name="Labor Day",
            date=_get_nth_weekday(year, 9, MONDAY, 1),  # 1st Monday in September
            kind=DateKind.FLOATING,
        ),
        "thanksgiving": AnchorDate(
            key="thanksgiving", name="Thanksgiving",
            date=_get_nth_weekday(year, 11, THURSDAY, 4),  # 4th Thursday in November
            kind=DateKind.FLOATING,
        ),
        "christmas_day": AnchorDate(
            key="christmas_day", name="Christmas", date=date(year, 12, 25), kind=DateKind.FIXED
        ),
    }


def week_containing(target_date: date, week_start_day: int = SATURDAY) -> Week:
    """Get the rental week that ``target_date`` falls into."""
    days_back = (day_of_week(target_date) - week_start_day + 7) % 7
    return Week.from_start(target_date - timedelta(days=days_back))


def weeks_for_year(year: int, week_start_day: int = SATURDAY) -> List[Week]:
    """All rental weeks whose start date falls in ``year``."""
    current = week_containing(date(year, 1, 1), week_start_day).start
    if current.year < year:
        current += WEEK_LENGTH

    weeks = []
    while current.year == year:
        weeks.append(Week.from_start(current))
        current += WEEK_LENGTH
    return weeks


def week_key(d: date) -> str:
    return d.isoformat()


def parse_week_key(key: str) -> date:
    year, month, day = (int(part) for part in key[:10].split("-"))
    return date(year, month, day)


def format_date_short(d: date) -> str:
    """Format as "May 26"."""
    return f"{d.strftime('%b')} {d.day}"


def format_week_range(start: date, end: date) -> str:
    """Format as "May 24 - May 31"."""
    return f"{format_date_short(start)} - {format_date_short(end)}"


def describe_relationship(name: str, weeks_away: int) -> str:
    if weeks_away == 0:
        return f"{name} week"
    n = abs(weeks_away)
    unit = "week" if n == 1 else "weeks"
    direction = "after" if weeks_away > 0 else "before"
    return f"{n} {unit} {direction} {name}"


def relationship_of(
    week_start: date,
    anchors: Mapping[str, AnchorDate],
    week_start_day: int = SATURDAY,
) -> Optional[AnchorRelationship]:
    """Find the anchor nearest to ``week_start`` by whole-week distance.

    Ties go to the anchor that comes first in ``anchors``. Returns None when
    there are no anchors at all.
    """
    nearest: Optional[AnchorDate] = None
    weeks_away = 0

    for anchor in anchors.values():
        anchor_week = week_containing(anchor.date, week_start_day)
        diff_weeks = round((week_start - anchor_week.start).days / 7)

        if nearest is None or abs(diff_weeks) < abs(weeks_away):
            nearest = anchor
            weeks_away = diff_weeks

    if nearest is None:
        return None

    return AnchorRelationship(
        anchor=nearest,
        relationship=describe_relationship(nearest.name, weeks_away),
        weeks_away=weeks_away,
    )


def _get_nth_weekday(year: int, month: int, weekday: int, n: int) -> date:
    """Get the nth occurrence of a weekday in a month.

    Args:
        year: Year
        month: Month (1-12)
        weekday: Day of week (0=Sunday, 6=Saturday)
        n: Which occurrence (1=first, 2=second, etc.)
    """
    count = 0
    for day in range(1, calendar.monthrange(year, month)[1] + 1):
        current = date(year, month, day)
        if day_of_week(current) == weekday:
            count += 1
            if count == n:
                return current
    raise ValueError(f"Month {year}-{month:02d} has no occurrence {n} of weekday {weekday}")


def _get_last_weekday(year: int, month: int, weekday: int) -> date:
    """Get the last occurrence of a weekday in a month, scanning back from month end."""
    current = date(year, month, calendar.monthrange(year, month)[1])
    while day_of_week(current) != weekday:
        current -= timedelta(days=1)
    return current
