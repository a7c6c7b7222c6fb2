"""Pricing arithmetic: price parsing, season adjustments, commission grossup
and nightly distribution.

Rounding rules:
- List prices and nightly rates always round UP to the next whole dollar.
- Season-adjusted prices round to the nearest $10.
"""

from datetime import date
from typing import Any, Callable, Dict, List, Optional, Sequence
import math
import re

from .config import NightlyWeights, PricingSettings, Season
from .models import Price


DAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_price(value: Price) -> float:
    """Parse "$3,500"-style input.

    Empty input parses as 0 and non-numeric input as NaN. Anything after the
    leading integer (cents, trailing text) is ignored.
    """
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return int(value) if math.isfinite(value) else math.nan

    match = _LEADING_INT.match(str(value).replace("$", "").replace(",", ""))
    if match is None:
        return math.nan
    return int(match.group(1))


def numeric_price(value: Price) -> Optional[float]:
    """Parsed price, or None when it is missing or non-numeric."""
    if value is None or value == "":
        return None
    parsed = parse_price(value)
    return None if math.isnan(parsed) else parsed


def format_price(amount: float) -> str:
    return f"${int(amount):,}"


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def round_to_nearest_10(price: float) -> int:
    return round_half_up(price / 10) * 10


def calculate_list_price(net_price: float, commission_rate: float) -> float:
    """List price that nets ``net_price`` after commission (grossup).

    >>> calculate_list_price(3500, 0.155)
    4143
    """
    if commission_rate >= 1:
        return net_price
    return math.ceil(net_price / (1 - commission_rate))


def calculate_adjusted_price(base_price: float, percentage: float) -> int:
    """Apply a season percentage (10 = +10%) and round to the nearest $10."""
    return round_to_nearest_10(base_price * (1 + percentage / 100))


def calculate_nightly_rates(weekly_rate: float, weights: NightlyWeights) -> Dict[str, int]:
    weight_map = weights.model_dump()
    return {day: math.ceil(weekly_rate * weight_map[day] / 100) for day in DAYS}


def season_for_date(seasons: Sequence[Season], d: date) -> Optional[Season]:
    """First season whose month/day window contains ``d``; the year is ignored."""
    point = (d.month, d.day)
    for season in seasons:
        if (season.start_month, season.start_day) <= point <= (season.end_month, season.end_day):
            return season
    return None


def season_percentage_lookup(seasons: Sequence[Season]) -> Callable[[date], float]:
    """Build the season-adjustment capability consumed by ``apply_resolutions``."""

    def percentage_for(d: date) -> float:
        season = season_for_date(seasons, d)
        return season.percentage if season else 0.0

    return percentage_for


def platform_rates(
    net_weekly: float,
    settings: Optional[PricingSettings] = None,
    week_start: Optional[date] = None,
) -> List[Dict[str, Any]]:
    """List prices per enabled platform for one week's net rate.

    Nightly rates are distributed from each platform's list price and are left
    out (None) when ``week_start`` falls in a weekly-only season.
    """
    settings = settings or PricingSettings()
    season = season_for_date(settings.seasons, week_start) if week_start else None
    weekly_only = bool(season and season.weekly_only)

    rates = []
    for platform in settings.platforms:
        if not platform.enabled:
            continue
        list_price = calculate_list_price(net_weekly, platform.commission)
        rates.append({
            "platform": platform.key,
            "commission": platform.commission,
            "list_price": list_price,
            "nightly_rates": None if weekly_only else calculate_nightly_rates(list_price, settings.nightly_weights),
        })
    return rates
