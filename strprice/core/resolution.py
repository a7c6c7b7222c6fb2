"""Apply user-chosen conflict resolutions to a mapping set."""

from datetime import date, timedelta
from typing import Callable, Dict, List, Optional, Sequence

from ..logging_setup import get_logger
from .holidays import parse_week_key
from .models import CollisionConflict, GapConflict, Mapping, Price, Week
from .pricing import calculate_adjusted_price, format_price, numeric_price

logger = get_logger(__name__)

GAP_FILL_RANGE = "N/A (gap fill)"

SeasonPercentage = Callable[[date], float]


def apply_resolutions(
    mappings: Sequence[Mapping],
    conflicts: Sequence,
    season_percentage: Optional[SeasonPercentage] = None,
) -> List[Mapping]:
    """Rewrite ``mappings`` according to the resolved ``conflicts``.

    Unresolved conflicts and strategy reversals leave mappings untouched.
    The result keeps only mappings with a target, sorted by target start.
    When ``season_percentage`` is given, every price written by a resolution
    is season-adjusted for its target week.
    """
    resolved: List[Mapping] = list(mappings)
    gap_fills: List[Mapping] = []

    for conflict in conflicts:
        if not conflict.resolved or conflict.resolution is None:
            continue
        if isinstance(conflict, CollisionConflict):
            resolved = _resolve_collision(resolved, conflict, season_percentage)
        elif isinstance(conflict, GapConflict):
            fill = _fill_gap(conflict, season_percentage)
            if fill is not None:
                gap_fills.append(fill)

    return sorted(
        (m for m in [*resolved, *gap_fills] if m.target is not None),
        key=lambda m: m.target.start,
    )


def _adjust(price: Price, target_start: date, season_percentage: Optional[SeasonPercentage]) -> Price:
    if season_percentage is None:
        return price
    amount = numeric_price(price)
    if amount is None:
        return price
    return format_price(calculate_adjusted_price(amount, season_percentage(target_start)))


def _resolve_collision(
    mappings: List[Mapping],
    conflict: CollisionConflict,
    season_percentage: Optional[SeasonPercentage],
) -> List[Mapping]:
    resolution = conflict.resolution
    contributors = [i for i, m in enumerate(mappings) if m.target is not None and m.target.key == conflict.target_week]
    if not contributors:
        return mappings

    if resolution.value == "custom":
        if resolution.custom_price in (None, ""):
            logger.warning("Collision at %s resolved as custom without a price; skipped", conflict.target_week)
            return mappings
        keep = contributors[0]
        price = resolution.custom_price
    elif resolution.source_index is not None and resolution.source_index >= 0:
        ranges: Dict[Optional[str], int] = {}
        for pos, colliding in enumerate(conflict.mappings):
            ranges.setdefault(colliding.source_range, pos)
        matches = [i for i in contributors if ranges.get(mappings[i].source_range) == resolution.source_index]
        if not matches:
            logger.warning(
                "Collision at %s: no contributing mapping at index %d; skipped",
                conflict.target_week, resolution.source_index,
            )
            return mappings
        keep = matches[0]
        price = resolution.value
    else:
        logger.warning("Collision at %s has no usable resolution; skipped", conflict.target_week)
        return mappings

    kept = mappings[keep]
    replacement = kept.model_copy(update={
        "proposed_price": _adjust(price, kept.target.start, season_percentage),
    })
    dropped = set(contributors) - {keep}
    return [replacement if i == keep else m for i, m in enumerate(mappings) if i not in dropped]


def _fill_gap(conflict: GapConflict, season_percentage: Optional[SeasonPercentage]) -> Optional[Mapping]:
    resolution = conflict.resolution
    if resolution.value == "custom":
        price = resolution.custom_price
    elif resolution.value == "interpolate":
        price = resolution.interpolated_price or next(
            (o.interpolated_price for o in conflict.options if o.value == "interpolate"), None
        )
    else:
        price = resolution.value

    if price in (None, ""):
        logger.warning("Gap at %s resolved without a price; skipped", conflict.target_week)
        return None

    start = parse_week_key(conflict.target_week)
    return Mapping(
        source=None,
        source_start=None,
        source_range=GAP_FILL_RANGE,
        target=Week(start=start, end=start + timedelta(days=7), key=conflict.target_week),
        target_range=conflict.target_range,
        relationship=conflict.relationship,
        proposed_price=_adjust(price, start, season_percentage),
        is_gap_fill=True,
    )
