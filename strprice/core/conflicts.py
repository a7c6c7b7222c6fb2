"""Conflict detection over a full set of week mappings.

Three kinds of conflict are reported, in this order:

- collision: two or more source weeks land on the same target week
- gap: an in-season target week that no source week landed on
- strategy_reversal: a week priced well above its neighbors in the source
  year ends up well below its new neighbors (or the other way round)

The detector never resolves anything; every conflict starts unresolved.
"""

from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Union

from ..logging_setup import get_logger
from .config import MappingConfig
from .holidays import format_week_range, holidays_for_year, relationship_of, weeks_for_year
from .models import (
    CollidingMapping,
    CollisionConflict,
    ConflictOption,
    GapConflict,
    Mapping,
    NeighborPrice,
    Price,
    StrategyReversalConflict,
)
from .pricing import format_price, numeric_price, round_half_up

logger = get_logger(__name__)

AnyConflict = Union[CollisionConflict, GapConflict, StrategyReversalConflict]


def interpolate_price(before: Price, after: Price) -> Price:
    low, high = numeric_price(before), numeric_price(after)
    if low is None or high is None:
        return before
    return format_price(round_half_up((low + high) / 2))


def detect_conflicts(
    mappings: Sequence[Mapping],
    target_year: int,
    week_start_day: Optional[int] = None,
    config: Optional[MappingConfig] = None,
) -> List[AnyConflict]:
    config = config or MappingConfig()
    if week_start_day is None:
        week_start_day = config.week_start_day

    conflicts: List[AnyConflict] = []
    conflicts.extend(_find_collisions(mappings))
    conflicts.extend(_find_gaps(mappings, target_year, week_start_day, config))
    conflicts.extend(_find_reversals(mappings, config.reversal_threshold))

    logger.debug(
        "Detected %d conflicts for %d mappings into %d",
        len(conflicts), len(mappings), target_year,
    )
    return conflicts


def _source_price(mapping: Mapping) -> Price:
    if mapping.source is not None and mapping.source.price not in (None, ""):
        return mapping.source.price
    return mapping.proposed_price


def _find_collisions(mappings: Sequence[Mapping]) -> List[CollisionConflict]:
    by_target: Dict[str, List[Mapping]] = defaultdict(list)
    for mapping in mappings:
        if mapping.target is not None:
            by_target[mapping.target.key].append(mapping)

    collisions = []
    for target_key, group in by_target.items():
        if len(group) < 2:
            continue

        ranges = " and ".join(str(m.source_range) for m in group)
        options = [
            ConflictOption(
                label=f"Use {m.source_range} price ({_source_price(m)})",
                value=_source_price(m),
                source_index=i,
            )
            for i, m in enumerate(group)
        ]
        options.append(ConflictOption(label="Enter custom price", value="custom", source_index=-1))

        collisions.append(CollisionConflict(
            target_week=target_key,
            target_range=group[0].target_range,
            mappings=[
                CollidingMapping(source_range=m.source_range, price=_source_price(m), relationship=m.relationship)
                for m in group
            ],
            description=f"Both {ranges} would map to {group[0].target_range}. Which price should apply?",
            options=options,
        ))
    return collisions


def _find_gaps(
    mappings: Sequence[Mapping],
    target_year: int,
    week_start_day: int,
    config: MappingConfig,
) -> List[GapConflict]:
    mapped = [m for m in mappings if m.target is not None]
    mapped_keys = {m.target.key for m in mapped}
    target_holidays = holidays_for_year(target_year)

    gaps = []
    for week in weeks_for_year(target_year, week_start_day):
        if not config.in_gap_season(week.start.month) or week.key in mapped_keys:
            continue

        relationship = relationship_of(week.start, target_holidays, week_start_day)
        label = relationship.relationship if relationship else None

        before: Optional[Mapping] = None
        after: Optional[Mapping] = None
        for m in mapped:
            if m.target.start < week.start and (before is None or m.target.start > before.target.start):
                before = m
            if m.target.start > week.start and (after is None or m.target.start < after.target.start):
                after = m

        options = []
        if before is not None:
            options.append(ConflictOption(
                label=f"Use previous week's price ({before.proposed_price})", value=before.proposed_price
            ))
        if after is not None:
            options.append(ConflictOption(
                label=f"Use next week's price ({after.proposed_price})", value=after.proposed_price
            ))
        if before is not None and after is not None:
            options.append(ConflictOption(
                label="Interpolate between neighbors",
                value="interpolate",
                interpolated_price=str(interpolate_price(before.proposed_price, after.proposed_price)),
            ))
        options.append(ConflictOption(label="Enter custom price", value="custom"))

        target_range = format_week_range(week.start, week.end)
        gaps.append(GapConflict(
            target_week=week.key,
            target_range=target_range,
            relationship=label,
            nearest_before=NeighborPrice(range=before.target_range, price=before.proposed_price) if before else None,
            nearest_after=NeighborPrice(range=after.target_range, price=after.proposed_price) if after else None,
            description=f"No source week maps to {target_range} ({label}). How should we price it?",
            options=options,
        ))
    return gaps


def _classify(relative: float, threshold: float) -> Optional[str]:
    if relative > threshold:
        return "higher"
    if relative < -threshold:
        return "lower"
    return None


def _find_reversals(mappings: Sequence[Mapping], threshold: float) -> List[StrategyReversalConflict]:
    # Neighbors in the target year come from the mapped weeks sorted by date;
    # neighbors in the source year are simply the adjacent list entries.
    by_target_date = sorted(
        (m for m in mappings if m.target is not None),
        key=lambda m: m.target.start,
    )
    target_keys = [m.target.key for m in by_target_date]

    reversals = []
    for idx, mapping in enumerate(mappings):
        if mapping.target is None or idx == 0 or idx == len(mappings) - 1:
            continue

        price = numeric_price(mapping.proposed_price)
        prev_price = numeric_price(_source_price(mappings[idx - 1]))
        next_price = numeric_price(_source_price(mappings[idx + 1]))
        if price is None or prev_price is None or next_price is None:
            continue

        source_pattern = _classify(price - (prev_price + next_price) / 2, threshold)
        if source_pattern is None:
            continue

        target_idx = target_keys.index(mapping.target.key)
        if target_idx == 0 or target_idx == len(by_target_date) - 1:
            continue

        target_prev = numeric_price(by_target_date[target_idx - 1].proposed_price)
        target_next = numeric_price(by_target_date[target_idx + 1].proposed_price)
        if target_prev is None or target_next is None:
            continue

        target_pattern = _classify(price - (target_prev + target_next) / 2, threshold)
        if target_pattern is None or target_pattern == source_pattern:
            continue

        reversals.append(StrategyReversalConflict(
            source_range=mapping.source_range,
            target_range=mapping.target_range,
            price=mapping.proposed_price,
            source_pattern=source_pattern,
            target_pattern=target_pattern,
            description=(
                f"{mapping.source_range} was priced {mapping.proposed_price}, which was {source_pattern} "
                f"than its neighbors. The proposed {mapping.target_range} at {mapping.proposed_price} "
                f"would be {target_pattern} than ITS neighbors - the opposite pattern. Is this intentional?"
            ),
            options=[
                ConflictOption(label="Keep as mapped (intentional change)", value="keep"),
                ConflictOption(label="Adjust to maintain relative position", value="adjust"),
            ],
        ))
    return reversals
