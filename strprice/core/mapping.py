"""Holiday-anchored week mapping.

Each source week is described by its relationship to the nearest anchor in the
source year ("2 weeks before Labor Day") and then placed at the same
relationship to that anchor in the target year.
"""

from datetime import date, datetime, timedelta
from typing import Any, List, Optional, Sequence, Union

from pydantic import ValidationError

from ..logging_setup import get_logger
from .anchors import build_anchor_set
from .config import MappingConfig
from .exceptions import InvalidInputError
from .holidays import format_week_range, parse_week_key, relationship_of, week_containing
from .models import Anchor, Mapping, SourceWeekRecord, StructuredDate, Week, WEEK_LENGTH

logger = get_logger(__name__)

NO_TARGET_ANCHOR = "No matching anchor in target year"
NO_SOURCE_ANCHOR = "No anchor available in source year"


def _as_date(value: Any, record: SourceWeekRecord) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, StructuredDate):
        try:
            return value.to_date()
        except ValueError as e:
            raise InvalidInputError(f"Invalid structured start date ({e})", record) from e
    if isinstance(value, str):
        try:
            return parse_week_key(value)
        except ValueError as e:
            raise InvalidInputError(f"Unparseable start date '{value}'", record) from e
    return None


def resolve_week_start(record: SourceWeekRecord) -> date:
    """Normalize a record's start to a date.

    Serialized records carry ``start`` as an ISO string; the record's week key
    is preferred in that case since it is always a plain local date.
    """
    start = record.start if record.start is not None else record.start_date
    if isinstance(start, str):
        start = record.week_key or record.key or start

    resolved = _as_date(start, record)
    if resolved is None:
        raise InvalidInputError("Source week has no start date", record)
    return resolved


def _coerce_record(raw: Union[SourceWeekRecord, Any]) -> SourceWeekRecord:
    if isinstance(raw, SourceWeekRecord):
        return raw
    try:
        return SourceWeekRecord.model_validate(raw)
    except ValidationError as e:
        raise InvalidInputError(f"Malformed source week ({e.error_count()} errors)", raw) from e


def map_weeks(
    source_weeks: Sequence[Union[SourceWeekRecord, Any]],
    source_year: int,
    target_year: int,
    anchors: Sequence[Anchor] = (),
    week_start_day: Optional[int] = None,
    config: Optional[MappingConfig] = None,
) -> List[Mapping]:
    """Project every source week into the target year.

    Returns one mapping per input week in input order. Weeks whose anchor has
    no date in the target year come back with ``target=None`` and ``error``
    set rather than raising.
    """
    config = config or MappingConfig()
    if week_start_day is None:
        week_start_day = config.week_start_day

    source_anchors = build_anchor_set(source_year, anchors, "source", config.include_standard_holidays)
    target_anchors = build_anchor_set(target_year, anchors, "target", config.include_standard_holidays)

    mappings = []
    for raw in source_weeks:
        record = _coerce_record(raw)
        source_start = resolve_week_start(record)
        source_range = format_week_range(source_start, source_start + WEEK_LENGTH)

        relationship = relationship_of(source_start, source_anchors, week_start_day)
        if relationship is None:
            mappings.append(Mapping(
                source=record,
                source_start=source_start,
                source_range=source_range,
                proposed_price=record.price,
                error=NO_SOURCE_ANCHOR,
            ))
            continue

        target_anchor = target_anchors.get(relationship.anchor.key)
        if target_anchor is None:
            mappings.append(Mapping(
                source=record,
                source_start=source_start,
                source_range=source_range,
                relationship=relationship.relationship,
                holiday_key=relationship.anchor.key,
                weeks_away=relationship.weeks_away,
                proposed_price=record.price,
                error=NO_TARGET_ANCHOR,
            ))
            continue

        anchor_week = week_containing(target_anchor.date, week_start_day)
        target = Week.from_start(anchor_week.start + timedelta(weeks=relationship.weeks_away))

        mappings.append(Mapping(
            source=record,
            source_start=source_start,
            source_range=source_range,
            target=target,
            target_range=format_week_range(target.start, target.end),
            relationship=relationship.relationship,
            holiday_key=relationship.anchor.key,
            weeks_away=relationship.weeks_away,
            proposed_price=record.price,
        ))

    unmapped = sum(1 for m in mappings if m.target is None)
    logger.debug(
        "Mapped %d source weeks %d -> %d (%d without target)",
        len(mappings), source_year, target_year, unmapped,
    )
    return mappings
