"""Anchor configuration: default holiday anchors, custom anchors and the
per-year anchor sets the week mapper searches.

All functions return new lists; the caller owns persistence.
"""

from datetime import date
from typing import Any, Dict, List, Literal, Optional, Sequence

from .exceptions import AnchorError
from .holidays import (
    STANDARD_HOLIDAY_KEYS,
    format_date_short,
    format_week_range,
    holidays_for_year,
    week_containing,
)
from .models import Anchor, AnchorDate, AnchorKind, DateKind


Side = Literal["source", "target"]


def create_default_anchors(source_year: int, target_year: int) -> List[Anchor]:
    """One enabled holiday anchor per standard holiday, dates filled for both years."""
    source_holidays = holidays_for_year(source_year)
    target_holidays = holidays_for_year(target_year)

    return [
        Anchor(
            id=key,
            name=source_holidays[key].name,
            kind=AnchorKind.HOLIDAY,
            enabled=True,
            source_date=source_holidays[key].date,
            target_date=target_holidays[key].date,
        )
        for key in STANDARD_HOLIDAY_KEYS
    ]


def add_custom_anchor(
    anchors: Sequence[Anchor],
    name: str,
    source_date: Optional[date],
    target_date: Optional[date] = None,
) -> List[Anchor]:
    if not name or not name.strip():
        raise AnchorError("Custom anchor name must not be empty")

    existing = {a.id for a in anchors}
    n = sum(1 for a in anchors if a.kind == AnchorKind.CUSTOM) + 1
    while f"custom_{n}" in existing:
        n += 1

    anchor = Anchor(
        id=f"custom_{n}",
        name=name.strip(),
        kind=AnchorKind.CUSTOM,
        enabled=True,
        source_date=source_date,
        target_date=target_date,
    )
    return [*anchors, anchor]


def set_anchor_enabled(anchors: Sequence[Anchor], anchor_id: str, enabled: bool) -> List[Anchor]:
    _require(anchors, anchor_id)
    return [a.model_copy(update={"enabled": enabled}) if a.id == anchor_id else a for a in anchors]


def delete_anchor(anchors: Sequence[Anchor], anchor_id: str) -> List[Anchor]:
    """Remove a custom anchor. Holiday anchors can only be disabled."""
    anchor = _require(anchors, anchor_id)
    if anchor.kind == AnchorKind.HOLIDAY:
        raise AnchorError(f"Holiday anchor '{anchor_id}' cannot be deleted, disable it instead")
    return [a for a in anchors if a.id != anchor_id]


def build_anchor_set(
    year: int,
    anchors: Sequence[Anchor] = (),
    side: Side = "source",
    include_holidays: bool = True,
) -> Dict[str, AnchorDate]:
    """Resolve the anchors available in one year of a source/target pair.

    Standard holidays come first in their fixed order, computed for ``year``.
    A disabled holiday anchor removes its holiday. Enabled custom anchors with
    a date on ``side`` follow in the order given.
    """
    anchor_set: Dict[str, AnchorDate] = {}

    if include_holidays:
        disabled = {a.id for a in anchors if a.kind == AnchorKind.HOLIDAY and not a.enabled}
        for key, holiday in holidays_for_year(year).items():
            if key not in disabled:
                anchor_set[key] = holiday

    for anchor in anchors:
        if anchor.kind != AnchorKind.CUSTOM or not anchor.enabled:
            continue
        anchor_date = anchor.source_date if side == "source" else anchor.target_date
        if anchor_date is None:
            continue
        anchor_set[anchor.id] = AnchorDate(
            key=anchor.id, name=anchor.name, date=anchor_date, kind=DateKind.CUSTOM
        )

    return anchor_set


def build_holiday_anchor_table(anchors: Sequence[Anchor], week_start_day: int = 6) -> List[Dict[str, Any]]:
    """Rows comparing each enabled anchor's source and target weeks."""
    rows = []
    for anchor in anchors:
        if not anchor.enabled or anchor.source_date is None or anchor.target_date is None:
            continue
        source_week = week_containing(anchor.source_date, week_start_day)
        target_week = week_containing(anchor.target_date, week_start_day)
        rows.append({
            "anchor_id": anchor.id,
            "name": anchor.name,
            "kind": anchor.kind.value,
            "source_date": format_date_short(anchor.source_date),
            "source_week": format_week_range(source_week.start, source_week.end),
            "target_date": format_date_short(anchor.target_date),
            "target_week": format_week_range(target_week.start, target_week.end),
            "deletable": anchor.kind == AnchorKind.CUSTOM,
        })
    return rows


def _require(anchors: Sequence[Anchor], anchor_id: str) -> Anchor:
    for anchor in anchors:
        if anchor.id == anchor_id:
            return anchor
    raise AnchorError(f"Unknown anchor: {anchor_id}")
