from datetime import date, datetime, timedelta
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


Price = Union[str, int, float, None]

WEEK_LENGTH = timedelta(days=7)


class AnchorKind(str, Enum):
    HOLIDAY = "holiday"
    CUSTOM = "custom"


class DateKind(str, Enum):
    FIXED = "fixed"
    FLOATING = "floating"
    CUSTOM = "custom"


class StructuredDate(BaseModel):
    """Calendar date as sent by upstream providers (month is 0-indexed)."""

    year: int
    month: int = Field(..., ge=0, le=11)
    day: int = Field(..., ge=1, le=31)

    def to_date(self) -> date:
        return date(self.year, self.month + 1, self.day)


WeekStart = Union[datetime, date, StructuredDate, str]


class SourceWeekRecord(BaseModel):
    """One row of source-year pricing.

    Upstream data arrives either in memory (``start`` as a date or structured
    date) or deserialized from JSON (``start`` as an ISO string alongside a
    ``key``/``weekKey``). Both shapes are accepted here and normalized by the
    week mapper.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    start: Optional[WeekStart] = None
    start_date: Optional[WeekStart] = Field(default=None, alias="startDate")
    key: Optional[str] = None
    week_key: Optional[str] = Field(default=None, alias="weekKey")
    price: Price = None


class Week(BaseModel):
    start: date
    end: date
    key: str

    @classmethod
    def from_start(cls, start: date) -> "Week":
        return cls(start=start, end=start + WEEK_LENGTH, key=start.isoformat())


class Anchor(BaseModel):
    """A named date of significance configured by the user."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    kind: AnchorKind = Field(default=AnchorKind.CUSTOM, alias="type")
    enabled: bool = True
    source_date: Optional[date] = Field(default=None, alias="sourceDate")
    target_date: Optional[date] = Field(default=None, alias="targetDate")


class AnchorDate(BaseModel):
    """An anchor resolved to a concrete date in one year."""

    key: str
    name: str
    date: date
    kind: DateKind


class AnchorRelationship(BaseModel):
    anchor: AnchorDate
    relationship: str
    weeks_away: int


class Mapping(BaseModel):
    """A source week projected into the target year."""

    source: Optional[SourceWeekRecord] = None
    source_start: Optional[date] = None
    source_range: Optional[str] = None
    target: Optional[Week] = None
    target_range: Optional[str] = None
    relationship: Optional[str] = None
    holiday_key: Optional[str] = None
    weeks_away: Optional[int] = None
    proposed_price: Price = None
    error: Optional[str] = None
    is_gap_fill: bool = False


class ConflictOption(BaseModel):
    label: str
    value: Price
    source_index: Optional[int] = None
    interpolated_price: Optional[str] = None


class Resolution(BaseModel):
    value: Price
    custom_price: Price = None
    source_index: Optional[int] = None
    interpolated_price: Optional[str] = None


class CollidingMapping(BaseModel):
    source_range: Optional[str]
    price: Price
    relationship: Optional[str]


class NeighborPrice(BaseModel):
    range: Optional[str]
    price: Price


class ConflictBase(BaseModel):
    description: str
    options: List[ConflictOption]
    resolved: bool = False
    resolution: Optional[Resolution] = None


class CollisionConflict(ConflictBase):
    type: Literal["collision"] = "collision"
    target_week: str
    target_range: Optional[str]
    mappings: List[CollidingMapping]


class GapConflict(ConflictBase):
    type: Literal["gap"] = "gap"
    target_week: str
    target_range: str
    relationship: Optional[str]
    nearest_before: Optional[NeighborPrice] = None
    nearest_after: Optional[NeighborPrice] = None


class StrategyReversalConflict(ConflictBase):
    type: Literal["strategy_reversal"] = "strategy_reversal"
    source_range: Optional[str]
    target_range: Optional[str]
    price: Price
    source_pattern: Literal["higher", "lower"]
    target_pattern: Literal["higher", "lower"]


Conflict = Annotated[
    Union[CollisionConflict, GapConflict, StrategyReversalConflict],
    Field(discriminator="type"),
]
