from typing import List

from pydantic import BaseModel, Field, field_validator, model_validator


DEFAULT_WEEK_START_DAY = 6  # Saturday, 0=Sunday


class MappingConfig(BaseModel):
    """Policy constants for week mapping and conflict detection."""

    week_start_day: int = Field(default=DEFAULT_WEEK_START_DAY, ge=0, le=6, description="Rental week start day (0=Sunday, 6=Saturday)")

    # Strategy reversal: a week must sit this many dollars above/below the
    # average of its neighbors to count as a peak or a valley
    reversal_threshold: float = Field(default=100.0, ge=0.0, description="Absolute price difference vs neighbor average")

    # Gap detection only reports weeks starting inside this window (1-12, inclusive)
    gap_season_start_month: int = Field(default=4, ge=1, le=12, description="First month checked for gaps")
    gap_season_end_month: int = Field(default=11, ge=1, le=12, description="Last month checked for gaps")

    include_standard_holidays: bool = Field(default=True, description="Derive the six standard holidays as anchors")

    @model_validator(mode="after")
    def validate_gap_season(self):
        if self.gap_season_end_month < self.gap_season_start_month:
            raise ValueError("gap_season_end_month must be >= gap_season_start_month")
        return self

    def in_gap_season(self, month: int) -> bool:
        return self.gap_season_start_month <= month <= self.gap_season_end_month


class Platform(BaseModel):
    key: str
    name: str
    commission: float = Field(default=0.0, ge=0.0, le=1.0, description="Commission rate as a decimal (0.155 = 15.5%)")
    enabled: bool = True


class NightlyWeights(BaseModel):
    """Share of the weekly rate charged per night, in percent."""

    monday: float = 10
    tuesday: float = 10
    wednesday: float = 10
    thursday: float = 13
    friday: float = 22
    saturday: float = 23
    sunday: float = 12

    @model_validator(mode="after")
    def validate_total(self):
        total = sum(self.model_dump().values())
        if abs(total - 100) > 1e-9:
            raise ValueError(f"nightly weights must total 100, got {total}")
        return self


class Season(BaseModel):
    name: str
    start_month: int = Field(..., ge=1, le=12)
    start_day: int = Field(..., ge=1, le=31)
    end_month: int = Field(..., ge=1, le=12)
    end_day: int = Field(..., ge=1, le=31)
    percentage: float = Field(default=0.0, description="Adjustment applied to base prices (10 = +10%)")
    weekly_only: bool = Field(default=False, description="No nightly rates offered in this season")
    closed_to_guests: bool = False


def _default_platforms() -> List[Platform]:
    return [
        Platform(key="wnav", name="WeNeedAVacation", commission=0.0),
        Platform(key="airbnb", name="Airbnb", commission=0.155, enabled=False),
        Platform(key="vrbo", name="Vrbo", commission=0.08, enabled=False),
    ]


def _default_seasons() -> List[Season]:
    return [
        Season(name="Off-Peak Winter", start_month=1, start_day=1, end_month=4, end_day=30),
        Season(name="Spring Shoulder", start_month=5, start_day=1, end_month=5, end_day=31),
        Season(name="Peak Summer", start_month=6, start_day=1, end_month=8, end_day=31),
        Season(name="Fall Shoulder", start_month=9, start_day=1, end_month=10, end_day=31),
        Season(name="Off-Peak Winter", start_month=11, start_day=1, end_month=12, end_day=31),
    ]


class PricingSettings(BaseModel):
    platforms: List[Platform] = Field(default_factory=_default_platforms)
    nightly_weights: NightlyWeights = Field(default_factory=NightlyWeights)
    seasons: List[Season] = Field(default_factory=_default_seasons)

    @field_validator("platforms")
    @classmethod
    def validate_unique_platforms(cls, v):
        keys = [p.key for p in v]
        if len(keys) != len(set(keys)):
            raise ValueError("platform keys must be unique")
        return v
