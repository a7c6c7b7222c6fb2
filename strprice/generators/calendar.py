"""Synthetic source-year pricing calendars.

Stands in for manual price entry in demos and end-to-end tests: a smooth
summer peak over a base rate, with optional gaussian noise.
"""

from typing import List, Optional

import numpy as np
from pydantic import BaseModel, Field, model_validator

from ..core.holidays import weeks_for_year
from ..core.models import SourceWeekRecord, StructuredDate
from ..core.pricing import format_price, round_to_nearest_10


class SampleCalendarConfig(BaseModel):
    year: int = Field(..., ge=1900, le=2200)
    week_start_day: int = Field(default=6, ge=0, le=6)
    base_price: float = Field(default=1800.0, gt=0, description="Off-season weekly rate")
    peak_price: float = Field(default=4200.0, gt=0, description="Weekly rate at the height of the season")
    peak_week_of_year: int = Field(default=29, ge=0, le=52, description="Index of the peak week (0-based)")
    peak_width_weeks: float = Field(default=6.0, gt=0, description="Spread of the peak in weeks")
    noise_level: float = Field(default=0.0, ge=0.0, le=0.5, description="Gaussian noise as a share of price")
    seed: Optional[int] = None

    @model_validator(mode="after")
    def validate_prices(self):
        if self.peak_price < self.base_price:
            raise ValueError("peak_price must be >= base_price")
        return self


def generate_sample_calendar(config: SampleCalendarConfig) -> List[SourceWeekRecord]:
    weeks = weeks_for_year(config.year, config.week_start_day)
    if not weeks:
        return []

    rng = np.random.default_rng(config.seed)

    index = np.arange(len(weeks))
    # Gaussian bump: base everywhere, peak_price at peak_week_of_year
    curve = np.exp(-0.5 * ((index - config.peak_week_of_year) / config.peak_width_weeks) ** 2)
    prices = config.base_price + (config.peak_price - config.base_price) * curve

    if config.noise_level > 0:
        prices = prices * (1 + rng.normal(0.0, config.noise_level, size=len(prices)))

    prices = np.maximum(prices, 0.0)

    return [
        SourceWeekRecord(
            start=StructuredDate(year=week.start.year, month=week.start.month - 1, day=week.start.day),
            key=week.key,
            price=format_price(round_to_nearest_10(float(price))),
        )
        for week, price in zip(weeks, prices)
    ]
