from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .. import __version__
from ..core.config import MappingConfig, PricingSettings, Season
from ..core.models import Anchor, Conflict, Mapping, SourceWeekRecord, Week


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str = __version__


class HolidayInfo(BaseModel):
    key: str
    name: str
    date: date
    kind: str
    week: Week


class MappingRequest(BaseModel):
    source_year: int = Field(..., ge=1900, le=2200)
    target_year: int = Field(..., ge=1900, le=2200)
    source_weeks: List[SourceWeekRecord] = Field(default_factory=list)
    anchors: List[Anchor] = Field(default_factory=list, description="Holiday toggles and custom anchors")
    config: MappingConfig = Field(default_factory=MappingConfig)


class MappingResponse(BaseModel):
    mappings: List[Mapping]
    conflicts: List[Conflict]


class ResolutionRequest(BaseModel):
    mappings: List[Mapping]
    conflicts: List[Conflict] = Field(default_factory=list)
    seasons: Optional[List[Season]] = Field(default=None, description="Season-adjust resolved prices when given")


class RatesRequest(BaseModel):
    net_weekly: float = Field(..., ge=0)
    week_start: Optional[date] = None
    settings: PricingSettings = Field(default_factory=PricingSettings)


class PlatformRate(BaseModel):
    platform: str
    commission: float
    list_price: float
    nightly_rates: Optional[Dict[str, Any]] = None
