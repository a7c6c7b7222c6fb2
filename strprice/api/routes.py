from typing import List

from fastapi import APIRouter, HTTPException, Query

from .models import (
    HealthResponse,
    HolidayInfo,
    MappingRequest,
    MappingResponse,
    PlatformRate,
    RatesRequest,
    ResolutionRequest,
)
from ..core.anchors import create_default_anchors
from ..core.conflicts import detect_conflicts
from ..core.exceptions import InvalidInputError
from ..core.holidays import holidays_for_year, week_containing, weeks_for_year
from ..core.mapping import map_weeks
from ..core.models import Anchor, Mapping, Week
from ..core.pricing import platform_rates, season_percentage_lookup
from ..core.resolution import apply_resolutions
from ..logging_setup import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/", response_model=HealthResponse)
async def health_check():
    return HealthResponse()


@router.get("/holidays/{year}", response_model=List[HolidayInfo])
async def list_holidays(year: int, week_start_day: int = Query(default=6, ge=0, le=6)):
    return [
        HolidayInfo(
            key=h.key,
            name=h.name,
            date=h.date,
            kind=h.kind.value,
            week=week_containing(h.date, week_start_day),
        )
        for h in holidays_for_year(year).values()
    ]


@router.get("/weeks/{year}", response_model=List[Week])
async def list_weeks(year: int, week_start_day: int = Query(default=6, ge=0, le=6)):
    return weeks_for_year(year, week_start_day)


@router.get("/anchors/defaults", response_model=List[Anchor])
async def default_anchors(source_year: int, target_year: int):
    return create_default_anchors(source_year, target_year)


@router.post("/mappings", response_model=MappingResponse)
async def create_mappings(request: MappingRequest):
    try:
        mappings = map_weeks(
            request.source_weeks,
            request.source_year,
            request.target_year,
            request.anchors,
            config=request.config,
        )
    except InvalidInputError as e:
        raise HTTPException(status_code=422, detail=str(e))

    conflicts = detect_conflicts(mappings, request.target_year, config=request.config)
    logger.info(
        "Mapped %d weeks %d -> %d with %d conflicts",
        len(mappings), request.source_year, request.target_year, len(conflicts),
    )
    return MappingResponse(mappings=mappings, conflicts=conflicts)


@router.post("/resolutions", response_model=List[Mapping])
async def resolve_conflicts(request: ResolutionRequest):
    season_percentage = season_percentage_lookup(request.seasons) if request.seasons else None
    return apply_resolutions(request.mappings, request.conflicts, season_percentage)


@router.post("/rates", response_model=List[PlatformRate])
async def calculate_rates(request: RatesRequest):
    return platform_rates(request.net_weekly, request.settings, request.week_start)
