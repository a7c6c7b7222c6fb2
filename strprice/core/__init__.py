"""Core week-mapping engine - pure functions over in-memory data."""

from .anchors import build_anchor_set, create_default_anchors
from .config import MappingConfig, PricingSettings
from .conflicts import detect_conflicts
from .holidays import holidays_for_year, relationship_of, week_containing, weeks_for_year
from .mapping import map_weeks
from .resolution import apply_resolutions

__all__ = [
    "MappingConfig",
    "PricingSettings",
    "apply_resolutions",
    "build_anchor_set",
    "create_default_anchors",
    "detect_conflicts",
    "holidays_for_year",
    "map_weeks",
    "relationship_of",
    "week_containing",
    "weeks_for_year",
]
