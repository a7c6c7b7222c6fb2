"""strprice - holiday-anchored rental pricing carried from one year to the next."""

__version__ = "0.1.0"
__description__ = "Holiday-anchored week mapping for vacation rental pricing"

from .core.config import MappingConfig, PricingSettings
from .core.conflicts import detect_conflicts
from .core.mapping import map_weeks
from .core.resolution import apply_resolutions

__all__ = ["MappingConfig", "PricingSettings", "apply_resolutions", "detect_conflicts", "map_weeks"]
