"""Schemas package.

- config.py: Configuration models (PlannerConfig, StallConfig, etc.)
- geo.py: Coordinates and view state (LatLng, ViewState, ConfirmedView, etc.)
- layout.py: Overlay records (Stall, ScaleBar, LayoutExport, etc.)
"""

from .config import (
    GeocoderConfig,
    MapConfig,
    PlannerConfig,
    ScaleBarConfig,
    StallConfig,
    StorageConfig,
)
from .geo import (
    Bounds,
    ConfirmedView,
    EngineSelector,
    LatLng,
    PlannerMode,
    ScreenPoint,
    ViewState,
)
from .layout import (
    LayoutExport,
    Notice,
    ScaleBar,
    ScaleLabel,
    Segment,
    Stall,
    StallPercentages,
)

__all__ = [
    "GeocoderConfig",
    "MapConfig",
    "PlannerConfig",
    "ScaleBarConfig",
    "StallConfig",
    "StorageConfig",
    "Bounds",
    "ConfirmedView",
    "EngineSelector",
    "LatLng",
    "PlannerMode",
    "ScreenPoint",
    "ViewState",
    "LayoutExport",
    "Notice",
    "ScaleBar",
    "ScaleLabel",
    "Segment",
    "Stall",
    "StallPercentages",
]
