"""Geographic and view-state schemas."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class LatLng(BaseModel):
    """A WGS84 coordinate in degrees."""

    lat: float = Field(..., ge=-90, le=90, description="Latitude (deg)")
    lng: float = Field(..., ge=-180, le=180, description="Longitude (deg)")

    model_config = ConfigDict(frozen=True)


class ScreenPoint(BaseModel):
    """A point in overlay pixel space (origin top-left, y down)."""

    x: float
    y: float

    model_config = ConfigDict(frozen=True)


class ViewState(BaseModel):
    """The single logical map view shared by both engines."""

    center: LatLng
    zoom: float = Field(..., ge=0, description="Web Mercator zoom level")

    model_config = ConfigDict(frozen=True)


class ConfirmedView(BaseModel):
    """The view locked by the operator as the real-world scale reference."""

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    zoom: float = Field(..., ge=0)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_view(cls, view: ViewState) -> "ConfirmedView":
        return cls(lat=view.center.lat, lng=view.center.lng, zoom=view.zoom)

    @property
    def center(self) -> LatLng:
        return LatLng(lat=self.lat, lng=self.lng)


class Bounds(BaseModel):
    """Visible viewport corners as reported by a renderer."""

    north_east: LatLng
    south_west: LatLng

    model_config = ConfigDict(frozen=True)


class EngineSelector(str, Enum):
    """Which map engine is currently authoritative for rendering."""

    PRIMARY = "primary"  # raster renderer
    SECONDARY = "secondary"  # vector renderer


class PlannerMode(str, Enum):
    """Whether the operator is still navigating or has locked the view."""

    VIEWING = "viewing"
    CONFIRMED = "confirmed"
