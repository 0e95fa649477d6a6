"""Stall, export and overlay geometry schemas."""

from datetime import date
from typing import Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from .geo import LatLng, ScreenPoint


class Stall(BaseModel):
    """A rectangular fixture in overlay pixel space.

    (x, y) is the unrotated top-left corner; the renderer rotates the
    rectangle about that corner by `rotation` degrees.
    """

    id: UUID = Field(default_factory=uuid4, description="Stable stall identifier")
    x: float = Field(..., description="Top-left x before rotation (px)")
    y: float = Field(..., description="Top-left y before rotation (px)")
    width: float = Field(..., gt=0, description="Width (px)")
    height: float = Field(..., gt=0, description="Height (px)")
    rotation: float = Field(0.0, ge=0, lt=360, description="Rotation (deg)")

    model_config = ConfigDict(frozen=True)

    @property
    def center(self) -> ScreenPoint:
        """Unrotated center of the rectangle."""
        return ScreenPoint(x=self.x + self.width / 2, y=self.y + self.height / 2)


class StallPercentages(BaseModel):
    """Canvas-relative representation of a stall consumed by exporters."""

    id: UUID
    x_position: float = Field(..., description="x as % of canvas width")
    y_position: float = Field(..., description="y as % of canvas height")
    width: float = Field(..., description="Width as % of canvas width")
    height: float = Field(..., description="Height as % of canvas height")
    rotation: float = Field(..., description="Rotation (deg)")
    is_available: bool = True

    model_config = ConfigDict(frozen=True)


class LayoutExport(BaseModel):
    """Everything an exporter needs to reproduce a market layout."""

    market_date: date
    center: LatLng
    zoom: float
    canvas_width: int
    canvas_height: int
    stalls: list[StallPercentages] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class Segment(BaseModel):
    """A straight line between two overlay points."""

    start: ScreenPoint
    end: ScreenPoint

    model_config = ConfigDict(frozen=True)


class ScaleLabel(BaseModel):
    """Text label drawn next to the scale bar."""

    position: ScreenPoint
    text: str
    rotation: float

    model_config = ConfigDict(frozen=True)


class ScaleBar(BaseModel):
    """Derived geometry of the real-world reference bar."""

    length_m: float
    length_px: float
    angle: float
    bar: Segment
    ticks: list[Segment] = Field(default_factory=list)
    label: ScaleLabel

    model_config = ConfigDict(frozen=True)


class Notice(BaseModel):
    """A message surfaced to the operator."""

    level: Literal["info", "warning", "error"] = "info"
    message: str

    model_config = ConfigDict(frozen=True)
