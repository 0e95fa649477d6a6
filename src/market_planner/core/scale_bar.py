"""Geometry of the real-world reference bar drawn on the overlay.

The bar is centered on the canvas and can be turned to any angle so the
operator can lay it along a street edge.  Everything here is derived from
the current latitude and zoom; nothing is stored.
"""

import math

from market_planner.core.projection import meters_to_pixels
from market_planner.schemas import ScaleBar, ScaleLabel, ScreenPoint, Segment
from market_planner.schemas.defaults import (
    DEFAULT_SCALE_BAR_LENGTH_M,
    DEFAULT_SCALE_BAR_TICK_HALF_LENGTH_PX,
    DEFAULT_SCALE_BAR_TICK_INTERVAL_M,
)


def _format_meters(length_m: float) -> str:
    if float(length_m).is_integer():
        return f"{int(length_m)}m"
    return f"{length_m:g}m"


def compute_scale_bar(
    latitude: float,
    zoom: float,
    angle_deg: float,
    canvas_width: float,
    canvas_height: float,
    length_m: float = DEFAULT_SCALE_BAR_LENGTH_M,
    tick_interval_m: float = DEFAULT_SCALE_BAR_TICK_INTERVAL_M,
    tick_half_length_px: float = DEFAULT_SCALE_BAR_TICK_HALF_LENGTH_PX,
) -> ScaleBar:
    """Compute bar, interior ticks and label for the given view.

    Args:
        latitude: Latitude the scale refers to (deg).
        zoom: Current zoom level.
        angle_deg: Direction of the bar, clockwise from the +x axis.
        canvas_width: Overlay width in px.
        canvas_height: Overlay height in px.
        length_m: Real-world length of the bar.
        tick_interval_m: Spacing of the interior ticks.
        tick_half_length_px: Half length of each perpendicular tick.

    Returns:
        The derived ScaleBar.
    """
    length_px = meters_to_pixels(length_m, latitude, zoom)
    tick_px = meters_to_pixels(tick_interval_m, latitude, zoom)

    theta = math.radians(angle_deg)
    cos_t, sin_t = math.cos(theta), math.sin(theta)
    cx, cy = canvas_width / 2, canvas_height / 2
    half_x, half_y = length_px / 2 * cos_t, length_px / 2 * sin_t

    start = ScreenPoint(x=cx - half_x, y=cy - half_y)
    end = ScreenPoint(x=cx + half_x, y=cy + half_y)

    # perpendicular unit vector
    px, py = -sin_t, cos_t
    ticks: list[Segment] = []
    i = 1
    while i * tick_interval_m < length_m:
        mx = start.x + i * tick_px * cos_t
        my = start.y + i * tick_px * sin_t
        ticks.append(
            Segment(
                start=ScreenPoint(
                    x=mx - tick_half_length_px * px, y=my - tick_half_length_px * py
                ),
                end=ScreenPoint(
                    x=mx + tick_half_length_px * px, y=my + tick_half_length_px * py
                ),
            )
        )
        i += 1

    label = ScaleLabel(
        position=ScreenPoint(x=end.x + tick_px * cos_t, y=end.y + tick_px * sin_t),
        text=_format_meters(length_m),
        rotation=angle_deg,
    )
    return ScaleBar(
        length_m=length_m,
        length_px=length_px,
        angle=angle_deg,
        bar=Segment(start=start, end=end),
        ticks=ticks,
        label=label,
    )
