"""Web Mercator math shared by the renderers, the overlay and the placement engine.

Ground resolution (meters per screen pixel) at latitude phi and zoom z:

    resolution = cos(phi) * 2 * pi * R / (256 * 2^z)

with R = 6 378 137 m.  This exact formula is baked into every exported
layout (stall sizes are stored in pixels computed from it), so it must not
be approximated.

World points follow the tile convention: the whole world is a square of
`256 * 2^z` pixels at zoom z, origin at the north-west corner, y down.
"""

import math
from typing import TYPE_CHECKING

from market_planner.core.constants import (
    EARTH_RADIUS_M,
    MAX_MERCATOR_LAT,
    TILE_SIZE_PX,
)
from market_planner.schemas import LatLng, ScreenPoint

if TYPE_CHECKING:
    from market_planner.adapters.base import MapEngineAdapter

WorldPoint = tuple[float, float]


# ------------------------------------------------------------------
# Ground resolution
# ------------------------------------------------------------------


def meters_per_pixel(latitude_deg: float, zoom: float) -> float:
    """Ground distance covered by one screen pixel.

    Args:
        latitude_deg: Latitude of the view center (deg).
        zoom: Web Mercator zoom level (may be fractional).

    Returns:
        Meters per pixel.
    """
    return (
        math.cos(latitude_deg * math.pi / 180)
        * 2
        * math.pi
        * EARTH_RADIUS_M
        / (TILE_SIZE_PX * math.pow(2, zoom))
    )


def meters_to_pixels(meters: float, latitude_deg: float, zoom: float) -> float:
    """Convert a real-world length into overlay pixels."""
    return meters / meters_per_pixel(latitude_deg, zoom)


def pixels_to_meters(pixels: float, latitude_deg: float, zoom: float) -> float:
    """Convert an overlay length back into meters."""
    return pixels * meters_per_pixel(latitude_deg, zoom)


# ------------------------------------------------------------------
# World points
# ------------------------------------------------------------------


def world_size(zoom: float) -> float:
    """Width (and height) of the world square in pixels at `zoom`."""
    return TILE_SIZE_PX * math.pow(2, zoom)


def wrap_longitude(lng: float) -> float:
    """Bring a longitude back into [-180, 180)."""
    if -180 <= lng < 180:
        return lng
    return (lng + 180) % 360 - 180


def lat_lng_to_world(point: LatLng, zoom: float = 0) -> WorldPoint:
    """Project a coordinate to world pixels at `zoom`."""
    size = world_size(zoom)
    lat = max(-MAX_MERCATOR_LAT, min(MAX_MERCATOR_LAT, point.lat))
    siny = math.sin(math.radians(lat))
    x = (point.lng + 180) / 360 * size
    y = (0.5 - math.log((1 + siny) / (1 - siny)) / (4 * math.pi)) * size
    return x, y


def world_to_lat_lng(world: WorldPoint, zoom: float = 0) -> LatLng:
    """Invert `lat_lng_to_world`."""
    size = world_size(zoom)
    x, y = world
    lng = wrap_longitude(x / size * 360 - 180)
    n = math.pi - 2 * math.pi * y / size
    lat = math.degrees(math.atan(math.sinh(n)))
    return LatLng(lat=lat, lng=lng)


class WebMercatorProjection:
    """Zoom-independent projection object handed out by raster renderers.

    Mirrors the "world point" API such renderers expose: world points are
    expressed at zoom 0 (a 256 x 256 square) regardless of the current view.
    """

    def from_lat_lng_to_point(self, point: LatLng) -> WorldPoint:
        return lat_lng_to_world(point, 0)

    def from_point_to_lat_lng(self, world: WorldPoint) -> LatLng:
        return world_to_lat_lng(world, 0)


# ------------------------------------------------------------------
# Screen <-> geographic (through an adapter)
# ------------------------------------------------------------------


def screen_to_geo(
    point: ScreenPoint, adapter: "MapEngineAdapter"
) -> LatLng | None:
    """Resolve an overlay pixel to a coordinate with the given engine.

    Returns None while the engine cannot project yet; callers treat that as
    "ignore this interaction".
    """
    return adapter.unproject(point)


def geo_to_screen(
    point: LatLng, adapter: "MapEngineAdapter"
) -> ScreenPoint | None:
    """Resolve a coordinate to an overlay pixel with the given engine."""
    return adapter.project(point)
