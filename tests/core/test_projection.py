"""Tests for Web Mercator ground resolution and world-point math."""

import math

import pytest

from market_planner.core.projection import (
    WebMercatorProjection,
    geo_to_screen,
    lat_lng_to_world,
    meters_per_pixel,
    meters_to_pixels,
    pixels_to_meters,
    screen_to_geo,
    world_size,
    world_to_lat_lng,
    wrap_longitude,
)
from market_planner.schemas import LatLng, ScreenPoint


def test_equator_resolution_at_zoom_zero():
    """One pixel at zoom 0 on the equator covers the full circumference / 256."""
    assert meters_per_pixel(0, 0) == pytest.approx(2 * math.pi * 6378137 / 256)
    assert meters_per_pixel(0, 0) == pytest.approx(156543.03392804097)


def test_resolution_halves_per_zoom_level():
    for z in range(0, 22):
        assert meters_per_pixel(48.3, z + 1) == pytest.approx(meters_per_pixel(48.3, z) / 2)


def test_resolution_strictly_decreasing_in_zoom():
    zooms = [0, 0.5, 1, 5.25, 10, 17, 17.3, 21, 22]
    values = [meters_per_pixel(48.30694, z) for z in zooms]
    assert all(a > b for a, b in zip(values, values[1:]))


@pytest.mark.parametrize("lat", [-84.9, -45.0, 0.0, 12.5, 48.30694, 84.9])
def test_resolution_scales_with_cos_latitude(lat):
    z = 17
    assert meters_per_pixel(lat, z) == pytest.approx(
        meters_per_pixel(0, z) * math.cos(math.radians(lat))
    )


@pytest.mark.parametrize(
    "meters,lat,zoom",
    [(0.5, 0.0, 0), (2.0, 48.30694, 17), (3.0, -33.9, 21.5), (50.0, 84.0, 22), (1234.5, 60.0, 10)],
)
def test_meters_pixels_round_trip(meters, lat, zoom):
    px = meters_to_pixels(meters, lat, zoom)
    assert px > 0
    assert pixels_to_meters(px, lat, zoom) == pytest.approx(meters)


def test_stall_width_at_reference_view():
    """A 2 m stall in Linz at zoom 17 is roughly 2.6 px wide."""
    px = meters_to_pixels(2, 48.30694, 17)
    assert px == pytest.approx(2 / (math.cos(math.radians(48.30694)) * 156543.03392804097 / 2**17))
    assert 2.5 < px < 2.8


def test_world_size():
    assert world_size(0) == 256
    assert world_size(17) == 256 * 2**17


def test_world_point_of_origin():
    assert lat_lng_to_world(LatLng(lat=0, lng=0)) == pytest.approx((128.0, 128.0))
    assert lat_lng_to_world(LatLng(lat=0, lng=-180))[0] == pytest.approx(0.0)


def test_world_point_round_trip():
    point = LatLng(lat=48.30694, lng=14.28583)
    for zoom in (0, 10, 17):
        back = world_to_lat_lng(lat_lng_to_world(point, zoom), zoom)
        assert back.lat == pytest.approx(point.lat)
        assert back.lng == pytest.approx(point.lng)


def test_world_latitude_is_clipped():
    _, y_pole = lat_lng_to_world(LatLng(lat=90, lng=0))
    _, y_limit = lat_lng_to_world(LatLng(lat=85.05112878, lng=0))
    assert y_pole == pytest.approx(y_limit)
    assert y_pole == pytest.approx(0.0, abs=1e-6)


@pytest.mark.parametrize(
    "lng,expected", [(0, 0), (179.5, 179.5), (-180, -180), (180, -180), (190, -170), (-190, 170), (540, -180)]
)
def test_wrap_longitude(lng, expected):
    assert wrap_longitude(lng) == pytest.approx(expected)


def test_web_mercator_projection_uses_zoom_zero():
    projection = WebMercatorProjection()
    point = LatLng(lat=-33.8688, lng=151.2093)
    world = projection.from_lat_lng_to_point(point)
    assert world == pytest.approx(lat_lng_to_world(point, 0))
    back = projection.from_point_to_lat_lng(world)
    assert back.lat == pytest.approx(point.lat)
    assert back.lng == pytest.approx(point.lng)


class _NotReadyAdapter:
    def unproject(self, point):
        return None

    def project(self, point):
        return None


def test_screen_to_geo_passes_through_unavailable_projection():
    adapter = _NotReadyAdapter()
    assert screen_to_geo(ScreenPoint(x=1, y=2), adapter) is None
    assert geo_to_screen(LatLng(lat=0, lng=0), adapter) is None


def test_screen_geo_round_trip_through_adapter(engines):
    point = ScreenPoint(x=123.0, y=456.0)
    geo = screen_to_geo(point, engines.vector)
    back = geo_to_screen(geo, engines.vector)
    assert back.x == pytest.approx(point.x)
    assert back.y == pytest.approx(point.y)
