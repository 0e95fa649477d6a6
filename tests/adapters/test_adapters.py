"""Tests for the raster and vector adapters over the headless renderers."""

import logging

import pytest

from market_planner.adapters import ViewChangeEmitter
from market_planner.schemas import EngineSelector, LatLng, MapConfig, ScreenPoint, ViewState
from ..factories import create_engines


@pytest.mark.parametrize(
    "x,y", [(0, 0), (400, 300), (800, 600), (17.5, 580.25), (799, 1)]
)
def test_both_engines_unproject_same_pixel_identically(engines, x, y):
    point = ScreenPoint(x=x, y=y)
    raster = engines.raster.unproject(point)
    vector = engines.vector.unproject(point)
    assert raster.lat == pytest.approx(vector.lat, abs=1e-9)
    assert raster.lng == pytest.approx(vector.lng, abs=1e-9)


def test_canvas_center_unprojects_to_view_center(engines):
    center = engines.raster.unproject(ScreenPoint(x=400, y=300))
    assert center.lat == pytest.approx(48.30694)
    assert center.lng == pytest.approx(14.28583)


def test_raster_project_inverts_unproject(engines):
    point = ScreenPoint(x=612.0, y=87.5)
    back = engines.raster.project(engines.raster.unproject(point))
    assert back.x == pytest.approx(point.x)
    assert back.y == pytest.approx(point.y)


def test_raster_unproject_across_antimeridian():
    config = MapConfig(default_lat=0.0, default_lng=179.999, default_zoom=12.0)
    engines = create_engines(config)
    for x in (0, 400, 800):
        point = ScreenPoint(x=x, y=300)
        raster = engines.raster.unproject(point)
        vector = engines.vector.unproject(point)
        assert raster.lng == pytest.approx(vector.lng, abs=1e-9)
    east_edge = engines.raster.unproject(ScreenPoint(x=800, y=300))
    assert east_edge.lng < 0  # wrapped past 180
    back = engines.raster.project(east_edge)
    assert back.x == pytest.approx(800)


def test_raster_without_projection_yields_none():
    engines = create_engines(raster_ready=False)
    assert engines.raster.unproject(ScreenPoint(x=10, y=10)) is None
    assert engines.raster.project(LatLng(lat=48.3, lng=14.3)) is None

    engines.raster_map.finish_loading()
    assert engines.raster.unproject(ScreenPoint(x=10, y=10)) is not None


def test_raster_zoom_is_clamped(engines):
    engines.raster.set_zoom(25)
    assert engines.raster.get_zoom() == 21
    engines.raster.set_zoom(3)
    assert engines.raster.get_zoom() == 10
    engines.raster.zoom_out()
    assert engines.raster.get_zoom() == 10
    assert engines.raster.clamp_zoom(15.5) == 15.5


def test_vector_zoom_is_not_clamped_by_adapter(engines):
    assert engines.vector.clamp_zoom(23.7) == 23.7
    assert engines.vector.clamp_zoom(4) == 4
    engines.vector.set_zoom(8.25)
    assert engines.vector.get_zoom() == 8.25


def test_vector_center_is_lat_lng_at_the_boundary(engines):
    engines.vector.set_center(LatLng(lat=51.5, lng=-0.12))
    assert engines.vector_map.get_center() == (-0.12, 51.5)
    assert engines.vector.get_center() == LatLng(lat=51.5, lng=-0.12)


@pytest.mark.parametrize("selector", list(EngineSelector))
def test_programmatic_changes_are_not_reported(engines, selector):
    adapter = engines.adapters[selector]
    seen: list[ViewState] = []
    adapter.on_view_changed(seen.append)

    adapter.set_center(LatLng(lat=10, lng=10))
    adapter.set_zoom(12)
    adapter.zoom_in()
    adapter.zoom_out()
    assert seen == []


def test_vector_drag_is_reported(engines):
    seen: list[ViewState] = []
    engines.vector.on_view_changed(seen.append)

    engines.vector_map.drag_by(50, 0)

    assert len(seen) == 1
    assert seen[0].center.lng > 14.28583
    assert seen[0].zoom == 17


def test_raster_drag_is_reported(engines):
    seen: list[ViewState] = []
    unsubscribe = engines.raster.on_view_changed(seen.append)

    engines.raster_map.drag_by(0, -40)
    assert len(seen) == 1
    assert seen[0].center.lat > 48.30694

    unsubscribe()
    engines.raster_map.drag_by(0, -40)
    assert len(seen) == 1


@pytest.mark.parametrize("selector", list(EngineSelector))
def test_dispose_releases_and_is_idempotent(engines, selector, caplog):
    adapter = engines.adapters[selector]
    seen: list[ViewState] = []
    adapter.on_view_changed(seen.append)

    adapter.dispose()
    assert adapter.disposed
    assert adapter.unproject(ScreenPoint(x=1, y=1)) is None

    with caplog.at_level(logging.WARNING):
        adapter.dispose()
    assert "already disposed" in caplog.text

    engines.raster_map.drag_by(10, 10)
    engines.vector_map.drag_by(10, 10)
    assert seen == []


def test_vector_dispose_removes_renderer(engines):
    engines.vector.dispose()
    assert engines.vector_map.removed


def test_emitter_suppression_nests():
    emitter = ViewChangeEmitter()
    seen = []
    emitter.subscribe(seen.append)
    view = ViewState(center=LatLng(lat=0, lng=0), zoom=1)

    with emitter.suppress():
        with emitter.suppress():
            emitter.emit(view)
        emitter.emit(view)
    emitter.emit(view)

    assert seen == [view]
