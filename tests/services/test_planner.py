"""End-to-end tests of the planner orchestration over headless engines."""

import asyncio
from datetime import date

import pytest

from market_planner.core.projection import meters_to_pixels
from market_planner.infrastructure.persistence import StallRepository
from market_planner.schemas import EngineSelector, LatLng, PlannerMode, ScreenPoint
from market_planner.services.planner import MarketPlanner

LAT = 48.30694


def _confirm_with_placement(planner: MarketPlanner) -> None:
    planner.confirm_view()
    planner.set_placement_mode(True)


def test_click_while_viewing_recenters(planner, engines):
    expected = engines.raster.unproject(ScreenPoint(x=500, y=200))
    assert planner.click_overlay(ScreenPoint(x=500, y=200)) is None

    assert planner.stalls == []
    assert planner.view.view.center.lat == pytest.approx(expected.lat)
    assert planner.view.view.center.lng == pytest.approx(expected.lng)


def test_click_in_placement_mode_places_stall(planner, repository):
    _confirm_with_placement(planner)
    stall = planner.click_overlay(ScreenPoint(x=400, y=300))

    assert stall is not None
    assert stall.center.x == pytest.approx(400)
    assert stall.center.y == pytest.approx(300)
    assert stall.width == meters_to_pixels(2, LAT, 17)
    assert repository.load() == [stall]


def test_click_on_confirmed_view_without_placement_mode_clears_selection(planner):
    _confirm_with_placement(planner)
    stall = planner.click_overlay(ScreenPoint(x=400, y=300))
    planner.select_stall(stall.id)
    planner.set_placement_mode(False)

    assert planner.click_overlay(ScreenPoint(x=10, y=10)) is None
    assert planner.placement.selected_id is None
    assert len(planner.stalls) == 1


def test_placement_uses_confirmed_latitude_and_current_zoom(planner):
    _confirm_with_placement(planner)
    planner.zoom_in()
    stall = planner.click_overlay(ScreenPoint(x=400, y=300))
    assert stall.width == pytest.approx(meters_to_pixels(2, LAT, 18))


def test_add_next_requires_confirmed_view(planner):
    assert planner.add_next() is None
    assert planner.stalls == []
    assert planner.notifications.latest.level == "warning"
    assert "Confirm" in planner.notifications.latest.message


def test_add_next_chains_stalls(planner):
    planner.confirm_view()
    planner.set_rotation(0)
    first = planner.add_next()
    second = planner.add_next()
    assert second.x - first.x == pytest.approx(meters_to_pixels(2.5, LAT, 17))


def test_double_confirm_posts_warning(planner):
    planner.confirm_view()
    assert planner.confirm_view() is None
    assert planner.notifications.latest.level == "warning"
    assert planner.mode is PlannerMode.CONFIRMED


def test_go_back_clears_stalls_and_store(planner, repository, default_view):
    planner.click_overlay(ScreenPoint(x=300, y=300))  # recenter, saves history
    _confirm_with_placement(planner)
    planner.click_overlay(ScreenPoint(x=400, y=300))
    assert len(repository.load()) == 1

    planner.go_back()

    assert planner.mode is PlannerMode.VIEWING
    assert planner.view.view == default_view
    assert planner.stalls == []
    assert repository.load() == []


def test_stalls_survive_restart(config, engines, repository):
    first = MarketPlanner(config, engines.adapters, repository)
    _confirm_with_placement(first)
    placed = [first.click_overlay(ScreenPoint(x=100 * i, y=200)) for i in range(1, 4)]
    first.detach()

    second = MarketPlanner(config, engines.adapters, StallRepository(repository.store))
    assert second.stalls == placed


def test_editing_operations_are_persisted(planner, repository):
    _confirm_with_placement(planner)
    stall = planner.click_overlay(ScreenPoint(x=400, y=300))

    planner.drag_end(stall.id, 10, 20)
    planner.rotate_end(stall.id, -30)
    stored = repository.load()[0]
    assert (stored.x, stored.y) == (10, 20)
    assert stored.rotation == pytest.approx(330)

    planner.select_stall(stall.id)
    assert planner.set_rotation(400) == 360
    assert repository.load()[0].rotation == 0

    planner.remove_stall(stall.id)
    assert repository.load() == []


def test_set_stall_size(planner):
    _confirm_with_placement(planner)
    assert planner.set_stall_size(4, 6)
    stall = planner.click_overlay(ScreenPoint(x=400, y=300))
    assert stall.width == pytest.approx(meters_to_pixels(4, LAT, 17))

    assert not planner.set_stall_size(0, 6)
    assert planner.stall_width_m == 4
    assert planner.notifications.latest.level == "warning"


def test_switch_engine_preserves_center_and_zoom(planner, engines):
    planner.zoom_out()
    before = planner.view.view
    planner.switch_engine(EngineSelector.SECONDARY)

    assert planner.view.active is EngineSelector.SECONDARY
    assert planner.view.view == before
    assert engines.vector.get_zoom() == before.zoom


def test_scale_bar_follows_angle_and_zoom(planner):
    bar = planner.scale_bar()
    assert bar.angle == 48
    assert bar.length_px == pytest.approx(meters_to_pixels(50, LAT, 17))

    planner.set_scale_bar_angle(float("nan"))
    planner.zoom_in()
    bar = planner.scale_bar()
    assert bar.angle == 0
    assert bar.length_px == pytest.approx(meters_to_pixels(50, LAT, 18))


def test_export_requires_date_and_confirmation(planner):
    assert planner.export_layout(date(2025, 6, 7)) is None
    assert "confirm" in planner.notifications.latest.message.lower()

    planner.confirm_view()
    assert planner.export_layout(None) is None
    assert "date" in planner.notifications.latest.message.lower()


def test_export_layout(planner):
    _confirm_with_placement(planner)
    stall = planner.click_overlay(ScreenPoint(x=400, y=300))

    export = planner.export_layout(date(2025, 6, 7))

    assert export.market_date == date(2025, 6, 7)
    assert export.center == LatLng(lat=48.30694, lng=14.28583)
    assert export.zoom == 17
    assert export.stalls[0].id == stall.id
    assert export.stalls[0].x_position == pytest.approx(stall.x / 800 * 100)
    assert export.stalls[0].is_available


def test_search_pans_to_result(planner, default_view, engines):
    planner.zoom_out()
    outcome = asyncio.run(planner.search("Linz Hauptplatz"))

    assert outcome.location == LatLng(lat=48.3059, lng=14.2862)
    assert planner.view.view.center == outcome.location
    assert planner.view.view.zoom == 17
    assert planner.view.history.zoom == 16
    assert engines.vector.get_center().lat == pytest.approx(48.3059)
    assert planner.notifications.latest.level == "info"


def test_search_without_match(planner, default_view):
    asyncio.run(planner.search("Atlantis"))
    assert planner.view.view == default_view
    assert planner.notifications.latest.message == "No results"


def test_search_without_geocoder(config, engines, repository):
    planner = MarketPlanner(config, engines.adapters, repository)
    assert asyncio.run(planner.search("anything")) is None
    assert planner.notifications.latest.level == "error"


def test_reset_all(planner, repository, store, default_view):
    planner.zoom_in()
    _confirm_with_placement(planner)
    planner.click_overlay(ScreenPoint(x=400, y=300))
    planner.set_scale_bar_angle(10)

    planner.reset_all()

    assert planner.stalls == []
    assert store.get(repository.key) is None
    assert planner.view.view == default_view
    assert planner.mode is PlannerMode.VIEWING
    assert not planner.placement_mode
    assert planner.scale_bar_angle == 48
    assert planner.placement.next_rotation == 45


def test_every_operation_publishes_snapshot(planner, published):
    planner.confirm_view()
    planner.set_placement_mode(True)
    stall = planner.click_overlay(ScreenPoint(x=400, y=300))

    latest = published[-1]
    assert latest.mode is PlannerMode.CONFIRMED
    assert latest.placement_mode
    assert latest.stalls == [stall]
    assert latest.latest_id == stall.id


def test_renderer_drag_publishes_snapshot(planner, engines, published):
    count = len(published)
    engines.raster_map.drag_by(30, 0)
    assert len(published) == count + 1
    assert published[-1].view == planner.view.view


def test_stored_stalls_cannot_be_edited_while_viewing(config, engines, repository, stall_factory):
    stall = stall_factory()
    repository.save([stall])
    planner = MarketPlanner(config, engines.adapters, repository)
    assert planner.mode is PlannerMode.VIEWING

    planner.drag_end(stall.id, 1.0, 2.0)
    planner.rotate_end(stall.id, 90)
    planner.remove_stall(stall.id)
    planner.select_stall(stall.id)
    assert planner.set_rotation(120) == 120

    assert repository.load() == [stall]
    assert planner.stalls == [stall]
    assert planner.placement.next_rotation == 120
    assert planner.notifications.latest.level == "warning"
    assert "Confirm" in planner.notifications.latest.message


def test_non_finite_rotation_keeps_stored_layout(planner, repository):
    _confirm_with_placement(planner)
    first = planner.click_overlay(ScreenPoint(x=100, y=300))
    planner.click_overlay(ScreenPoint(x=400, y=300))

    planner.rotate_end(first.id, float("nan"))

    stored = repository.load()
    assert len(stored) == 2
    assert stored[0].rotation == 0
