"""Sync guard and publishing tests for the reactive UI state.

If a field is added to a config section, ControlState must expose it and
round-trip it without further changes.
"""

import asyncio
from datetime import date

from market_planner.infrastructure.persistence import MemoryStore
from market_planner.schemas import (
    EngineSelector,
    LatLng,
    PlannerConfig,
    PlannerMode,
    ScreenPoint,
    StallConfig,
)
from market_planner.state.controls import ControlState
from market_planner.state.planner import (
    build_planner,
    export_from_controls,
    search_from_controls,
    set_placement_mode,
)
from market_planner.state.session import LayoutSession
from ..conftest import FakeGeocoder


def _leaf_paths(config: PlannerConfig):
    for section in type(config).model_fields:
        sub = getattr(config, section)
        if hasattr(type(sub), "model_fields"):
            for name in type(sub).model_fields:
                yield f"{section}_{name}"


def test_control_state_has_every_config_leaf():
    controls = ControlState()
    missing = [name for name in _leaf_paths(PlannerConfig()) if not hasattr(controls, name)]
    assert missing == []
    assert sorted(controls.field_names) == sorted(_leaf_paths(PlannerConfig()))


def test_round_trip_defaults():
    assert ControlState().to_planner_config() == PlannerConfig()


def test_round_trip_custom_profile():
    config = PlannerConfig(
        name="Harbour",
        stall=StallConfig(width_m=4, height_m=2.5, rotation=90),
        scale_bar={"angle": 12, "length_m": 100},
    )
    controls = ControlState()
    controls.from_planner_config(config)

    assert controls.profile_name.value == "Harbour"
    assert controls.stall_width_m.value == 4
    assert controls.scale_bar_length_m.value == 100
    assert controls.to_planner_config() == config


def test_int_fields_are_coerced():
    controls = ControlState()
    controls.map_canvas_width.value = 1024.0
    config = controls.to_planner_config()
    assert config.map.canvas_width == 1024
    assert isinstance(config.map.canvas_width, int)


def test_reset_clears_session_inputs():
    controls = ControlState()
    controls.placement_mode.value = True
    controls.market_date.value = date(2025, 6, 7)
    controls.search_query.value = "Linz"
    controls.stall_gap_m.value = 2.0

    controls.reset()

    assert controls.placement_mode.value is False
    assert controls.market_date.value is None
    assert controls.search_query.value == ""
    assert controls.stall_gap_m.value == 0.5


def test_session_mirrors_planner():
    session = LayoutSession()
    planner, lifecycle = build_planner(
        PlannerConfig(), store=MemoryStore(), geocoder=FakeGeocoder(), session=session
    )
    try:
        assert session.mode.value is PlannerMode.VIEWING
        assert session.view.value == planner.view.view

        planner.confirm_view()
        planner.set_placement_mode(True)
        stall = planner.click_overlay(ScreenPoint(x=400, y=300))
        planner.switch_engine(EngineSelector.SECONDARY)

        assert session.mode.value is PlannerMode.CONFIRMED
        assert session.confirmed.value is not None
        assert session.stalls.value == [stall]
        assert session.latest_id.value == stall.id
        assert session.engine.value is EngineSelector.SECONDARY
        assert session.placement_mode.value is True
    finally:
        planner.detach()
        lifecycle.dispose()

    session.reset()
    assert session.stalls.value == []
    assert session.mode.value is PlannerMode.VIEWING


def test_build_planner_reads_controls():
    controls = ControlState()
    controls.profile_name.value = "From Controls"
    controls.stall_width_m.value = 4.0
    controls.placement_mode.value = True

    planner, lifecycle = build_planner(
        store=MemoryStore(), geocoder=FakeGeocoder(), session=None, controls=controls
    )
    try:
        assert planner.config.name == "From Controls"
        assert planner.stall_width_m == 4.0
        assert planner.placement_mode is True
    finally:
        planner.detach()
        lifecycle.dispose()


def test_control_inputs_reach_planner():
    controls = ControlState()
    geocoder = FakeGeocoder({"Linz Hauptplatz": LatLng(lat=48.3059, lng=14.2862)})
    planner, lifecycle = build_planner(
        PlannerConfig(),
        store=MemoryStore(),
        geocoder=geocoder,
        session=None,
        controls=controls,
    )
    try:
        controls.search_query.value = "Linz Hauptplatz"
        outcome = asyncio.run(search_from_controls(planner, controls))
        assert outcome.location == LatLng(lat=48.3059, lng=14.2862)
        assert geocoder.queries == ["Linz Hauptplatz"]

        planner.confirm_view()
        set_placement_mode(planner, True, controls)
        assert controls.placement_mode.value is True
        planner.click_overlay(ScreenPoint(x=400, y=300))

        assert export_from_controls(planner, controls) is None
        assert "market date" in planner.notifications.latest.message

        controls.market_date.value = date(2025, 6, 7)
        export = export_from_controls(planner, controls)
        assert export.market_date == date(2025, 6, 7)
        assert len(export.stalls) == 1
    finally:
        planner.detach()
        lifecycle.dispose()
