"""Planner construction bound to the reactive UI state.

Lives in state/ because it wires the reactive controls and session into the
planner.
"""

import logging
from pathlib import Path

from market_planner.infrastructure.geocoding import Geocoder, NominatimGeocoder
from market_planner.infrastructure.persistence import (
    FileStore,
    KeyValueStore,
    StallRepository,
)
from market_planner.schemas import LayoutExport, PlannerConfig
from market_planner.services.lifecycle import EngineLifecycle
from market_planner.services.planner import MarketPlanner
from market_planner.services.search import SearchOutcome
from market_planner.state.controls import ControlState, control_state
from market_planner.state.session import LayoutSession, layout_session

logger = logging.getLogger(__name__)


def build_planner(
    config: PlannerConfig | None = None,
    lifecycle: EngineLifecycle | None = None,
    store: KeyValueStore | None = None,
    geocoder: Geocoder | None = None,
    session: LayoutSession | None = layout_session,
    controls: ControlState = control_state,
) -> tuple[MarketPlanner, EngineLifecycle]:
    """Create a planner publishing into `session`.

    Args:
        config: Planner configuration; read from `controls` when omitted.
        lifecycle: Engines to drive; headless renderers when omitted.
        store: Stall store; a FileStore under the configured directory
            when omitted.
        geocoder: Place search backend; Nominatim when omitted.
        session: Reactive session to publish to, or None.
        controls: Operator inputs supplying the config and placement mode.

    Returns:
        The planner and the lifecycle owning its engines.  Call
        `planner.detach()` and then `lifecycle.dispose()` on teardown.
    """
    config = config or controls.to_planner_config()
    lifecycle = lifecycle or EngineLifecycle.headless(config.map)
    store = store if store is not None else FileStore(Path(config.storage.directory))
    geocoder = geocoder or NominatimGeocoder(config.geocoder)

    planner = MarketPlanner(
        config,
        lifecycle.start(),
        StallRepository(store, config.storage.key),
        geocoder=geocoder,
        on_update=session.publish if session is not None else None,
    )
    planner.placement_mode = controls.placement_mode.value
    if session is not None:
        session.publish(planner.snapshot())
    logger.info(f"Planner built for profile '{config.name}'")
    return planner, lifecycle


def set_placement_mode(
    planner: MarketPlanner, enabled: bool, controls: ControlState = control_state
) -> None:
    """Toggle placement mode in the controls and the planner together."""
    controls.placement_mode.value = enabled
    planner.set_placement_mode(enabled)


async def search_from_controls(
    planner: MarketPlanner, controls: ControlState = control_state
) -> SearchOutcome | None:
    """Run the search typed into the search box."""
    return await planner.search(controls.search_query.value)


def export_from_controls(
    planner: MarketPlanner, controls: ControlState = control_state
) -> LayoutExport | None:
    """Export the layout for the market date picked in the controls."""
    return planner.export_layout(controls.market_date.value)
