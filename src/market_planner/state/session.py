"""Layout session state - reactive mirror of the planner's outputs."""

import solara

from market_planner.schemas import EngineSelector, PlannerMode
from market_planner.services.planner import PlannerSnapshot


class LayoutSession:
    """What the map, overlay and status bar render.

    MarketPlanner publishes a snapshot after every operation; components
    read these reactives and re-render when they change.
    """

    def __init__(self):
        # --- Overlay ---
        self.stalls = solara.reactive([])  # list[Stall]
        self.selected_id = solara.reactive(None)  # UUID | None
        self.latest_id = solara.reactive(None)  # UUID | None
        self.placement_mode = solara.reactive(False)
        self.rotation = solara.reactive(0.0)

        # --- Map ---
        self.view = solara.reactive(None)  # ViewState | None
        self.confirmed = solara.reactive(None)  # ConfirmedView | None
        self.mode = solara.reactive(PlannerMode.VIEWING)
        self.engine = solara.reactive(EngineSelector.PRIMARY)

        # --- Status ---
        self.notices = solara.reactive([])  # list[Notice]

    def publish(self, snapshot: PlannerSnapshot) -> None:
        """Copy a planner snapshot into the reactives."""
        self.stalls.value = snapshot.stalls
        self.selected_id.value = snapshot.selected_id
        self.latest_id.value = snapshot.latest_id
        self.placement_mode.value = snapshot.placement_mode
        self.rotation.value = snapshot.rotation
        self.view.value = snapshot.view
        self.confirmed.value = snapshot.confirmed
        self.mode.value = snapshot.mode
        self.engine.value = snapshot.engine
        self.notices.value = snapshot.notices

    def reset(self) -> None:
        """Reset all session state."""
        self.stalls.value = []
        self.selected_id.value = None
        self.latest_id.value = None
        self.placement_mode.value = False
        self.rotation.value = 0.0
        self.view.value = None
        self.confirmed.value = None
        self.mode.value = PlannerMode.VIEWING
        self.engine.value = EngineSelector.PRIMARY
        self.notices.value = []


# Singleton instance
layout_session = LayoutSession()
