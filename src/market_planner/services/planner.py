"""Market planner orchestrator.

Receives operator events (overlay clicks, buttons, search, drag/rotate
ends), routes them to the view controller and the placement engine, and
reports refused operations as notices instead of raising.
"""

import logging
import math
from datetime import date
from typing import Callable
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from market_planner.adapters.base import MapEngineAdapter
from market_planner.core.errors import PreconditionError
from market_planner.core.placement import StallPlacementEngine
from market_planner.core.scale_bar import compute_scale_bar
from market_planner.infrastructure.geocoding import Geocoder
from market_planner.infrastructure.persistence import StallRepository
from market_planner.schemas import (
    ConfirmedView,
    EngineSelector,
    LatLng,
    LayoutExport,
    Notice,
    PlannerConfig,
    PlannerMode,
    ScaleBar,
    ScreenPoint,
    Stall,
    ViewState,
)
from market_planner.services.export import build_layout_export
from market_planner.services.notifications import NotificationCenter
from market_planner.services.search import SearchCoordinator, SearchOutcome, SearchStatus
from market_planner.services.view_state import ViewStateController

logger = logging.getLogger(__name__)


class PlannerSnapshot(BaseModel):
    """Everything the UI renders, taken after an operation."""

    stalls: list[Stall]
    view: ViewState
    confirmed: ConfirmedView | None
    mode: PlannerMode
    engine: EngineSelector
    selected_id: UUID | None
    latest_id: UUID | None
    placement_mode: bool
    rotation: float
    notices: list[Notice]

    model_config = ConfigDict(frozen=True)


class MarketPlanner:
    """Wires view synchronization, placement and persistence to UI events.

    Attributes:
        config: Active planner configuration.
        view: Controller owning the map view.
        placement: Engine owning the stall list.
        notifications: Operator-facing notices.
        placement_mode: When True, clicks on a confirmed view place stalls.
        stall_width_m: Real-world width of new stalls.
        stall_height_m: Real-world height of new stalls.
        scale_bar_angle: Direction of the reference bar (deg).
    """

    def __init__(
        self,
        config: PlannerConfig,
        adapters: dict[EngineSelector, MapEngineAdapter],
        repository: StallRepository,
        geocoder: Geocoder | None = None,
        notifications: NotificationCenter | None = None,
        on_update: Callable[[PlannerSnapshot], None] | None = None,
    ) -> None:
        self.config = config
        self.repository = repository
        self.notifications = notifications or NotificationCenter()
        self.on_update = on_update

        map_cfg = config.map
        self.view = ViewStateController(
            adapters,
            ViewState(
                center=LatLng(lat=map_cfg.default_lat, lng=map_cfg.default_lng),
                zoom=map_cfg.default_zoom,
            ),
        )
        self.placement = StallPlacementEngine(
            map_cfg.canvas_width,
            map_cfg.canvas_height,
            stalls=repository.load(),
            default_rotation=config.stall.rotation,
            gap_m=config.stall.gap_m,
            on_change=repository.save,
        )
        self.search_coordinator = SearchCoordinator(geocoder) if geocoder else None

        self.placement_mode = False
        self.stall_width_m = config.stall.width_m
        self.stall_height_m = config.stall.height_m
        self.scale_bar_angle = config.scale_bar.angle

        # Registered after the controller so the view is updated first
        self._unsubscribers = [
            adapter.on_view_changed(lambda _view: self._publish())
            for adapter in adapters.values()
        ]
        logger.info(f"Planner ready with {len(self.placement.stalls)} stored stalls")

    # --- Read access ----------------------------------------------------

    @property
    def stalls(self) -> list[Stall]:
        return self.placement.stalls

    @property
    def mode(self) -> PlannerMode:
        return self.view.mode

    def snapshot(self) -> PlannerSnapshot:
        return PlannerSnapshot(
            stalls=self.placement.stalls,
            view=self.view.view,
            confirmed=self.view.confirmed,
            mode=self.view.mode,
            engine=self.view.active,
            selected_id=self.placement.selected_id,
            latest_id=self.placement.latest_id,
            placement_mode=self.placement_mode,
            rotation=self.placement.next_rotation,
            notices=self.notifications.notices,
        )

    def _publish(self) -> None:
        if self.on_update is not None:
            self.on_update(self.snapshot())

    def _refuse(self, error: PreconditionError) -> None:
        self.notifications.warning(str(error))
        self._publish()

    def _require_confirmed(self) -> ConfirmedView:
        confirmed = self.view.confirmed
        if self.view.mode is not PlannerMode.CONFIRMED or confirmed is None:
            raise PreconditionError("Confirm the zoom level first.")
        return confirmed

    # --- Overlay and navigation ----------------------------------------

    def click_overlay(self, point: ScreenPoint) -> Stall | None:
        """Handle a click on the overlay canvas.

        While VIEWING the map recenters on the click.  On a confirmed view
        the click places a stall in placement mode and otherwise clears the
        selection.

        Returns:
            The new stall, if one was placed.
        """
        if self.view.mode is PlannerMode.VIEWING:
            self.view.recenter_at(point)
            self._publish()
            return None

        if not self.placement_mode:
            self.placement.select(None)
            self._publish()
            return None

        try:
            confirmed = self._require_confirmed()
            stall = self.placement.place_at(
                point,
                self.stall_width_m,
                self.stall_height_m,
                confirmed.lat,
                self.view.view.zoom,
            )
        except PreconditionError as e:
            self._refuse(e)
            return None
        self._publish()
        return stall

    def zoom_in(self) -> None:
        self.view.zoom_in()
        self._publish()

    def zoom_out(self) -> None:
        self.view.zoom_out()
        self._publish()

    def go_back(self) -> None:
        """Leave the confirmed view and discard the stalls drawn on it."""
        self.view.go_back()
        self.placement.clear()
        self._publish()

    def confirm_view(self) -> ConfirmedView | None:
        try:
            confirmed = self.view.confirm_view()
        except PreconditionError as e:
            self._refuse(e)
            return None
        self._publish()
        return confirmed

    def switch_engine(self, selector: EngineSelector) -> None:
        self.view.switch_engine(selector)
        self._publish()

    async def search(self, query: str) -> SearchOutcome | None:
        """Geocode `query` and pan there at the search zoom.

        Responses overtaken by a newer search are ignored.
        """
        if self.search_coordinator is None:
            self.notifications.error("Place search is not available")
            self._publish()
            return None

        outcome = await self.search_coordinator.search(query)
        if outcome.status is SearchStatus.STALE:
            return outcome
        if outcome.status is SearchStatus.FOUND and outcome.location is not None:
            self.view.pan_to(outcome.location, self.config.map.search_zoom)
            self.notifications.info(f"Found: {outcome.query}")
        elif outcome.status is SearchStatus.NOT_FOUND:
            self.notifications.info("No results")
        else:
            self.notifications.error(f"Search failed: {outcome.error}")
        self._publish()
        return outcome

    # --- Stall editing --------------------------------------------------

    def add_next(self) -> Stall | None:
        """Place a stall next to the last edited one."""
        try:
            confirmed = self._require_confirmed()
            stall = self.placement.add_next(
                self.stall_width_m,
                self.stall_height_m,
                confirmed.lat,
                self.view.view.zoom,
            )
        except PreconditionError as e:
            self._refuse(e)
            return None
        self._publish()
        return stall

    def set_rotation(self, angle: float) -> float:
        """Update the rotation setting; a selected stall follows only on a confirmed view."""
        value = self.placement.set_rotation(
            angle, apply_to_selected=self.view.mode is PlannerMode.CONFIRMED
        )
        self._publish()
        return value

    def select_stall(self, stall_id: UUID | None) -> None:
        self.placement.select(stall_id)
        self._publish()

    def drag_end(self, stall_id: UUID, x: float, y: float) -> None:
        try:
            self._require_confirmed()
        except PreconditionError as e:
            self._refuse(e)
            return
        self.placement.move(stall_id, x, y)
        self._publish()

    def rotate_end(self, stall_id: UUID, rotation: float) -> None:
        try:
            self._require_confirmed()
        except PreconditionError as e:
            self._refuse(e)
            return
        self.placement.rotate(stall_id, rotation)
        self._publish()

    def remove_stall(self, stall_id: UUID) -> None:
        try:
            self._require_confirmed()
        except PreconditionError as e:
            self._refuse(e)
            return
        self.placement.remove(stall_id)
        self._publish()

    def set_placement_mode(self, enabled: bool) -> None:
        self.placement_mode = enabled
        self._publish()

    def set_stall_size(self, width_m: float, height_m: float) -> bool:
        """Change the real-world size of new stalls; existing ones keep theirs."""
        if not (width_m > 0 and height_m > 0):
            self._refuse(
                PreconditionError(
                    f"Stall size must be positive, got {width_m} m x {height_m} m"
                )
            )
            return False
        self.stall_width_m = width_m
        self.stall_height_m = height_m
        self._publish()
        return True

    # --- Scale bar and export ------------------------------------------

    def set_scale_bar_angle(self, angle: float) -> None:
        self.scale_bar_angle = 0.0 if math.isnan(angle) else angle
        self._publish()

    def scale_bar(self) -> ScaleBar:
        """Reference bar for the view as currently displayed."""
        view = self.view.view
        cfg = self.config.scale_bar
        return compute_scale_bar(
            view.center.lat,
            view.zoom,
            self.scale_bar_angle,
            self.config.map.canvas_width,
            self.config.map.canvas_height,
            length_m=cfg.length_m,
            tick_interval_m=cfg.tick_interval_m,
            tick_half_length_px=cfg.tick_half_length_px,
        )

    def export_layout(self, market_date: date | None) -> LayoutExport | None:
        try:
            export = build_layout_export(
                self.placement.stalls,
                self.view.confirmed,
                market_date,
                self.config.map.canvas_width,
                self.config.map.canvas_height,
            )
        except PreconditionError as e:
            self._refuse(e)
            return None
        logger.info(f"Built export for {market_date} with {len(export.stalls)} stalls")
        return export

    # --- Reset and teardown --------------------------------------------

    def reset_all(self) -> None:
        """Wipe the store and return to the initial view with no stalls."""
        self.placement.reset()
        self.repository.store.clear()
        self.view.reset()
        self.placement_mode = False
        self.stall_width_m = self.config.stall.width_m
        self.stall_height_m = self.config.stall.height_m
        self.scale_bar_angle = self.config.scale_bar.angle
        self.notifications.clear()
        logger.info("Planner reset")
        self._publish()

    def detach(self) -> None:
        """Stop reacting to the adapters before they are disposed."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self.view.detach()
