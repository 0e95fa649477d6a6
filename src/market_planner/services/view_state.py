"""View state controller - the single source of truth for the map view.

Both map engines are downstream mirrors of one logical ViewState.  Explicit
operator navigation (pan, recenter, zoom, search) saves the previous view
into a one-level history before moving; renderer-originated drags and
scrolls only update the view.  Confirming the view locks it as the scale
reference for stall placement.
"""

import logging

from market_planner.adapters.base import MapEngineAdapter, Unsubscribe
from market_planner.core.errors import PreconditionError
from market_planner.core.projection import screen_to_geo
from market_planner.schemas import (
    ConfirmedView,
    EngineSelector,
    LatLng,
    PlannerMode,
    ScreenPoint,
    ViewState,
)

logger = logging.getLogger(__name__)


class ViewStateController:
    """Owns ViewState, its one-level history and the ConfirmedView.

    Attributes:
        default_view: View restored by `reset()`.
    """

    def __init__(
        self,
        adapters: dict[EngineSelector, MapEngineAdapter],
        default_view: ViewState,
        active: EngineSelector = EngineSelector.PRIMARY,
    ) -> None:
        """Attach to both adapters and seed them with the default view.

        Args:
            adapters: One adapter per engine selector.
            default_view: Starting view, also used by `reset()`.
            active: Engine that is authoritative at start.
        """
        missing = set(EngineSelector) - set(adapters)
        if missing:
            raise ValueError(f"Missing adapters for: {sorted(m.value for m in missing)}")

        self._adapters = dict(adapters)
        self.default_view = default_view
        self._active = active
        self._view = default_view.model_copy(
            update={"zoom": self.active_adapter.clamp_zoom(default_view.zoom)}
        )
        self._history: ViewState | None = None
        self._confirmed: ConfirmedView | None = None
        self._mode = PlannerMode.VIEWING
        self._unsubscribers: list[Unsubscribe] = [
            adapter.on_view_changed(self._listener_for(selector))
            for selector, adapter in self._adapters.items()
        ]
        self._push_all()

    # --- Read access ----------------------------------------------------

    @property
    def view(self) -> ViewState:
        return self._view

    @property
    def history(self) -> ViewState | None:
        return self._history

    @property
    def confirmed(self) -> ConfirmedView | None:
        return self._confirmed

    @property
    def mode(self) -> PlannerMode:
        return self._mode

    @property
    def active(self) -> EngineSelector:
        return self._active

    @property
    def active_adapter(self) -> MapEngineAdapter:
        return self._adapters[self._active]

    @property
    def inactive_adapters(self) -> list[MapEngineAdapter]:
        return [a for s, a in self._adapters.items() if s != self._active]

    # --- Explicit navigation (recorded in history) ---------------------

    def pan_to(self, center: LatLng, zoom: float | None = None) -> ViewState:
        """Move the view to `center` (and optionally `zoom`).

        Args:
            center: New view center.
            zoom: New zoom; the current zoom is kept when omitted.

        Returns:
            The applied view, zoom clamped to the active engine.
        """
        target_zoom = self._view.zoom if zoom is None else zoom
        self._save_history()
        self._apply(
            ViewState(center=center, zoom=self.active_adapter.clamp_zoom(target_zoom))
        )
        logger.debug(f"Panned to {center.lat:.6f}, {center.lng:.6f} @ z{self._view.zoom}")
        return self._view

    def recenter_at(self, point: ScreenPoint) -> bool:
        """Center the view on an overlay pixel.

        Only allowed while VIEWING.

        Returns:
            False (and nothing changes) if the view is confirmed or the
            active engine cannot project yet.
        """
        if self._mode is not PlannerMode.VIEWING:
            logger.debug("Recenter ignored: view is confirmed")
            return False
        target = screen_to_geo(point, self.active_adapter)
        if target is None:
            logger.debug(f"Recenter ignored: no projection for ({point.x}, {point.y})")
            return False
        self.pan_to(target)
        return True

    def zoom_in(self) -> ViewState:
        return self._step_zoom(+1)

    def zoom_out(self) -> ViewState:
        return self._step_zoom(-1)

    def _step_zoom(self, direction: int) -> ViewState:
        self._save_history()
        adapter = self.active_adapter
        if direction > 0:
            adapter.zoom_in()
        else:
            adapter.zoom_out()
        self._view = ViewState(center=self._view.center, zoom=adapter.get_zoom())
        self._mirror()
        logger.debug(f"Zoom now {self._view.zoom}")
        return self._view

    # --- Renderer-originated movement ----------------------------------

    def _listener_for(self, selector: EngineSelector):
        def listener(view: ViewState) -> None:
            self.handle_engine_view_changed(selector, view.center, view.zoom)

        return listener

    def handle_engine_view_changed(
        self, source: EngineSelector, center: LatLng, zoom: float
    ) -> None:
        """Adopt a pan/zoom the operator made directly on a renderer.

        History is not touched.  Notifications from the inactive engine are
        ignored.
        """
        if source != self._active:
            logger.debug(f"Ignoring view change from inactive engine {source.value}")
            return
        self._view = ViewState(center=center, zoom=zoom)
        self._mirror()

    # --- Mode transitions -----------------------------------------------

    def confirm_view(self) -> ConfirmedView:
        """Lock the current view as the scale reference.

        Raises:
            PreconditionError: If the view is already confirmed.
        """
        if self._mode is PlannerMode.CONFIRMED:
            raise PreconditionError("View is already confirmed; go back first")
        self._confirmed = ConfirmedView.from_view(self._view)
        self._mode = PlannerMode.CONFIRMED
        logger.info(
            f"View confirmed at {self._confirmed.lat:.6f}, {self._confirmed.lng:.6f} "
            f"zoom {self._confirmed.zoom}"
        )
        return self._confirmed

    def go_back(self) -> bool:
        """Return to VIEWING, restoring the saved view if there is one.

        The confirmed view is dropped either way.  Clearing the stalls placed
        under that view is the caller's job.

        Returns:
            True if a saved view was restored.
        """
        restored = self._history is not None
        if self._history is not None:
            self._apply(
                self._history.model_copy(
                    update={"zoom": self.active_adapter.clamp_zoom(self._history.zoom)}
                )
            )
        self._confirmed = None
        self._mode = PlannerMode.VIEWING
        logger.info(f"Went back to viewing (view restored: {restored})")
        return restored

    def switch_engine(self, selector: EngineSelector) -> ViewState:
        """Make another engine authoritative and seed it from ViewState."""
        if selector == self._active:
            return self._view
        self._active = selector
        self._apply(
            self._view.model_copy(
                update={"zoom": self.active_adapter.clamp_zoom(self._view.zoom)}
            )
        )
        logger.info(f"Switched map engine to {selector.value}")
        return self._view

    def reset(self) -> None:
        """Back to the default view with no history and no confirmation."""
        self._history = None
        self._confirmed = None
        self._mode = PlannerMode.VIEWING
        self._view = self.default_view.model_copy(
            update={"zoom": self.active_adapter.clamp_zoom(self.default_view.zoom)}
        )
        self._push_all()
        logger.info("View state reset")

    def detach(self) -> None:
        """Stop listening to the adapters."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    # --- Internals ------------------------------------------------------

    def _save_history(self) -> None:
        self._history = self._view

    def _apply(self, view: ViewState) -> None:
        self._view = view
        self._push(self.active_adapter)
        self._mirror()

    def _mirror(self) -> None:
        for adapter in self.inactive_adapters:
            self._push(adapter)

    def _push_all(self) -> None:
        for adapter in self._adapters.values():
            self._push(adapter)

    def _push(self, adapter: MapEngineAdapter) -> None:
        adapter.set_center(self._view.center)
        adapter.set_zoom(self._view.zoom)
