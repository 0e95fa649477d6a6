"""Adapter for the raster/business renderer.

The raster renderer has no screen-space unprojection.  Instead it exposes a
projection object mapping coordinates to zoom-0 "world points" and the
current viewport bounds.  An overlay pixel is resolved by:

    1. projecting the viewport's NE and SW corners to world points,
    2. interpolating the pixel linearly inside the W x H overlay between
       those corners,
    3. projecting the resulting world point back to a coordinate.

Both inputs appear only after the renderer finished its asynchronous
start-up; until then every projection request yields None.
"""

import logging

from market_planner.adapters.base import (
    ListenerHandle,
    RasterProjection,
    RasterRenderer,
    Unsubscribe,
    ViewChangedCallback,
    ViewChangeEmitter,
)
from market_planner.core.constants import TILE_SIZE_PX
from market_planner.core.errors import ProjectionUnavailable
from market_planner.core.projection import WorldPoint
from market_planner.schemas import EngineSelector, LatLng, ScreenPoint, ViewState

logger = logging.getLogger(__name__)

_NATIVE_EVENTS = ("center_changed", "zoom_changed")


class RasterMapAdapter:
    """MapEngineAdapter over a raster renderer.

    Attributes:
        canvas_width: Overlay width in px (W).
        canvas_height: Overlay height in px (H).
        min_zoom: Lowest zoom this engine displays.
        max_zoom: Highest zoom this engine displays.
    """

    selector = EngineSelector.PRIMARY

    def __init__(
        self,
        renderer: RasterRenderer,
        canvas_width: float,
        canvas_height: float,
        min_zoom: float = 10.0,
        max_zoom: float = 21.0,
    ) -> None:
        self._renderer = renderer
        self.canvas_width = canvas_width
        self.canvas_height = canvas_height
        self.min_zoom = min_zoom
        self.max_zoom = max_zoom
        self._emitter = ViewChangeEmitter()
        self._disposed = False
        self._handles: list[ListenerHandle] = [
            renderer.add_listener(event, self._on_native_change)
            for event in _NATIVE_EVENTS
        ]

    @property
    def disposed(self) -> bool:
        return self._disposed

    # --- View accessors -------------------------------------------------

    def get_center(self) -> LatLng:
        return self._renderer.get_center()

    def set_center(self, center: LatLng) -> None:
        with self._emitter.suppress():
            self._renderer.set_center(center)

    def get_zoom(self) -> float:
        return float(self._renderer.get_zoom())

    def set_zoom(self, zoom: float) -> None:
        with self._emitter.suppress():
            self._renderer.set_zoom(self.clamp_zoom(zoom))

    def zoom_in(self) -> None:
        self.set_zoom(self.get_zoom() + 1)

    def zoom_out(self) -> None:
        self.set_zoom(self.get_zoom() - 1)

    def clamp_zoom(self, zoom: float) -> float:
        return max(self.min_zoom, min(self.max_zoom, zoom))

    # --- Projection -----------------------------------------------------

    def _viewport(self) -> tuple[RasterProjection, WorldPoint, WorldPoint]:
        """Return (projection, top_right, bottom_left) of the current viewport."""
        if self._disposed:
            raise ProjectionUnavailable("renderer disposed")
        projection = self._renderer.get_projection()
        bounds = self._renderer.get_bounds()
        if projection is None or bounds is None:
            raise ProjectionUnavailable("renderer not initialized")
        top_right = projection.from_lat_lng_to_point(bounds.north_east)
        bottom_left = projection.from_lat_lng_to_point(bounds.south_west)
        if top_right[0] < bottom_left[0]:
            # viewport straddles the antimeridian
            top_right = (top_right[0] + TILE_SIZE_PX, top_right[1])
        return projection, top_right, bottom_left

    def unproject(self, point: ScreenPoint) -> LatLng | None:
        try:
            projection, top_right, bottom_left = self._viewport()
        except ProjectionUnavailable as e:
            logger.debug(f"Unproject skipped: {e}")
            return None
        world = (
            bottom_left[0]
            + (point.x / self.canvas_width) * (top_right[0] - bottom_left[0]),
            top_right[1]
            + (point.y / self.canvas_height) * (bottom_left[1] - top_right[1]),
        )
        return projection.from_point_to_lat_lng(world)

    def project(self, point: LatLng) -> ScreenPoint | None:
        try:
            projection, top_right, bottom_left = self._viewport()
        except ProjectionUnavailable as e:
            logger.debug(f"Project skipped: {e}")
            return None
        wx, wy = projection.from_lat_lng_to_point(point)
        if top_right[0] > TILE_SIZE_PX and wx < bottom_left[0]:
            wx += TILE_SIZE_PX
        span_x = top_right[0] - bottom_left[0]
        span_y = bottom_left[1] - top_right[1]
        return ScreenPoint(
            x=(wx - bottom_left[0]) / span_x * self.canvas_width,
            y=(wy - top_right[1]) / span_y * self.canvas_height,
        )

    # --- Notifications and lifecycle -----------------------------------

    def on_view_changed(self, callback: ViewChangedCallback) -> Unsubscribe:
        return self._emitter.subscribe(callback)

    def _on_native_change(self) -> None:
        if self._disposed:
            return
        self._emitter.emit(ViewState(center=self.get_center(), zoom=self.get_zoom()))

    def dispose(self) -> None:
        if self._disposed:
            logger.warning("Raster renderer already disposed; ignoring")
            return
        for handle in self._handles:
            handle.remove()
        self._handles.clear()
        self._renderer.clear_instance_listeners()
        self._emitter.clear()
        self._disposed = True
        logger.debug("Raster renderer disposed")
