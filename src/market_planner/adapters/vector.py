"""Adapter for the vector/tile renderer.

The vector renderer unprojects natively and reports fractional zoom freely;
this adapter never clamps zoom itself.  Native coordinates are lng-lat
ordered pairs and are converted to `LatLng` at the boundary.
"""

import logging

from market_planner.adapters.base import (
    Unsubscribe,
    VectorRenderer,
    ViewChangedCallback,
    ViewChangeEmitter,
)
from market_planner.core.projection import wrap_longitude
from market_planner.schemas import EngineSelector, LatLng, ScreenPoint, ViewState

logger = logging.getLogger(__name__)

_NATIVE_EVENTS = ("move", "zoom")


class VectorMapAdapter:
    """MapEngineAdapter over a vector renderer."""

    selector = EngineSelector.SECONDARY

    def __init__(self, renderer: VectorRenderer) -> None:
        self._renderer = renderer
        self._emitter = ViewChangeEmitter()
        self._disposed = False
        for event in _NATIVE_EVENTS:
            renderer.on(event, self._on_native_change)

    @property
    def disposed(self) -> bool:
        return self._disposed

    # --- View accessors -------------------------------------------------

    def get_center(self) -> LatLng:
        lng, lat = self._renderer.get_center()
        return LatLng(lat=lat, lng=wrap_longitude(lng))

    def set_center(self, center: LatLng) -> None:
        with self._emitter.suppress():
            self._renderer.set_center((center.lng, center.lat))

    def get_zoom(self) -> float:
        return float(self._renderer.get_zoom())

    def set_zoom(self, zoom: float) -> None:
        with self._emitter.suppress():
            self._renderer.set_zoom(zoom)

    def zoom_in(self) -> None:
        with self._emitter.suppress():
            self._renderer.zoom_in()

    def zoom_out(self) -> None:
        with self._emitter.suppress():
            self._renderer.zoom_out()

    def clamp_zoom(self, zoom: float) -> float:
        return zoom

    # --- Projection -----------------------------------------------------

    def unproject(self, point: ScreenPoint) -> LatLng | None:
        if self._disposed:
            return None
        lng, lat = self._renderer.unproject((point.x, point.y))
        return LatLng(lat=lat, lng=wrap_longitude(lng))

    def project(self, point: LatLng) -> ScreenPoint | None:
        if self._disposed:
            return None
        x, y = self._renderer.project((point.lng, point.lat))
        return ScreenPoint(x=x, y=y)

    # --- Notifications and lifecycle -----------------------------------

    def on_view_changed(self, callback: ViewChangedCallback) -> Unsubscribe:
        return self._emitter.subscribe(callback)

    def _on_native_change(self) -> None:
        if self._disposed:
            return
        self._emitter.emit(ViewState(center=self.get_center(), zoom=self.get_zoom()))

    def dispose(self) -> None:
        if self._disposed:
            logger.warning("Vector renderer already disposed; ignoring")
            return
        for event in _NATIVE_EVENTS:
            self._renderer.off(event, self._on_native_change)
        self._emitter.clear()
        self._renderer.remove()
        self._disposed = True
        logger.debug("Vector renderer disposed")
