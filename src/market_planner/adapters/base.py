"""Capability surface shared by both map engines.

The two renderers have incompatible native APIs (coordinate ordering,
event names, how projection is exposed).  Each adapter wraps one renderer
and conforms to `MapEngineAdapter`; there is no common base class.

Setters on an adapter are one-way commands: while a setter runs, the
renderer's own change events are swallowed so that only user-driven
movement travels back upward through `on_view_changed`.
"""

from contextlib import contextmanager
from typing import Callable, Iterator, Protocol

from market_planner.core.projection import WorldPoint
from market_planner.schemas import (
    Bounds,
    EngineSelector,
    LatLng,
    ScreenPoint,
    ViewState,
)

ViewChangedCallback = Callable[[ViewState], None]
Unsubscribe = Callable[[], None]


class MapEngineAdapter(Protocol):
    """Protocol every map engine adapter conforms to."""

    selector: EngineSelector

    def get_center(self) -> LatLng: ...

    def set_center(self, center: LatLng) -> None: ...

    def get_zoom(self) -> float: ...

    def set_zoom(self, zoom: float) -> None: ...

    def zoom_in(self) -> None: ...

    def zoom_out(self) -> None: ...

    def clamp_zoom(self, zoom: float) -> float:
        """Return `zoom` limited to what this engine can display."""
        ...

    def unproject(self, point: ScreenPoint) -> LatLng | None:
        """Overlay pixel to coordinate, or None if the engine is not ready."""
        ...

    def project(self, point: LatLng) -> ScreenPoint | None:
        """Coordinate to overlay pixel, or None if the engine is not ready."""
        ...

    def on_view_changed(self, callback: ViewChangedCallback) -> Unsubscribe:
        """Register for user-driven pan/zoom notifications."""
        ...

    def dispose(self) -> None:
        """Release the native renderer. Must be called exactly once."""
        ...


# ----------------------------------------------------------------------
# Native renderer APIs consumed by the adapters
# ----------------------------------------------------------------------


class VectorRenderer(Protocol):
    """Native API of the vector/tile renderer (lng-lat ordered pairs)."""

    def get_center(self) -> tuple[float, float]: ...

    def set_center(self, lng_lat: tuple[float, float]) -> None: ...

    def get_zoom(self) -> float: ...

    def set_zoom(self, zoom: float) -> None: ...

    def zoom_in(self) -> None: ...

    def zoom_out(self) -> None: ...

    def unproject(self, xy: tuple[float, float]) -> tuple[float, float]: ...

    def project(self, lng_lat: tuple[float, float]) -> tuple[float, float]: ...

    def on(self, event: str, handler: Callable[[], None]) -> None: ...

    def off(self, event: str, handler: Callable[[], None]) -> None: ...

    def remove(self) -> None: ...


class RasterProjection(Protocol):
    """World-point projection object exposed by the raster renderer."""

    def from_lat_lng_to_point(self, point: LatLng) -> WorldPoint: ...

    def from_point_to_lat_lng(self, world: WorldPoint) -> LatLng: ...


class ListenerHandle(Protocol):
    def remove(self) -> None: ...


class RasterRenderer(Protocol):
    """Native API of the raster/business renderer.

    `get_projection` and `get_bounds` return None until the renderer has
    finished its asynchronous initialization.
    """

    def get_center(self) -> LatLng: ...

    def set_center(self, center: LatLng) -> None: ...

    def pan_to(self, center: LatLng) -> None: ...

    def get_zoom(self) -> float: ...

    def set_zoom(self, zoom: float) -> None: ...

    def get_projection(self) -> RasterProjection | None: ...

    def get_bounds(self) -> Bounds | None: ...

    def add_listener(
        self, event: str, handler: Callable[[], None]
    ) -> ListenerHandle: ...

    def clear_instance_listeners(self) -> None: ...


# ----------------------------------------------------------------------
# Notification plumbing (composed into each adapter)
# ----------------------------------------------------------------------


class ViewChangeEmitter:
    """Listener list with a suppression window for programmatic changes."""

    def __init__(self) -> None:
        self._listeners: list[ViewChangedCallback] = []
        self._suppress_depth = 0

    @property
    def suppressed(self) -> bool:
        return self._suppress_depth > 0

    def subscribe(self, callback: ViewChangedCallback) -> Unsubscribe:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    @contextmanager
    def suppress(self) -> Iterator[None]:
        """Swallow notifications fired while a setter is being applied."""
        self._suppress_depth += 1
        try:
            yield
        finally:
            self._suppress_depth -= 1

    def emit(self, view: ViewState) -> None:
        if self.suppressed:
            return
        for listener in list(self._listeners):
            listener(view)

    def clear(self) -> None:
        self._listeners.clear()
