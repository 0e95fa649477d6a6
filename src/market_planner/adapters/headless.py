"""In-process renderers speaking both native map APIs.

They keep a Web Mercator viewport of fixed pixel size and fire the same
change events a browser renderer would, including for programmatic moves.
Used for headless sessions and tests; a GUI build swaps in real renderers
behind the same native protocols.
"""

from typing import Callable

from market_planner.core.constants import VECTOR_MAX_ZOOM, VECTOR_MIN_ZOOM
from market_planner.core.projection import (
    WebMercatorProjection,
    lat_lng_to_world,
    world_to_lat_lng,
)
from market_planner.schemas import Bounds, LatLng

Handler = Callable[[], None]


class _Viewport:
    """Center, zoom and pixel size of a rendered map."""

    def __init__(self, center: LatLng, zoom: float, width: float, height: float):
        self.center = center
        self.zoom = zoom
        self.width = width
        self.height = height

    def screen_to_lat_lng(self, x: float, y: float) -> LatLng:
        cx, cy = lat_lng_to_world(self.center, self.zoom)
        return world_to_lat_lng(
            (cx + x - self.width / 2, cy + y - self.height / 2), self.zoom
        )

    def lat_lng_to_screen(self, point: LatLng) -> tuple[float, float]:
        cx, cy = lat_lng_to_world(self.center, self.zoom)
        wx, wy = lat_lng_to_world(point, self.zoom)
        return wx - cx + self.width / 2, wy - cy + self.height / 2

    def bounds(self) -> Bounds:
        return Bounds(
            north_east=self.screen_to_lat_lng(self.width, 0),
            south_west=self.screen_to_lat_lng(0, self.height),
        )

    def shifted(self, dx: float, dy: float) -> LatLng:
        """Center after dragging the map content by (-dx, -dy) pixels."""
        return self.screen_to_lat_lng(self.width / 2 + dx, self.height / 2 + dy)


class HeadlessVectorMap:
    """Vector renderer: lng-lat pairs, native unproject, named events."""

    def __init__(
        self,
        lng_lat: tuple[float, float],
        zoom: float,
        width: float,
        height: float,
        min_zoom: float = VECTOR_MIN_ZOOM,
        max_zoom: float = VECTOR_MAX_ZOOM,
    ) -> None:
        lng, lat = lng_lat
        self.min_zoom = min_zoom
        self.max_zoom = max_zoom
        self._view = _Viewport(LatLng(lat=lat, lng=lng), zoom, width, height)
        self._handlers: dict[str, list[Handler]] = {}
        self.removed = False

    # --- Native API -----------------------------------------------------

    def get_center(self) -> tuple[float, float]:
        return self._view.center.lng, self._view.center.lat

    def set_center(self, lng_lat: tuple[float, float]) -> None:
        lng, lat = lng_lat
        self._view.center = LatLng(lat=lat, lng=lng)
        self._fire("move")

    def get_zoom(self) -> float:
        return self._view.zoom

    def set_zoom(self, zoom: float) -> None:
        self._view.zoom = max(self.min_zoom, min(self.max_zoom, zoom))
        self._fire("zoom")
        self._fire("move")

    def zoom_in(self) -> None:
        self.set_zoom(self._view.zoom + 1)

    def zoom_out(self) -> None:
        self.set_zoom(self._view.zoom - 1)

    def unproject(self, xy: tuple[float, float]) -> tuple[float, float]:
        point = self._view.screen_to_lat_lng(*xy)
        return point.lng, point.lat

    def project(self, lng_lat: tuple[float, float]) -> tuple[float, float]:
        lng, lat = lng_lat
        return self._view.lat_lng_to_screen(LatLng(lat=lat, lng=lng))

    def on(self, event: str, handler: Handler) -> None:
        self._handlers.setdefault(event, []).append(handler)

    def off(self, event: str, handler: Handler) -> None:
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def remove(self) -> None:
        self._handlers.clear()
        self.removed = True

    # --- Simulated user gestures ---------------------------------------

    def drag_by(self, dx: float, dy: float) -> None:
        point = self._view.shifted(dx, dy)
        self.set_center((point.lng, point.lat))

    def _fire(self, event: str) -> None:
        for handler in list(self._handlers.get(event, [])):
            handler()


class _Listener:
    def __init__(self, owner: "HeadlessRasterMap", event: str, handler: Handler):
        self._owner = owner
        self._event = event
        self._handler = handler

    def remove(self) -> None:
        self._owner._detach(self._event, self._handler)


class HeadlessRasterMap:
    """Raster renderer: LatLng objects, projection + bounds, listener handles.

    Starts without projection and bounds when `ready=False`, like a browser
    renderer whose tiles have not loaded; call `finish_loading()` to end
    the start-up window.
    """

    def __init__(
        self,
        center: LatLng,
        zoom: float,
        width: float,
        height: float,
        ready: bool = True,
    ) -> None:
        self._view = _Viewport(center, zoom, width, height)
        self._projection = WebMercatorProjection()
        self._handlers: dict[str, list[Handler]] = {}
        self.ready = ready

    # --- Native API -----------------------------------------------------

    def get_center(self) -> LatLng:
        return self._view.center

    def set_center(self, center: LatLng) -> None:
        self._view.center = center
        self._fire("center_changed")

    def pan_to(self, center: LatLng) -> None:
        self.set_center(center)

    def get_zoom(self) -> float:
        return self._view.zoom

    def set_zoom(self, zoom: float) -> None:
        self._view.zoom = zoom
        self._fire("zoom_changed")

    def get_projection(self) -> WebMercatorProjection | None:
        return self._projection if self.ready else None

    def get_bounds(self) -> Bounds | None:
        return self._view.bounds() if self.ready else None

    def add_listener(self, event: str, handler: Handler) -> _Listener:
        self._handlers.setdefault(event, []).append(handler)
        return _Listener(self, event, handler)

    def clear_instance_listeners(self) -> None:
        self._handlers.clear()

    # --- Simulated start-up and gestures -------------------------------

    def finish_loading(self) -> None:
        self.ready = True

    def drag_by(self, dx: float, dy: float) -> None:
        self.set_center(self._view.shifted(dx, dy))

    def _detach(self, event: str, handler: Handler) -> None:
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def _fire(self, event: str) -> None:
        for handler in list(self._handlers.get(event, [])):
            handler()
