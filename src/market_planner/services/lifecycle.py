"""Construction and teardown of the two map engines."""

import logging
from typing import Callable

from market_planner.adapters.base import MapEngineAdapter
from market_planner.adapters.headless import HeadlessRasterMap, HeadlessVectorMap
from market_planner.adapters.raster import RasterMapAdapter
from market_planner.adapters.vector import VectorMapAdapter
from market_planner.schemas import EngineSelector, LatLng, MapConfig

logger = logging.getLogger(__name__)

AdapterFactory = Callable[[], MapEngineAdapter]


class EngineLifecycle:
    """Builds both adapters once and disposes each of them exactly once.

    Usable as a context manager; leaving the block disposes the engines.
    """

    def __init__(self, factories: dict[EngineSelector, AdapterFactory]) -> None:
        self._factories = dict(factories)
        self._adapters: dict[EngineSelector, MapEngineAdapter] | None = None
        self._disposed = False

    @classmethod
    def headless(cls, config: MapConfig, raster_ready: bool = True) -> "EngineLifecycle":
        """Lifecycle over the in-process renderers, seeded from `config`."""
        center = LatLng(lat=config.default_lat, lng=config.default_lng)
        w, h = config.canvas_width, config.canvas_height

        def build_raster() -> MapEngineAdapter:
            renderer = HeadlessRasterMap(
                center, config.default_zoom, w, h, ready=raster_ready
            )
            return RasterMapAdapter(
                renderer,
                w,
                h,
                min_zoom=config.raster_min_zoom,
                max_zoom=config.raster_max_zoom,
            )

        def build_vector() -> MapEngineAdapter:
            renderer = HeadlessVectorMap(
                (center.lng, center.lat), config.default_zoom, w, h
            )
            return VectorMapAdapter(renderer)

        return cls(
            {
                EngineSelector.PRIMARY: build_raster,
                EngineSelector.SECONDARY: build_vector,
            }
        )

    @property
    def disposed(self) -> bool:
        return self._disposed

    def start(self) -> dict[EngineSelector, MapEngineAdapter]:
        """Construct the adapters on first call; later calls return them."""
        if self._disposed:
            raise RuntimeError("Engines already disposed")
        if self._adapters is None:
            self._adapters = {
                selector: factory() for selector, factory in self._factories.items()
            }
            logger.info(
                f"Started map engines: {', '.join(s.value for s in self._adapters)}"
            )
        return dict(self._adapters)

    def dispose(self) -> None:
        if self._disposed:
            logger.debug("Engines already disposed")
            return
        self._disposed = True
        for selector, adapter in (self._adapters or {}).items():
            adapter.dispose()
            logger.debug(f"Disposed {selector.value} engine")
        self._adapters = None

    def __enter__(self) -> dict[EngineSelector, MapEngineAdapter]:
        return self.start()

    def __exit__(self, *exc_info) -> None:
        self.dispose()
