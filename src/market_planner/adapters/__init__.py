"""Map engine adapters.

- base.py: MapEngineAdapter protocol and the native renderer protocols
- vector.py: VectorMapAdapter (native unprojection, lng-lat pairs)
- raster.py: RasterMapAdapter (world-point projection + viewport bounds)
- headless.py: In-process renderers for both native APIs
"""

from market_planner.adapters.base import MapEngineAdapter, ViewChangeEmitter
from market_planner.adapters.headless import HeadlessRasterMap, HeadlessVectorMap
from market_planner.adapters.raster import RasterMapAdapter
from market_planner.adapters.vector import VectorMapAdapter

__all__ = [
    "MapEngineAdapter",
    "ViewChangeEmitter",
    "HeadlessRasterMap",
    "HeadlessVectorMap",
    "RasterMapAdapter",
    "VectorMapAdapter",
]
