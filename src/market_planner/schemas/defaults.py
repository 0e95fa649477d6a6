"""Default parameter values for the Market Planner.

These constants are used as `Field(default=...)` values in the Pydantic
config schemas.  They live here (in the schemas layer) rather than in
`core/constants.py` so that `schemas` does not depend on `core`.

All real-world lengths are in METERS, all canvas lengths in overlay PIXELS
and all angles in DEGREES.
"""

# =============================================================================
# CANVAS REFERENCE
# =============================================================================
# The overlay canvas has a fixed pixel size.  Stall coordinates are stored
# in this pixel space and exported as percentages of it, so changing the
# canvas size invalidates previously exported layouts.
# =============================================================================
DEFAULT_CANVAS_WIDTH = 800  # px
DEFAULT_CANVAS_HEIGHT = 600  # px

# --- Initial View ---
# Linz main square, where the prototype market was first laid out.
DEFAULT_CENTER_LAT = 48.30694
DEFAULT_CENTER_LNG = 14.28583
DEFAULT_ZOOM = 17.0
# Zoom applied after a successful place search.
DEFAULT_SEARCH_ZOOM = 17.0

# --- Raster Engine Zoom Range ---
# The raster renderer only supports integer-ish street zoom levels in this
# range; the vector renderer is not clamped by its adapter.
DEFAULT_RASTER_MIN_ZOOM = 10.0
DEFAULT_RASTER_MAX_ZOOM = 21.0

# --- Stall Defaults ---
DEFAULT_STALL_WIDTH_M = 2.0
DEFAULT_STALL_HEIGHT_M = 3.0
DEFAULT_STALL_ROTATION = 45.0  # deg: initial "next rotation" setting
# Gap left between chained stalls by "add next".
DEFAULT_STALL_GAP_M = 0.5

# --- Scale Bar Defaults ---
DEFAULT_SCALE_BAR_LENGTH_M = 50.0
DEFAULT_SCALE_BAR_TICK_INTERVAL_M = 10.0
DEFAULT_SCALE_BAR_TICK_HALF_LENGTH_PX = 5.0
DEFAULT_SCALE_BAR_ANGLE = 48.0  # deg

# --- Storage Defaults ---
DEFAULT_STORAGE_DIR = ".planner_store"
# Kept identical to the browser prototype's localStorage key.
DEFAULT_STORAGE_KEY = "stalls_dual_full"

# --- Geocoder Defaults ---
DEFAULT_GEOCODER_URL = "https://nominatim.openstreetmap.org/search"
DEFAULT_GEOCODER_USER_AGENT = "market-planner/0.1"
DEFAULT_GEOCODER_TIMEOUT_S = 10.0
