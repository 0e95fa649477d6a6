"""Centralized constants for the planner math.

This file contains the fixed values of:
- Web Mercator projection
- Tile/world geometry
- Renderer zoom limits
"""

# --- Web Mercator ---
EARTH_RADIUS_M = 6378137.0  # WGS84 semi-major axis, used by every web map
TILE_SIZE_PX = 256  # world is 256 px wide at zoom 0
MAX_MERCATOR_LAT = 85.05112878  # latitude where the square world ends

# --- Vector Renderer Limits ---
VECTOR_MIN_ZOOM = 0.0
VECTOR_MAX_ZOOM = 22.0

# --- Stall Placement ---
FULL_TURN_DEG = 360.0
