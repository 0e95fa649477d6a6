"""Configuration schemas for the planner."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from market_planner.schemas.defaults import (
    DEFAULT_CANVAS_HEIGHT,
    DEFAULT_CANVAS_WIDTH,
    DEFAULT_CENTER_LAT,
    DEFAULT_CENTER_LNG,
    DEFAULT_GEOCODER_TIMEOUT_S,
    DEFAULT_GEOCODER_URL,
    DEFAULT_GEOCODER_USER_AGENT,
    DEFAULT_RASTER_MAX_ZOOM,
    DEFAULT_RASTER_MIN_ZOOM,
    DEFAULT_SCALE_BAR_ANGLE,
    DEFAULT_SCALE_BAR_LENGTH_M,
    DEFAULT_SCALE_BAR_TICK_HALF_LENGTH_PX,
    DEFAULT_SCALE_BAR_TICK_INTERVAL_M,
    DEFAULT_SEARCH_ZOOM,
    DEFAULT_STALL_GAP_M,
    DEFAULT_STALL_HEIGHT_M,
    DEFAULT_STALL_ROTATION,
    DEFAULT_STALL_WIDTH_M,
    DEFAULT_STORAGE_DIR,
    DEFAULT_STORAGE_KEY,
    DEFAULT_ZOOM,
)

# ---------------------------------------------------------------------------
# UI metadata helpers, attached to each Field via json_schema_extra.
# Keys:
#   ui_group  – control panel heading
#   ui_label  – human-readable control label
#   ui_format – rendering hint (int | float | meters | degrees | text)
# ---------------------------------------------------------------------------


def _ui(group: str, label: str, fmt: str = "float") -> dict:
    """Build json_schema_extra dict for a config field."""
    return {"ui_group": group, "ui_label": label, "ui_format": fmt}


class MapConfig(BaseModel):
    """Overlay canvas and initial view.

    The canvas size is the pixel frame stalls live in; the raster zoom range
    is the band the raster renderer is allowed to show.
    """

    canvas_width: int = Field(
        DEFAULT_CANVAS_WIDTH,
        gt=0,
        json_schema_extra=_ui("Map", "Canvas Width (px)", "int"),
    )
    canvas_height: int = Field(
        DEFAULT_CANVAS_HEIGHT,
        gt=0,
        json_schema_extra=_ui("Map", "Canvas Height (px)", "int"),
    )
    default_lat: float = Field(
        DEFAULT_CENTER_LAT,
        ge=-85,
        le=85,
        json_schema_extra=_ui("Map", "Start Latitude", "degrees"),
    )
    default_lng: float = Field(
        DEFAULT_CENTER_LNG,
        ge=-180,
        le=180,
        json_schema_extra=_ui("Map", "Start Longitude", "degrees"),
    )
    default_zoom: float = Field(
        DEFAULT_ZOOM,
        ge=0,
        le=22,
        json_schema_extra=_ui("Map", "Start Zoom", "float"),
    )
    search_zoom: float = Field(
        DEFAULT_SEARCH_ZOOM,
        ge=0,
        le=22,
        description="Zoom applied after a successful search",
        json_schema_extra=_ui("Map", "Search Zoom", "float"),
    )
    raster_min_zoom: float = Field(
        DEFAULT_RASTER_MIN_ZOOM,
        ge=0,
        json_schema_extra=_ui("Map", "Raster Min Zoom", "float"),
    )
    raster_max_zoom: float = Field(
        DEFAULT_RASTER_MAX_ZOOM,
        ge=0,
        json_schema_extra=_ui("Map", "Raster Max Zoom", "float"),
    )

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_zoom_range(self) -> "MapConfig":
        if self.raster_min_zoom > self.raster_max_zoom:
            raise ValueError("raster_min_zoom must not exceed raster_max_zoom")
        return self


class StallConfig(BaseModel):
    """Real-world stall size and placement defaults."""

    width_m: float = Field(
        DEFAULT_STALL_WIDTH_M,
        gt=0,
        json_schema_extra=_ui("Stalls", "Width (m)", "meters"),
    )
    height_m: float = Field(
        DEFAULT_STALL_HEIGHT_M,
        gt=0,
        json_schema_extra=_ui("Stalls", "Height (m)", "meters"),
    )
    rotation: float = Field(
        DEFAULT_STALL_ROTATION,
        ge=0,
        le=360,
        description="Rotation applied to newly placed stalls",
        json_schema_extra=_ui("Stalls", "Rotation", "degrees"),
    )
    gap_m: float = Field(
        DEFAULT_STALL_GAP_M,
        ge=0,
        description="Gap between stalls chained with 'add next'",
        json_schema_extra=_ui("Stalls", "Gap (m)", "meters"),
    )

    model_config = ConfigDict(frozen=True)


class ScaleBarConfig(BaseModel):
    """Reference bar drawn on the overlay."""

    length_m: float = Field(
        DEFAULT_SCALE_BAR_LENGTH_M,
        gt=0,
        json_schema_extra=_ui("Scale Bar", "Length (m)", "meters"),
    )
    tick_interval_m: float = Field(
        DEFAULT_SCALE_BAR_TICK_INTERVAL_M,
        gt=0,
        json_schema_extra=_ui("Scale Bar", "Tick Interval (m)", "meters"),
    )
    tick_half_length_px: float = Field(
        DEFAULT_SCALE_BAR_TICK_HALF_LENGTH_PX,
        ge=0,
        json_schema_extra=_ui("Scale Bar", "Tick Half Length (px)", "float"),
    )
    angle: float = Field(
        DEFAULT_SCALE_BAR_ANGLE,
        json_schema_extra=_ui("Scale Bar", "Angle", "degrees"),
    )

    model_config = ConfigDict(frozen=True)


class StorageConfig(BaseModel):
    """Where the stall list is persisted."""

    directory: str = Field(
        DEFAULT_STORAGE_DIR,
        json_schema_extra=_ui("Storage", "Store Directory", "text"),
    )
    key: str = Field(
        DEFAULT_STORAGE_KEY,
        min_length=1,
        json_schema_extra=_ui("Storage", "Store Key", "text"),
    )

    model_config = ConfigDict(frozen=True)


class GeocoderConfig(BaseModel):
    """Place search endpoint."""

    url: str = Field(
        DEFAULT_GEOCODER_URL,
        json_schema_extra=_ui("Search", "Geocoder URL", "text"),
    )
    user_agent: str = Field(
        DEFAULT_GEOCODER_USER_AGENT,
        json_schema_extra=_ui("Search", "User Agent", "text"),
    )
    timeout_s: float = Field(
        DEFAULT_GEOCODER_TIMEOUT_S,
        gt=0,
        json_schema_extra=_ui("Search", "Timeout (s)", "float"),
    )

    model_config = ConfigDict(frozen=True)


class PlannerConfig(BaseModel):
    """Root configuration for a planner session."""

    name: str = "Default"
    map: MapConfig = Field(default_factory=MapConfig)
    stall: StallConfig = Field(default_factory=StallConfig)
    scale_bar: ScaleBarConfig = Field(default_factory=ScaleBarConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    geocoder: GeocoderConfig = Field(default_factory=GeocoderConfig)

    model_config = ConfigDict(frozen=True)
