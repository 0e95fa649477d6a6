"""Layout export (JSON document and CSV table).

Stall geometry is exported relative to the canvas so that any viewer of
the same aspect ratio can redraw the layout:
1. JSON document with the confirmed view and the stall percentages
2. CSV with one row per stall, prefixed with the view it was drawn at
"""

import logging
import os
from datetime import date

import pandas as pd

from market_planner.core.errors import PreconditionError
from market_planner.schemas import (
    ConfirmedView,
    LayoutExport,
    Stall,
    StallPercentages,
)

logger = logging.getLogger(__name__)

EXPORT_DIR = "outputs"


def stall_to_percentages(
    stall: Stall, canvas_width: float, canvas_height: float
) -> StallPercentages:
    """Express a stall in percent of the canvas; rotation stays in degrees."""
    return StallPercentages(
        id=stall.id,
        x_position=stall.x / canvas_width * 100,
        y_position=stall.y / canvas_height * 100,
        width=stall.width / canvas_width * 100,
        height=stall.height / canvas_height * 100,
        rotation=stall.rotation,
        is_available=True,
    )


def build_layout_export(
    stalls: list[Stall],
    confirmed: ConfirmedView | None,
    market_date: date | None,
    canvas_width: int,
    canvas_height: int,
) -> LayoutExport:
    """Assemble the export document.

    Args:
        stalls: Stalls in placement order.
        confirmed: The locked view the stalls were drawn under.
        market_date: Day the layout applies to.
        canvas_width: Overlay width in px.
        canvas_height: Overlay height in px.

    Returns:
        The export document.

    Raises:
        PreconditionError: If the date or the confirmed view is missing.
    """
    if market_date is None:
        raise PreconditionError("Please select a market date before exporting")
    if confirmed is None:
        raise PreconditionError("Please confirm the view before exporting")
    return LayoutExport(
        market_date=market_date,
        center=confirmed.center,
        zoom=confirmed.zoom,
        canvas_width=canvas_width,
        canvas_height=canvas_height,
        stalls=[stall_to_percentages(s, canvas_width, canvas_height) for s in stalls],
    )


def stalls_to_dataframe(export: LayoutExport) -> pd.DataFrame:
    """One row per stall with the view it belongs to in every row."""
    context = {
        "market_date": export.market_date.isoformat(),
        "center_lat": export.center.lat,
        "center_lng": export.center.lng,
        "zoom": export.zoom,
    }
    rows = [{**context, **s.model_dump(mode="json")} for s in export.stalls]
    columns = list(context) + list(StallPercentages.model_fields)
    return pd.DataFrame(rows, columns=columns)


def _default_path(export: LayoutExport, suffix: str) -> str:
    os.makedirs(EXPORT_DIR, exist_ok=True)
    return f"{EXPORT_DIR}/market_layout_{export.market_date.isoformat()}.{suffix}"


def write_layout_export(
    export: LayoutExport, output_path: str | None = None
) -> str | bytes:
    """Write the export document as JSON.

    Args:
        export: Document to write.
        output_path: File path to write to.
                     - If None (default): Generates a path in outputs/.
                     - If "": Returns bytes (in-memory).
                     - If valid path: Writes to that path.

    Returns:
        str (path) if written to file.
        bytes if output_path was empty string.
    """
    payload = export.model_dump_json(indent=2)
    if output_path == "":
        return payload.encode("utf-8")
    if output_path is None:
        output_path = _default_path(export, "json")
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(payload)
    logger.info(f"Exported {len(export.stalls)} stalls to {output_path}")
    return output_path


def write_layout_csv(export: LayoutExport, output_path: str | None = None) -> str | bytes:
    """Write the stall table as CSV (None=auto path, ""=bytes)."""
    df = stalls_to_dataframe(export)
    if output_path == "":
        return df.to_csv(index=False).encode("utf-8")
    if output_path is None:
        output_path = _default_path(export, "csv")
    df.to_csv(output_path, index=False)
    logger.info(f"Exported {len(df)} stall rows to {output_path}")
    return output_path
