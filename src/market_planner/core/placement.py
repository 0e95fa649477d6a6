"""Stall placement logic.

Converts real-world stall sizes into overlay pixels at the confirmed scale
and positions new stalls either under a click or chained after the stall
edited last.  A stall's pixel footprint is fixed when it is created; later
zoom changes never rescale existing stalls.
"""

import logging
import math
from typing import Callable
from uuid import UUID

from market_planner.core.constants import FULL_TURN_DEG
from market_planner.core.errors import PreconditionError
from market_planner.core.projection import meters_to_pixels
from market_planner.schemas import ScreenPoint, Stall
from market_planner.schemas.defaults import DEFAULT_STALL_GAP_M, DEFAULT_STALL_ROTATION

logger = logging.getLogger(__name__)

StallsChanged = Callable[[list[Stall]], None]


def normalize_rotation(angle: float) -> float:
    """Map any angle into [0, 360); NaN and infinities become 0."""
    if not math.isfinite(angle):
        return 0.0
    result = math.fmod(angle, FULL_TURN_DEG)
    if result < 0:
        result += FULL_TURN_DEG
    # fmod of a tiny negative angle can round up to exactly 360
    return 0.0 if result >= FULL_TURN_DEG else result


def clamp_rotation_setting(angle: float) -> float:
    """Sanitize operator rotation input: NaN becomes 0, then clamp to [0, 360]."""
    if math.isnan(angle):
        return 0.0
    return max(0.0, min(FULL_TURN_DEG, angle))


def _require_positive(name: str, meters: float) -> None:
    if not meters > 0:
        raise PreconditionError(f"Stall {name} must be positive, got {meters} m")


class StallPlacementEngine:
    """Owns the ordered stall list and everything that edits it.

    Every mutation calls `on_change` with the full list afterwards; the
    planner wires that to the repository so the store always mirrors the
    in-memory list.

    Attributes:
        canvas_width: Overlay width in px (W).
        canvas_height: Overlay height in px (H).
        gap_m: Spacing between stalls chained with `add_next`.
        next_rotation: Rotation given to the next new stall; also the
            operator's current rotation setting.
        selected_id: Stall currently selected, if any.
        latest_id: Stall created most recently.
        last_edited_id: Stall created or dragged most recently; the anchor
            for `add_next`.
    """

    def __init__(
        self,
        canvas_width: float,
        canvas_height: float,
        stalls: list[Stall] | None = None,
        default_rotation: float = DEFAULT_STALL_ROTATION,
        gap_m: float = DEFAULT_STALL_GAP_M,
        on_change: StallsChanged | None = None,
    ) -> None:
        self.canvas_width = canvas_width
        self.canvas_height = canvas_height
        self.gap_m = gap_m
        self.default_rotation = clamp_rotation_setting(default_rotation)
        self.next_rotation = self.default_rotation
        self.selected_id: UUID | None = None
        self.latest_id: UUID | None = None
        self.last_edited_id: UUID | None = None
        self.on_change = on_change
        self._stalls: list[Stall] = list(stalls or [])

    @property
    def stalls(self) -> list[Stall]:
        return list(self._stalls)

    def get(self, stall_id: UUID) -> Stall | None:
        for stall in self._stalls:
            if stall.id == stall_id:
                return stall
        return None

    # --- Creation -------------------------------------------------------

    def place_at(
        self,
        click: ScreenPoint,
        width_m: float,
        height_m: float,
        latitude: float,
        zoom: float,
    ) -> Stall:
        """Create a stall centered on an overlay click.

        Args:
            click: Overlay pixel the operator clicked.
            width_m: Real-world stall width.
            height_m: Real-world stall height.
            latitude: Latitude of the confirmed view.
            zoom: Zoom the overlay is currently drawn at.

        Returns:
            The new stall.

        Raises:
            PreconditionError: If a size is not positive.
        """
        w_px, h_px = self._footprint(width_m, height_m, latitude, zoom)
        stall = Stall(
            x=click.x - w_px / 2,
            y=click.y - h_px / 2,
            width=w_px,
            height=h_px,
            rotation=normalize_rotation(self.next_rotation),
        )
        self._append(stall)
        logger.info(f"Placed stall {stall.id} at ({click.x:.1f}, {click.y:.1f})")
        return stall

    def add_next(
        self, width_m: float, height_m: float, latitude: float, zoom: float
    ) -> Stall:
        """Create a stall one stall-width plus gap beyond the reference stall.

        The reference is the last edited stall if it still exists, else the
        last stall, else a synthetic stall at the canvas center.  The offset
        follows the current rotation setting, so chained stalls form a row
        along that heading.

        Raises:
            PreconditionError: If a size is not positive.
        """
        w_px, h_px = self._footprint(width_m, height_m, latitude, zoom)
        gap_px = meters_to_pixels(self.gap_m, latitude, zoom)
        ref_x, ref_y = self._reference_corner()

        angle = math.radians(self.next_rotation)
        step = w_px + gap_px
        stall = Stall(
            x=ref_x + step * math.cos(angle),
            y=ref_y + step * math.sin(angle),
            width=w_px,
            height=h_px,
            rotation=normalize_rotation(self.next_rotation),
        )
        self._append(stall)
        logger.info(f"Added stall {stall.id} next to reference ({ref_x:.1f}, {ref_y:.1f})")
        return stall

    def _footprint(
        self, width_m: float, height_m: float, latitude: float, zoom: float
    ) -> tuple[float, float]:
        _require_positive("width", width_m)
        _require_positive("height", height_m)
        return (
            meters_to_pixels(width_m, latitude, zoom),
            meters_to_pixels(height_m, latitude, zoom),
        )

    def _reference_corner(self) -> tuple[float, float]:
        ref = self.get(self.last_edited_id) if self.last_edited_id else None
        if ref is None and self._stalls:
            ref = self._stalls[-1]
        if ref is None:
            # synthetic anchor at the canvas center
            return self.canvas_width / 2, self.canvas_height / 2
        return ref.x, ref.y

    def _append(self, stall: Stall) -> None:
        self._stalls.append(stall)
        self.latest_id = stall.id
        self.last_edited_id = stall.id
        self._notify()

    # --- Editing --------------------------------------------------------

    def set_rotation(self, angle: float, apply_to_selected: bool = True) -> float:
        """Apply the operator's rotation setting.

        NaN becomes 0 and the value is clamped to [0, 360].  The setting is
        remembered for new stalls and, when a stall is selected and
        `apply_to_selected` is set, written to it (stored modulo 360).

        Returns:
            The clamped setting.
        """
        value = clamp_rotation_setting(angle)
        self.next_rotation = value
        selected = self.get(self.selected_id) if self.selected_id is not None else None
        if apply_to_selected and selected is not None:
            self._replace(self.selected_id, rotation=normalize_rotation(value))
        return value

    def select(self, stall_id: UUID | None) -> None:
        if stall_id is not None and self.get(stall_id) is None:
            logger.debug(f"Ignoring selection of unknown stall {stall_id}")
            return
        self.selected_id = stall_id

    def move(self, stall_id: UUID, x: float, y: float) -> Stall | None:
        """Drag end: overwrite the stall's corner and mark it last edited."""
        if not (math.isfinite(x) and math.isfinite(y)):
            logger.debug(f"Ignoring non-finite move of stall {stall_id} to ({x}, {y})")
            return None
        stall = self._replace(stall_id, x=x, y=y)
        if stall is not None:
            self.last_edited_id = stall_id
        return stall

    def rotate(self, stall_id: UUID, rotation: float) -> Stall | None:
        """Transform end: overwrite the stall's rotation."""
        return self._replace(stall_id, rotation=normalize_rotation(rotation))

    def remove(self, stall_id: UUID) -> bool:
        before = len(self._stalls)
        self._stalls = [s for s in self._stalls if s.id != stall_id]
        if len(self._stalls) == before:
            return False
        if self.selected_id == stall_id:
            self.selected_id = None
        self._notify()
        logger.info(f"Removed stall {stall_id}")
        return True

    def clear(self) -> None:
        """Drop every stall and the selection/edit markers."""
        self._stalls = []
        self.selected_id = None
        self.latest_id = None
        self.last_edited_id = None
        self._notify()

    def reset(self) -> None:
        """Clear stalls and restore the default rotation setting."""
        self.next_rotation = self.default_rotation
        self.clear()

    def _replace(self, stall_id: UUID, **update: float) -> Stall | None:
        for i, stall in enumerate(self._stalls):
            if stall.id == stall_id:
                updated = stall.model_copy(update=update)
                self._stalls[i] = updated
                self._notify()
                return updated
        logger.debug(f"Ignoring edit of unknown stall {stall_id}")
        return None

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self.stalls)
