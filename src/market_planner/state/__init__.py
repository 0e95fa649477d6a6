"""State management package for the planner UI.

This package provides reactive state split by concern:
- controls: Operator inputs bound to the control panel
- session: Planner outputs the map and overlay render
"""

from market_planner.state.controls import ControlState, control_state
from market_planner.state.session import LayoutSession, layout_session

__all__ = [
    "ControlState",
    "control_state",
    "LayoutSession",
    "layout_session",
]
