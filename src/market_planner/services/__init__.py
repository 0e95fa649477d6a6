"""Services package for planner orchestration.

This package contains:
- view_state.py: ViewStateController owning the shared map view
- lifecycle.py: EngineLifecycle constructing and disposing both engines
- search.py: SearchCoordinator running geocoder lookups off the event loop
- notifications.py: NotificationCenter for operator notices
- export.py: Layout export (percentages, JSON, CSV)
- planner.py: MarketPlanner wiring everything to operator events
"""

from market_planner.services.lifecycle import EngineLifecycle
from market_planner.services.notifications import NotificationCenter
from market_planner.services.planner import MarketPlanner, PlannerSnapshot
from market_planner.services.search import SearchCoordinator
from market_planner.services.view_state import ViewStateController

__all__ = [
    "EngineLifecycle",
    "NotificationCenter",
    "MarketPlanner",
    "PlannerSnapshot",
    "SearchCoordinator",
    "ViewStateController",
]
