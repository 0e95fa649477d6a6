"""Shared test fixtures."""

from typing import Callable

import pytest

from market_planner.infrastructure.persistence import MemoryStore, StallRepository
from market_planner.schemas import LatLng, PlannerConfig, Stall, ViewState
from market_planner.services.planner import MarketPlanner, PlannerSnapshot
from market_planner.services.view_state import ViewStateController
from .factories import Engines, create_engines, create_stall, create_view


class FakeGeocoder:
    """Geocoder answering from a fixed table; unknown queries match nothing."""

    def __init__(self, places: dict[str, LatLng] | None = None):
        self.places = places or {}
        self.queries: list[str] = []

    def lookup(self, query: str) -> LatLng | None:
        self.queries.append(query)
        return self.places.get(query)


@pytest.fixture
def stall_factory() -> Callable[..., Stall]:
    """Fixture that returns the stall factory function."""
    return create_stall


@pytest.fixture
def config() -> PlannerConfig:
    return PlannerConfig()


@pytest.fixture
def default_view() -> ViewState:
    return create_view()


@pytest.fixture
def engines(config: PlannerConfig) -> Engines:
    """Ready headless engines at the default view."""
    return create_engines(config.map)


@pytest.fixture
def controller(engines: Engines, default_view: ViewState) -> ViewStateController:
    return ViewStateController(engines.adapters, default_view)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def repository(store: MemoryStore, config: PlannerConfig) -> StallRepository:
    return StallRepository(store, config.storage.key)


@pytest.fixture
def geocoder() -> FakeGeocoder:
    return FakeGeocoder({"Linz Hauptplatz": LatLng(lat=48.3059, lng=14.2862)})


@pytest.fixture
def published() -> list[PlannerSnapshot]:
    """Snapshots the planner publishes, in order."""
    return []


@pytest.fixture
def planner(
    config: PlannerConfig,
    engines: Engines,
    repository: StallRepository,
    geocoder: FakeGeocoder,
    published: list[PlannerSnapshot],
) -> MarketPlanner:
    return MarketPlanner(
        config,
        engines.adapters,
        repository,
        geocoder=geocoder,
        on_update=published.append,
    )
