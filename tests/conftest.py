"""Shared test fixtures for kostolany tests."""

from datetime import datetime, timedelta, timezone

import pytest

from kostolany.config import reset_settings
from kostolany.data.providers import FixedMarketConditions, StaticMarketDriverProvider
from kostolany.data.store import InMemoryDiagnosisStore
from kostolany.models.phase import MarketSentiment, VolumeCondition
from kostolany.models.portfolio import Holding
from kostolany.phases.registry import reset_registry
from kostolany.service.diagnosis import DiagnosisService


def _make_holdings(*pairs: tuple[str, float]) -> list[Holding]:
    """Build holdings from (name, value) pairs."""
    return [Holding(name=name, current_value=value) for name, value in pairs]


class TickingClock:
    """Deterministic clock: advances one second per call."""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(seconds=1)) -> None:
        self.now = start or datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now += self.step
        return current


@pytest.fixture
def clean_settings():
    """Reset cached settings and registry around a test that reloads config."""
    reset_settings()
    reset_registry()
    yield
    reset_settings()
    reset_registry()


@pytest.fixture
def bitcoin_heavy() -> list[Holding]:
    """80% crypto, 20% cash."""
    return _make_holdings(("Bitcoin", 800.0), ("Cash", 200.0))


@pytest.fixture
def balanced() -> list[Holding]:
    """25% in each explicit bucket."""
    return _make_holdings(
        ("Bitcoin", 250.0),
        ("Cash", 250.0),
        ("Stock fund", 250.0),
        ("Real estate", 250.0),
    )


@pytest.fixture
def store() -> InMemoryDiagnosisStore:
    return InMemoryDiagnosisStore()


@pytest.fixture
def service(store: InMemoryDiagnosisStore) -> DiagnosisService:
    return DiagnosisService(
        store=store,
        conditions=FixedMarketConditions(MarketSentiment.NEUTRAL, VolumeCondition.MEDIUM),
        drivers=StaticMarketDriverProvider(),
        clock=TickingClock(),
    )
