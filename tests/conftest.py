"""Shared fixtures for cost tracker tests."""

import asyncio
from datetime import datetime

import pytest

from cost_tracker.database import open_costs_db
from cost_tracker.managers import SettingsStore


class FakeClock:
    """Callable clock whose current time tests can move around."""

    def __init__(self, now: datetime = datetime(2024, 1, 1, 12, 0)):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class FixedRates:
    """Stand-in for ExchangeRateService returning a fixed table."""

    def __init__(self, rates):
        self.rates = rates
        self.calls = 0

    async def fetch_rates(self):
        self.calls += 1
        return dict(self.rates)


@pytest.fixture
def db_file(tmp_path):
    return str(tmp_path / "costsdb.db")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def costs_db(db_file, clock):
    return asyncio.run(open_costs_db(db_file, 1, clock=clock))


@pytest.fixture
def settings_store(tmp_path):
    return SettingsStore(str(tmp_path / "settings.json"))


@pytest.fixture
def fixed_rates():
    """Factory for FixedRates stand-ins."""
    return FixedRates
