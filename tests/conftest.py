"""
Pytest configuration and fixtures for ShipQuote tests.
"""
import asyncio
import os
from datetime import date
from typing import Optional

import pytest
from unittest.mock import AsyncMock

# Set test environment before importing shipquote modules
os.environ["ENVIRONMENT"] = "development"
os.environ["QUOTE_CACHE_BACKEND"] = "memory"
os.environ["REDIS_URL"] = ""
os.environ["PROVIDER_SIMULATED_LATENCY_SECONDS"] = "0"

from shipquote.modules.shipping.providers.base import BaseProvider, ProviderCode, Quote, QuoteRequest
from shipquote.modules.shipping.providers.pricing import ProviderTariff, standard_tiers


class StubProvider(BaseProvider):
    """
    Provider with scripted behaviour for aggregator tests.

    Returns a fixed quote, raises `error`, or sleeps `delay` seconds first.
    Counts calls so cache hits can be asserted.
    """

    def __init__(
        self,
        name: str,
        price: float = 100.0,
        min_days: int = 3,
        max_days: int = 4,
        delay: float = 0.0,
        error: Optional[Exception] = None,
    ):
        super().__init__()
        self._name = name
        self.price = price
        self.min_days = min_days
        self.max_days = max_days
        self.delay = delay
        self.error = error
        self.calls = 0

    @property
    def provider_code(self) -> ProviderCode:
        return ProviderCode.LOCAL

    @property
    def display_name(self) -> str:
        return self._name

    @property
    def provider_id(self) -> str:
        return f"{self._name.lower()}-stub"

    @property
    def provider_name(self) -> str:
        return f"{self._name} Stub"

    @property
    def tariff(self) -> ProviderTariff:
        return ProviderTariff(
            base_price=self.price,
            min_days=self.min_days,
            max_days=self.max_days,
            transport_mode="Truck",
            tiers=standard_tiers(0, 0, 0, 0),
            zone_multipliers={1: 1.0},
        )

    async def quote(self, weight: float, destination: str) -> Quote:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return Quote(
            provider_id=self.provider_id,
            provider_name=self.provider_name,
            price=self.price,
            currency="COP",
            min_days=self.min_days,
            max_days=self.max_days,
            transport_mode="Truck",
        )


class FakeClock:
    """Manually advanced clock for cache TTL tests."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def sample_request() -> QuoteRequest:
    """Standard 4.5 kg Bogotá -> Medellín shipment."""
    return QuoteRequest(
        origin="Bogotá",
        destination="Medellín",
        weight=4.5,
        pickup_date=date(2030, 1, 15),
        fragile=False,
    )


@pytest.fixture
def fragile_request(sample_request) -> QuoteRequest:
    from dataclasses import replace
    return replace(sample_request, fragile=True)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mock_redis() -> AsyncMock:
    """Create mock redis.asyncio client backed by a dict."""
    storage = {}
    client = AsyncMock()

    async def _get(key):
        return storage.get(key)

    async def _setex(key, ttl, value):
        storage[key] = value
        return True

    client.get = AsyncMock(side_effect=_get)
    client.setex = AsyncMock(side_effect=_setex)
    client.storage = storage
    return client
