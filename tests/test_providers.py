"""
Tests for the FedEx, DHL and Local pricing providers and the provider factory.
"""
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from shipquote.core.exceptions import ProviderRequestError
from shipquote.modules.shipping.providers import (
    DHLProvider,
    FedExProvider,
    LocalProvider,
    ProviderCode,
    build_default_providers,
    build_providers,
)


class TestFedExProvider:

    @pytest.fixture
    def provider(self):
        return FedExProvider()

    @pytest.mark.asyncio
    async def test_quote_shape(self, provider):
        quote = await provider.quote(4.5, "Bogotá")
        assert quote.provider_id == "fedex-ground"
        assert quote.provider_name == "FedEx Ground"
        assert quote.currency == "COP"
        assert quote.transport_mode == "Truck"
        assert (quote.min_days, quote.max_days) == (3, 4)
        assert quote.estimated_days == 4
        assert quote.is_cheapest is False and quote.is_fastest is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("weight, destination, expected", [
        (4.5, "Bogotá", 77500),      # 10000 + 4.5 * 15000 * 1.0
        (4.5, "Medellín", 87625),    # 10000 + 67500 * 1.15
        (5, "Bogotá", 70000),        # tier boundary: 5 kg uses 12000
        (20, "Cali", 260000),        # 10000 + 20 * 10000 * 1.25
        (50, "Bogotá", 435000),      # 10000 + 50 * 8500
        (1, "Leticia", 34000),       # 10000 + 15000 * 1.6
        (4.5, "CiudadDesconocida", 77500),
    ])
    async def test_prices(self, provider, weight, destination, expected):
        quote = await provider.quote(weight, destination)
        assert quote.price == pytest.approx(expected)

    @pytest.mark.asyncio
    async def test_city_matching_ignores_case_and_accents(self, provider):
        prices = {(await provider.quote(4.5, city)).price for city in ["MEDELLÍN", "medellín", "Medellin"]}
        assert len(prices) == 1
        assert prices.pop() == pytest.approx(87625)


class TestDHLProvider:

    @pytest.mark.asyncio
    async def test_quote(self):
        quote = await DHLProvider().quote(4.5, "Bogotá")
        assert quote.provider_id == "dhl-express"
        assert quote.provider_name == "DHL Express"
        assert quote.transport_mode == "Air"
        assert quote.estimated_days == 5
        assert quote.price == pytest.approx(66500)  # 8000 + 4.5 * 13000

    @pytest.mark.asyncio
    async def test_zone_four(self):
        quote = await DHLProvider().quote(10, "Cartagena")
        assert quote.price == pytest.approx(8000 + 10 * 10500 * 1.3)


class TestLocalProvider:

    @pytest.mark.asyncio
    async def test_quote(self):
        quote = await LocalProvider().quote(10, "Cali")
        assert quote.provider_id == "local-courier"
        assert quote.provider_name == "Local Courier"
        assert quote.estimated_days == 7
        assert quote.price == pytest.approx(89000)  # 5000 + 10 * 7500 * 1.12

    @pytest.mark.asyncio
    async def test_multipliers_not_monotonic(self):
        provider = LocalProvider()
        bogota = await provider.quote(10, "Bogotá")
        cali = await provider.quote(10, "Cali")
        assert bogota.price > cali.price


class TestProviderInputChecks:
    """Providers refuse shipments outside 0.1-1000 kg or without a destination."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("weight, destination", [
        (0, "Bogotá"),
        (-5, "Bogotá"),
        (0.05, "Bogotá"),
        (1000.5, "Bogotá"),
        (5, ""),
        (5, "   "),
    ])
    async def test_invalid_input_raises(self, weight, destination):
        for provider in (FedExProvider(), DHLProvider(), LocalProvider()):
            with pytest.raises(ProviderRequestError) as exc_info:
                await provider.quote(weight, destination)
            assert exc_info.value.provider == provider.display_name

    @pytest.mark.asyncio
    async def test_limits_are_inclusive(self):
        provider = FedExProvider()
        assert (await provider.quote(0.1, "Bogotá")).price > 0
        assert (await provider.quote(1000, "Bogotá")).price > 0


class TestSimulatedLatency:

    @pytest.mark.asyncio
    async def test_sleeps_when_configured(self):
        provider = FedExProvider(latency_seconds=0.25)
        with patch("shipquote.modules.shipping.providers.base.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            await provider.quote(1, "Bogotá")
        mock_sleep.assert_awaited_once_with(0.25)

    @pytest.mark.asyncio
    async def test_no_sleep_by_default(self):
        with patch("shipquote.modules.shipping.providers.base.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            await FedExProvider().quote(1, "Bogotá")
        mock_sleep.assert_not_called()


class TestProviderFactory:

    def test_fixed_registration_order(self):
        providers = build_providers(["local", "FEDEX", "dhl"])
        assert [p.provider_code for p in providers] == [
            ProviderCode.FEDEX,
            ProviderCode.DHL,
            ProviderCode.LOCAL,
        ]

    def test_unknown_codes_skipped(self):
        providers = build_providers(["UPS", "DHL"])
        assert [p.display_name for p in providers] == ["DHL"]

    def test_duplicates_removed(self):
        assert len(build_providers(["DHL", "dhl"])) == 1

    def test_each_call_returns_fresh_instances(self):
        first = build_providers(["FEDEX"])
        second = build_providers(["FEDEX"])
        assert first[0] is not second[0]

    def test_build_default_providers_from_settings(self):
        settings = SimpleNamespace(
            QUOTE_ENABLED_PROVIDERS=["FEDEX", "LOCAL"],
            PROVIDER_SIMULATED_LATENCY_SECONDS=0.5,
            QUOTE_CURRENCY="COP",
        )
        providers = build_default_providers(settings)
        assert [p.display_name for p in providers] == ["FedEx", "Local"]
        assert all(p.latency_seconds == 0.5 for p in providers)

    def test_build_default_providers_none_enabled(self):
        settings = SimpleNamespace(
            QUOTE_ENABLED_PROVIDERS=[],
            PROVIDER_SIMULATED_LATENCY_SECONDS=0.0,
            QUOTE_CURRENCY="COP",
        )
        assert build_default_providers(settings) == []
