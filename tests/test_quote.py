"""
Tests for quote value objects.
"""
import math
from dataclasses import FrozenInstanceError, replace
from datetime import date

import pytest

from shipquote.core.exceptions import QuoteValidationError
from shipquote.modules.shipping.providers.base import ProviderMessage, Quote, QuoteRequest


def make_quote(**overrides) -> Quote:
    data = dict(
        provider_id="fedex-ground",
        provider_name="FedEx Ground",
        price=87625.0,
        currency="COP",
        min_days=3,
        max_days=4,
        transport_mode="Truck",
    )
    data.update(overrides)
    return Quote(**data)


class TestQuoteValidation:
    """Quote construction rejects invalid combinations."""

    def test_valid_quote_defaults(self):
        quote = make_quote()
        assert quote.is_cheapest is False
        assert quote.is_fastest is False

    @pytest.mark.parametrize("field, value", [
        ("provider_id", ""),
        ("provider_id", "   "),
        ("provider_name", ""),
        ("price", 0),
        ("price", -10.0),
        ("price", math.nan),
        ("price", math.inf),
        ("min_days", -1),
        ("currency", "CO"),
        ("currency", "C0P"),
    ])
    def test_rejects_invalid_field(self, field, value):
        with pytest.raises(QuoteValidationError) as exc_info:
            make_quote(**{field: value})
        assert exc_info.value.field == field
        assert exc_info.value.code == "QUOTE_VALIDATION_FAILED"

    def test_rejects_max_days_below_min_days(self):
        with pytest.raises(QuoteValidationError) as exc_info:
            make_quote(min_days=5, max_days=4)
        assert exc_info.value.field == "max_days"

    def test_same_day_window_allowed(self):
        quote = make_quote(min_days=0, max_days=0)
        assert quote.estimated_days == 0

    def test_quote_is_immutable(self):
        quote = make_quote()
        with pytest.raises(FrozenInstanceError):
            quote.price = 1.0

    def test_replace_revalidates(self):
        with pytest.raises(QuoteValidationError):
            replace(make_quote(), price=0)


class TestEstimatedDays:
    """estimated_days is the window midpoint rounded half up."""

    @pytest.mark.parametrize("min_days, max_days, expected", [
        (3, 4, 4),
        (3, 5, 4),
        (5, 5, 5),
        (7, 7, 7),
        (1, 2, 2),
        (0, 1, 1),
        (2, 7, 5),
    ])
    def test_rounding(self, min_days, max_days, expected):
        assert make_quote(min_days=min_days, max_days=max_days).estimated_days == expected


class TestQuoteSerialization:

    def test_to_dict_includes_estimated_days(self):
        data = make_quote(is_cheapest=True).to_dict()
        assert data["estimated_days"] == 4
        assert data["is_cheapest"] is True
        assert data["provider_id"] == "fedex-ground"

    def test_from_dict_ignores_derived_fields(self):
        data = make_quote().to_dict()
        data["estimated_days"] = 99
        assert Quote.from_dict(data) == make_quote()


class TestQuoteRequest:

    def test_valid_request(self, sample_request):
        assert sample_request.weight == 4.5
        assert sample_request.fragile is False

    @pytest.mark.parametrize("weight", [0, -1.5, math.nan])
    def test_rejects_non_positive_weight(self, weight):
        with pytest.raises(QuoteValidationError) as exc_info:
            QuoteRequest(origin="Bogotá", destination="Cali", weight=weight, pickup_date=date(2030, 1, 1))
        assert exc_info.value.field == "weight"

    def test_upper_weight_not_checked_here(self):
        """Range limits are enforced by providers and upstream validation."""
        request = QuoteRequest(origin="Bogotá", destination="Cali", weight=5000, pickup_date=date(2030, 1, 1))
        assert request.weight == 5000


class TestProviderMessage:

    def test_to_dict(self):
        message = ProviderMessage(provider="DHL", message="DHL is not available at this time", error="boom")
        assert message.to_dict() == {
            "provider": "DHL",
            "message": "DHL is not available at this time",
            "error": "boom",
        }
