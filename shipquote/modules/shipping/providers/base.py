"""
Base Provider Interface v1.0.0

All pricing providers implement this interface. Each provider supplies:
  - Its identity (code, display name, quote id/name)
  - A fixed tariff (base price, weight tiers, zone multipliers, service days)

The provider-agnostic data classes (QuoteRequest, Quote, ProviderMessage)
live here too, since every layer above the providers speaks them.
"""
import asyncio
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, Optional

from shipquote.core.exceptions import ProviderRequestError, QuoteValidationError
from shipquote.modules.shipping.providers.pricing import ProviderTariff


class ProviderCode(str, Enum):
    FEDEX = "FEDEX"
    DHL = "DHL"
    LOCAL = "LOCAL"


# =============================================================================
# Provider-Agnostic Data Classes
# =============================================================================

@dataclass(frozen=True)
class QuoteRequest:
    """Shipment to be priced. Weight is in kg."""
    origin: str
    destination: str
    weight: float
    pickup_date: date
    fragile: bool = False

    def __post_init__(self):
        if not self.weight > 0:
            raise QuoteValidationError("Weight must be greater than 0", field="weight")


@dataclass(frozen=True)
class Quote:
    """
    One provider's offer for a shipment.

    Instances are immutable; badge assignment and surcharges produce copies.
    Construction is the validation boundary: anything downstream can assume
    a Quote is well formed.
    """
    provider_id: str
    provider_name: str
    price: float
    currency: str
    min_days: int
    max_days: int
    transport_mode: str
    is_cheapest: bool = False
    is_fastest: bool = False

    def __post_init__(self):
        if not self.provider_id or not self.provider_id.strip():
            raise QuoteValidationError("Provider ID is required", field="provider_id")
        if not self.provider_name or not self.provider_name.strip():
            raise QuoteValidationError("Provider name is required", field="provider_name")
        if not isinstance(self.price, (int, float)) or not math.isfinite(self.price) or self.price <= 0:
            raise QuoteValidationError("Price must be greater than 0", field="price")
        if not isinstance(self.currency, str) or len(self.currency) != 3 or not self.currency.isalpha():
            raise QuoteValidationError("Currency must be a 3-letter code", field="currency")
        if self.min_days < 0:
            raise QuoteValidationError("Minimum days cannot be negative", field="min_days")
        if self.max_days < self.min_days:
            raise QuoteValidationError(
                "Maximum days must be greater than or equal to minimum days",
                field="max_days",
            )

    @property
    def estimated_days(self) -> int:
        """Midpoint of the delivery window, halves rounded up (3-4 days -> 4)."""
        return (self.min_days + self.max_days + 1) // 2

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider_id": self.provider_id,
            "provider_name": self.provider_name,
            "price": self.price,
            "currency": self.currency,
            "min_days": self.min_days,
            "max_days": self.max_days,
            "estimated_days": self.estimated_days,
            "transport_mode": self.transport_mode,
            "is_cheapest": self.is_cheapest,
            "is_fastest": self.is_fastest,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Quote":
        """Rebuild a Quote from to_dict() output. Derived fields are ignored."""
        return cls(
            provider_id=data["provider_id"],
            provider_name=data["provider_name"],
            price=data["price"],
            currency=data["currency"],
            min_days=data["min_days"],
            max_days=data["max_days"],
            transport_mode=data["transport_mode"],
            is_cheapest=data.get("is_cheapest", False),
            is_fastest=data.get("is_fastest", False),
        )


@dataclass(frozen=True)
class ProviderMessage:
    """Diagnostic for a provider that did not produce a quote."""
    provider: str
    message: str
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"provider": self.provider, "message": self.message, "error": self.error}


# =============================================================================
# Base Provider Interface
# =============================================================================

class BaseProvider(ABC):
    """
    Abstract base class for all pricing providers.

    Subclasses only declare identity and tariff; validation, pricing and the
    optional simulated network latency are shared.
    """

    MIN_WEIGHT = 0.1
    MAX_WEIGHT = 1000.0

    def __init__(self, latency_seconds: float = 0.0, currency: str = "COP"):
        self.latency_seconds = latency_seconds
        self.currency = currency

    @property
    @abstractmethod
    def provider_code(self) -> ProviderCode:
        """Return the provider code."""
        pass

    @property
    @abstractmethod
    def display_name(self) -> str:
        """Short carrier name used in diagnostics (e.g. 'FedEx')."""
        pass

    @property
    @abstractmethod
    def provider_id(self) -> str:
        """Service identifier placed on quotes (e.g. 'fedex-ground')."""
        pass

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Service name placed on quotes (e.g. 'FedEx Ground')."""
        pass

    @property
    @abstractmethod
    def tariff(self) -> ProviderTariff:
        """Fixed pricing table for this provider."""
        pass

    def validate_request(self, weight: float, destination: str) -> None:
        """
        Reject shipments this provider cannot price.

        Raises:
            ProviderRequestError: weight out of range or destination missing
        """
        if weight < self.MIN_WEIGHT:
            raise ProviderRequestError(
                f"Weight must be greater than {self.MIN_WEIGHT} kg",
                provider=self.display_name,
            )
        if weight > self.MAX_WEIGHT:
            raise ProviderRequestError(
                f"Weight must be less than or equal to {self.MAX_WEIGHT:g} kg",
                provider=self.display_name,
            )
        if not destination or not destination.strip():
            raise ProviderRequestError("Destination is required", provider=self.display_name)

    async def quote(self, weight: float, destination: str) -> Quote:
        """
        Price a shipment.

        Args:
            weight: Shipment weight in kg
            destination: Destination city

        Returns:
            Quote with badges unset
        """
        self.validate_request(weight, destination)

        if self.latency_seconds > 0:
            await asyncio.sleep(self.latency_seconds)

        tariff = self.tariff
        return Quote(
            provider_id=self.provider_id,
            provider_name=self.provider_name,
            price=tariff.price_for(weight, destination),
            currency=self.currency,
            min_days=tariff.min_days,
            max_days=tariff.max_days,
            transport_mode=tariff.transport_mode,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.provider_code.value!r})"
