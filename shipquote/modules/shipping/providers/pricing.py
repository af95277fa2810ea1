"""
Provider Pricing Tables v1.0.0

Shared pricing primitives used by every provider:
- Destination zone lookup (5 zones keyed by canonical city name)
- Tiered per-kg rates selected by shipment weight
- Per-provider zone multipliers

Prices are in COP. A provider combines them as:
    price = base_price + weight * rate_per_kg(weight) * zone_multiplier(zone)
"""
import math
import unicodedata
from dataclasses import dataclass
from typing import Dict, Sequence, Tuple

from shipquote.core.exceptions import ProviderRequestError


# =============================================================================
# Destination Zones
# =============================================================================

ZONE_CITIES: Dict[int, Tuple[str, ...]] = {
    1: ("Bogotá",),
    2: ("Medellín",),
    3: ("Cali",),
    4: ("Barranquilla", "Cartagena"),
    5: ("Leticia",),
}

FALLBACK_ZONE = 1


def normalize_city(name: str) -> str:
    """Lowercase, trim and strip accents so 'MEDELLÍN' and 'medellin' match."""
    decomposed = unicodedata.normalize("NFKD", name.strip().lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


_CITY_ZONES: Dict[str, int] = {
    normalize_city(city): zone
    for zone, cities in ZONE_CITIES.items()
    for city in cities
}


def zone_for_destination(destination: str) -> int:
    """Map a destination to its zone, falling back to FALLBACK_ZONE."""
    return _CITY_ZONES.get(normalize_city(destination), FALLBACK_ZONE)


# =============================================================================
# Weight Tiers
# =============================================================================

@dataclass(frozen=True)
class WeightTier:
    """Per-kg rate for weights in [min_weight, max_weight)."""
    min_weight: float
    max_weight: float
    rate_per_kg: float

    def matches(self, weight: float) -> bool:
        return self.min_weight <= weight < self.max_weight or weight == self.min_weight


def rate_for_weight(weight: float, tiers: Sequence[WeightTier]) -> float:
    """
    Find the per-kg rate for a weight.

    Args:
        weight: Shipment weight in kg, must be > 0
        tiers: Bands ordered by min_weight; the last one is open-ended

    Returns:
        Rate per kg of the first matching tier, or of the last tier when
        the weight is above every band
    """
    if weight <= 0:
        raise ProviderRequestError("Weight must be greater than 0")
    if not tiers:
        raise ValueError("At least one weight tier is required")

    for tier in tiers:
        if tier.matches(weight):
            return tier.rate_per_kg

    return tiers[-1].rate_per_kg


def standard_tiers(small: float, medium: float, large: float, freight: float) -> Tuple[WeightTier, ...]:
    """Build the 0-5 / 5-20 / 20-50 / 50+ kg band layout all providers share."""
    return (
        WeightTier(0, 5, small),
        WeightTier(5, 20, medium),
        WeightTier(20, 50, large),
        WeightTier(50, math.inf, freight),
    )


# =============================================================================
# Provider Tariff
# =============================================================================

@dataclass(frozen=True)
class ProviderTariff:
    """Fixed pricing and service-level table for one provider."""
    base_price: float
    min_days: int
    max_days: int
    transport_mode: str
    tiers: Tuple[WeightTier, ...]
    zone_multipliers: Dict[int, float]

    def zone_multiplier(self, zone: int) -> float:
        try:
            return self.zone_multipliers[zone]
        except KeyError:
            return self.zone_multipliers[FALLBACK_ZONE]

    def price_for(self, weight: float, destination: str) -> float:
        zone = zone_for_destination(destination)
        rate = rate_for_weight(weight, self.tiers)
        return self.base_price + weight * rate * self.zone_multiplier(zone)
