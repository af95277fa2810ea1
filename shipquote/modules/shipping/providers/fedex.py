"""
FedEx Provider v1.0.0

FedEx Ground: truck service, 3-4 business days.
Highest per-kg rates; zone multipliers grow with distance from Bogotá.
"""
from shipquote.modules.shipping.providers.base import BaseProvider, ProviderCode
from shipquote.modules.shipping.providers.pricing import ProviderTariff, standard_tiers

FEDEX_TARIFF = ProviderTariff(
    base_price=10000,
    min_days=3,
    max_days=4,
    transport_mode="Truck",
    tiers=standard_tiers(15000, 12000, 10000, 8500),
    zone_multipliers={1: 1.0, 2: 1.15, 3: 1.25, 4: 1.35, 5: 1.6},
)


class FedExProvider(BaseProvider):
    """FedEx Ground pricing."""

    @property
    def provider_code(self) -> ProviderCode:
        return ProviderCode.FEDEX

    @property
    def display_name(self) -> str:
        return "FedEx"

    @property
    def provider_id(self) -> str:
        return "fedex-ground"

    @property
    def provider_name(self) -> str:
        return "FedEx Ground"

    @property
    def tariff(self) -> ProviderTariff:
        return FEDEX_TARIFF
