"""
Local Courier Provider v1.0.0

Regional truck courier, 7 days. Cheapest per-kg rates, but its network is
centred on Cali, so Bogotá and Medellín carry the largest multipliers.
"""
from shipquote.modules.shipping.providers.base import BaseProvider, ProviderCode
from shipquote.modules.shipping.providers.pricing import ProviderTariff, standard_tiers

LOCAL_TARIFF = ProviderTariff(
    base_price=5000,
    min_days=7,
    max_days=7,
    transport_mode="Truck",
    tiers=standard_tiers(9000, 7500, 6500, 5800),
    # Not monotonic: zone 3 is the home region
    zone_multipliers={1: 1.8, 2: 1.4, 3: 1.12, 4: 1.5, 5: 1.6},
)


class LocalProvider(BaseProvider):
    """Local Courier pricing."""

    @property
    def provider_code(self) -> ProviderCode:
        return ProviderCode.LOCAL

    @property
    def display_name(self) -> str:
        return "Local"

    @property
    def provider_id(self) -> str:
        return "local-courier"

    @property
    def provider_name(self) -> str:
        return "Local Courier"

    @property
    def tariff(self) -> ProviderTariff:
        return LOCAL_TARIFF
