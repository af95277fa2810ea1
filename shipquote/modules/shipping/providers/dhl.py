"""
DHL Provider v1.0.0

DHL Express: air service, fixed 5-day window.
"""
from shipquote.modules.shipping.providers.base import BaseProvider, ProviderCode
from shipquote.modules.shipping.providers.pricing import ProviderTariff, standard_tiers

DHL_TARIFF = ProviderTariff(
    base_price=8000,
    min_days=5,
    max_days=5,
    transport_mode="Air",
    tiers=standard_tiers(13000, 10500, 9000, 7800),
    zone_multipliers={1: 1.0, 2: 1.1, 3: 1.2, 4: 1.3, 5: 1.5},
)


class DHLProvider(BaseProvider):

    @property
    def provider_code(self) -> ProviderCode:
        return ProviderCode.DHL

    @property
    def display_name(self) -> str:
        return "DHL"

    @property
    def provider_id(self) -> str:
        return "dhl-express"

    @property
    def provider_name(self) -> str:
        return "DHL Express"

    @property
    def tariff(self) -> ProviderTariff:
        return DHL_TARIFF
