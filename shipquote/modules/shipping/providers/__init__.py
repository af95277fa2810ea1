"""
Provider Factory v1.0.0

Builds provider instances from provider codes. Registration order is fixed
(FedEx, DHL, Local) and is the order quotes come back in. There is no global
registry to mutate: callers get a fresh list and pass it to the aggregator.
"""
import logging
from typing import Dict, Iterable, List, Type

from shipquote.modules.shipping.providers.base import (
    BaseProvider,
    ProviderCode,
    ProviderMessage,
    Quote,
    QuoteRequest,
)
from shipquote.modules.shipping.providers.dhl import DHLProvider
from shipquote.modules.shipping.providers.fedex import FedExProvider
from shipquote.modules.shipping.providers.local import LocalProvider

logger = logging.getLogger(__name__)

PROVIDER_CLASSES: Dict[ProviderCode, Type[BaseProvider]] = {
    ProviderCode.FEDEX: FedExProvider,
    ProviderCode.DHL: DHLProvider,
    ProviderCode.LOCAL: LocalProvider,
}


def build_providers(
    codes: Iterable[str],
    latency_seconds: float = 0.0,
    currency: str = "COP",
) -> List[BaseProvider]:
    """
    Instantiate the requested providers in registration order.

    Args:
        codes: Provider codes (case-insensitive); unknown codes are skipped
        latency_seconds: Simulated network latency for each provider call
        currency: Currency placed on quotes

    Returns:
        Provider instances, FedEx/DHL/Local order, duplicates removed
    """
    requested = set()
    for code in codes:
        try:
            requested.add(ProviderCode(str(code).strip().upper()))
        except ValueError:
            logger.warning(f"No implementation registered for provider: {code}")

    return [
        provider_cls(latency_seconds=latency_seconds, currency=currency)
        for provider_code, provider_cls in PROVIDER_CLASSES.items()
        if provider_code in requested
    ]


def build_default_providers(settings) -> List[BaseProvider]:
    """Providers enabled by QUOTE_ENABLED_PROVIDERS."""
    providers = build_providers(
        settings.QUOTE_ENABLED_PROVIDERS,
        latency_seconds=settings.PROVIDER_SIMULATED_LATENCY_SECONDS,
        currency=settings.QUOTE_CURRENCY,
    )
    if not providers:
        logger.warning("No pricing providers enabled; every request will return no quotes")
    return providers


__all__ = [
    "BaseProvider",
    "ProviderCode",
    "ProviderMessage",
    "Quote",
    "QuoteRequest",
    "FedExProvider",
    "DHLProvider",
    "LocalProvider",
    "PROVIDER_CLASSES",
    "build_providers",
    "build_default_providers",
]
