"""
Quote Aggregator Service v1.0.0

- Answers repeated requests from the quote cache while the entry is fresh
- Otherwise queries every provider concurrently, each with its own timeout
- A provider that fails or times out becomes a ProviderMessage; the request
  itself never fails because of a provider
- Applies the fragile surcharge, assigns cheapest/fastest badges and stores
  the result in the background

Usage:
    aggregator = build_default_aggregator()
    result = await aggregator.aggregate(QuoteRequest(...))
    for quote in result.quotes:
        ...
"""
import asyncio
import logging
import time
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Sequence, Set

from shipquote.core.exceptions import ProviderError, ProviderTimeoutError, QuoteValidationError
from shipquote.core.quote_cache import (
    CacheEntry,
    InMemoryQuoteCacheStore,
    QuoteCacheStore,
    RedisQuoteCacheStore,
    make_fingerprint,
)
from shipquote.modules.shipping.providers import build_default_providers
from shipquote.modules.shipping.providers.base import (
    BaseProvider,
    ProviderMessage,
    Quote,
    QuoteRequest,
)
from shipquote.services.badge_service import assign_badges

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER_TIMEOUT_SECONDS = 5.0
DEFAULT_CACHE_TTL_SECONDS = 300.0
DEFAULT_FRAGILE_SURCHARGE = 1.15


@dataclass(frozen=True)
class QuoteAggregationResult:
    """Quotes in provider order plus one message per provider that failed."""
    quotes: List[Quote]
    messages: List[ProviderMessage] = field(default_factory=list)
    from_cache: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "quotes": [quote.to_dict() for quote in self.quotes],
            "messages": [message.to_dict() for message in self.messages],
            "from_cache": self.from_cache,
        }


@dataclass(frozen=True)
class ProviderOutcome:
    """Settled result of one provider call: either a quote or an error."""
    provider_name: str
    quote: Optional[Quote] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.quote is not None


class QuoteAggregator:
    """
    Fans a quote request out to the configured providers.

    Args:
        providers: Providers in registration order (result order follows it)
        cache_store: Where aggregated quotes are cached
        provider_timeout: Per-provider deadline in seconds
        cache_ttl: Seconds a cached result stays valid
        fragile_surcharge: Price factor for fragile shipments
        clock: Returns the current time in epoch seconds
    """

    def __init__(
        self,
        providers: Sequence[BaseProvider],
        cache_store: Optional[QuoteCacheStore] = None,
        provider_timeout: float = DEFAULT_PROVIDER_TIMEOUT_SECONDS,
        cache_ttl: float = DEFAULT_CACHE_TTL_SECONDS,
        fragile_surcharge: float = DEFAULT_FRAGILE_SURCHARGE,
        clock: Callable[[], float] = time.time,
    ):
        self.providers = list(providers)
        self.cache_store = cache_store if cache_store is not None else InMemoryQuoteCacheStore()
        self.provider_timeout = provider_timeout
        self.cache_ttl = cache_ttl
        self.fragile_surcharge = fragile_surcharge
        self._clock = clock
        self._pending_writes: Set[asyncio.Task] = set()
        # Entries handed to a write task that has not finished yet
        self._inflight: Dict[str, CacheEntry] = {}

    async def aggregate(self, request: QuoteRequest) -> QuoteAggregationResult:
        """
        Get quotes for a shipment from every provider.

        Args:
            request: Shipment to price

        Returns:
            QuoteAggregationResult; quotes may be empty when every provider
            failed, in which case messages has one entry per provider
        """
        fingerprint = make_fingerprint(request)

        cached = await self._read_cache(fingerprint)
        if cached is not None:
            return QuoteAggregationResult(quotes=list(cached.quotes), messages=[], from_cache=True)

        outcomes = await asyncio.gather(
            *(self._call_provider(index, provider, request) for index, provider in enumerate(self.providers))
        )

        quotes: List[Quote] = []
        messages: List[ProviderMessage] = []
        for outcome in outcomes:
            if outcome.ok:
                quotes.append(outcome.quote)
            else:
                messages.append(ProviderMessage(
                    provider=outcome.provider_name,
                    message=f"{outcome.provider_name} is not available at this time",
                    error=_describe_error(outcome.error),
                ))

        if request.fragile and quotes:
            quotes = [replace(quote, price=quote.price * self.fragile_surcharge) for quote in quotes]
            logger.debug(
                f"[QUOTE_AGGREGATOR] Applied fragile surcharge x{self.fragile_surcharge} "
                f"to {len(quotes)} quotes"
            )

        quotes = assign_badges(quotes)

        if messages:
            logger.info(
                f"[QUOTE_AGGREGATOR] {len(quotes)}/{len(self.providers)} providers answered "
                f"for {request.origin} -> {request.destination}"
            )

        if quotes:
            self._schedule_cache_write(fingerprint, quotes, self._clock())

        return QuoteAggregationResult(quotes=quotes, messages=messages, from_cache=False)

    async def wait_for_pending_writes(self) -> None:
        """Wait for background cache writes (shutdown, tests)."""
        while self._pending_writes:
            await asyncio.gather(*list(self._pending_writes), return_exceptions=True)

    # -------------------------------------------------------------------------
    # Cache
    # -------------------------------------------------------------------------

    async def _read_cache(self, fingerprint: str) -> Optional[CacheEntry]:
        entry = self._inflight.get(fingerprint)
        if entry is None:
            try:
                entry = await self.cache_store.get(fingerprint)
            except Exception as e:
                logger.warning(f"[QUOTE_CACHE] Read failed, treating as miss: {e}")
                return None

        if entry is None:
            logger.debug(f"[QUOTE_CACHE] Miss: {fingerprint}")
            return None

        if not entry.is_fresh(self._clock(), self.cache_ttl):
            logger.debug(f"[QUOTE_CACHE] Expired: {fingerprint}")
            return None

        logger.debug(f"[QUOTE_CACHE] Hit: {fingerprint} ({len(entry.quotes)} quotes)")
        return entry

    def _schedule_cache_write(self, fingerprint: str, quotes: List[Quote], timestamp: float) -> None:
        """
        Start the store write in the background.

        Until the write settles, reads for the same fingerprint are answered
        from the in-flight entry, so a request arriving right behind this one
        is a hit even though the store has not been updated yet.
        """
        entry = CacheEntry(fingerprint=fingerprint, quotes=tuple(quotes), created_at=timestamp)
        self._inflight[fingerprint] = entry

        task = asyncio.create_task(self._write_cache(fingerprint, quotes, timestamp))
        self._pending_writes.add(task)

        def _settled(done: asyncio.Task) -> None:
            self._pending_writes.discard(done)
            if self._inflight.get(fingerprint) is entry:
                del self._inflight[fingerprint]

        task.add_done_callback(_settled)

    async def _write_cache(self, fingerprint: str, quotes: List[Quote], timestamp: float) -> None:
        try:
            await self.cache_store.put(fingerprint, quotes, timestamp)
            logger.debug(f"[QUOTE_CACHE] Stored: {fingerprint} ({len(quotes)} quotes)")
        except Exception as e:
            logger.warning(f"[QUOTE_CACHE] Write failed for {fingerprint}: {e}")

    # -------------------------------------------------------------------------
    # Providers
    # -------------------------------------------------------------------------

    async def _call_provider(self, index: int, provider: BaseProvider, request: QuoteRequest) -> ProviderOutcome:
        """Run one provider call to completion; never raises (except cancellation)."""
        name = _provider_label(index, provider)
        try:
            quote = await asyncio.wait_for(
                provider.quote(request.weight, request.destination),
                timeout=self.provider_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"[QUOTE_AGGREGATOR] {name} timed out after {self.provider_timeout}s")
            return ProviderOutcome(
                provider_name=name,
                error=ProviderTimeoutError(
                    f"{name} did not respond within {self.provider_timeout}s",
                    provider=name,
                    timeout_seconds=self.provider_timeout,
                ),
            )
        except QuoteValidationError as e:
            # Provider built an invalid quote: integration bug, not an outage
            logger.error(f"[QUOTE_AGGREGATOR] {name} produced an invalid quote: {e}", exc_info=True)
            return ProviderOutcome(provider_name=name, error=e)
        except Exception as e:
            logger.warning(f"[QUOTE_AGGREGATOR] {name} failed: {e}")
            return ProviderOutcome(provider_name=name, error=e)

        if not isinstance(quote, Quote):
            logger.error(f"[QUOTE_AGGREGATOR] {name} returned {type(quote).__name__}, expected Quote")
            return ProviderOutcome(
                provider_name=name,
                error=ProviderError(f"{name} returned an unexpected result", provider=name),
            )

        return ProviderOutcome(provider_name=name, quote=quote)


def _provider_label(index: int, provider: BaseProvider) -> str:
    """Display name of a provider, or 'Provider N' (1-based) if it has none."""
    try:
        name = provider.display_name
    except Exception:
        name = None
    if isinstance(name, str) and name.strip():
        return name
    return f"Provider {index + 1}"


def _describe_error(error: Optional[Exception]) -> Optional[str]:
    if error is None:
        return None
    return str(error) or error.__class__.__name__


def build_default_aggregator(settings=None) -> QuoteAggregator:
    """Aggregator wired from application settings."""
    if settings is None:
        from shipquote.core.config import settings

    if settings.QUOTE_CACHE_BACKEND == "redis":
        from shipquote.core.redis_client import get_redis

        cache_store: QuoteCacheStore = RedisQuoteCacheStore(
            get_redis,
            key_prefix=settings.QUOTE_CACHE_KEY_PREFIX,
            retention_seconds=settings.QUOTE_CACHE_RETENTION_SECONDS,
        )
    else:
        cache_store = InMemoryQuoteCacheStore()

    return QuoteAggregator(
        providers=build_default_providers(settings),
        cache_store=cache_store,
        provider_timeout=settings.QUOTE_PROVIDER_TIMEOUT_SECONDS,
        cache_ttl=settings.QUOTE_CACHE_TTL_SECONDS,
        fragile_surcharge=settings.QUOTE_FRAGILE_SURCHARGE,
    )
