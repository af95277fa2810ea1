"""
Quote Request Cache v1.0.0

Short-circuits repeated identical quote requests.

Purpose:
- Cache key: MD5 fingerprint of origin, destination, weight and fragile flag
- Pickup date is NOT part of the fingerprint: two requests differing only in
  pickup date share an entry (prices do not depend on it)
- Freshness is judged by the reader (QuoteAggregator) from created_at, so a
  store only has to remember what it was given

Stores:
- InMemoryQuoteCacheStore: per-process LRU dict, lock-guarded
- RedisQuoteCacheStore: shared across processes, JSON payload with a
  retention expiry for garbage collection

Usage:
    store = InMemoryQuoteCacheStore()
    fingerprint = make_fingerprint(request)
    entry = await store.get(fingerprint)
    if entry is None or time.time() - entry.created_at >= ttl:
        ...
        await store.put(fingerprint, quotes, time.time())
"""
import hashlib
import logging
import threading
from abc import ABC, abstractmethod
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

from pydantic import ValidationError

from shipquote.core.exceptions import (
    QuoteCacheError,
    QuoteCacheUnavailableError,
    QuoteValidationError,
)
from shipquote.modules.shipping.providers.base import Quote, QuoteRequest
from shipquote.schemas.quote import CachedQuotesPayload, QuoteSchema

logger = logging.getLogger(__name__)


def make_fingerprint(request: QuoteRequest) -> str:
    """
    Generate the cache key for a quote request.

    Args:
        request: Quote request

    Returns:
        MD5 hash of normalized origin, destination, weight and fragile flag
    """
    key_parts = [
        request.origin.lower().strip(),
        request.destination.lower().strip(),
        f"weight={float(request.weight)!r}",
        f"fragile={bool(request.fragile)}",
    ]
    key_string = "|".join(key_parts)
    return hashlib.md5(key_string.encode()).hexdigest()


@dataclass(frozen=True)
class CacheEntry:
    """Badge-assigned quotes for one fingerprint and when they were stored."""
    fingerprint: str
    quotes: Tuple[Quote, ...]
    created_at: float

    def is_fresh(self, now: float, ttl_seconds: float) -> bool:
        return now - self.created_at < ttl_seconds


class QuoteCacheStore(ABC):
    """Storage backend for quote cache entries. Errors propagate to the caller."""

    @abstractmethod
    async def get(self, fingerprint: str) -> Optional[CacheEntry]:
        """Return the stored entry or None. Staleness is not checked here."""
        pass

    @abstractmethod
    async def put(self, fingerprint: str, quotes: Sequence[Quote], timestamp: float) -> None:
        """Store quotes under a fingerprint, replacing any previous entry."""
        pass


class InMemoryQuoteCacheStore(QuoteCacheStore):
    """
    Per-process quote cache.

    Guarded by a threading.Lock so an aggregator shared between an event loop
    and worker threads sees whole entries only. Oldest entries are evicted
    once max_size is reached.

    Attributes:
        max_size: Maximum cache entries before LRU eviction (default: 1000)
    """

    def __init__(self, max_size: int = 1000):
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")
        self.max_size = max_size
        self._cache: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    async def get(self, fingerprint: str) -> Optional[CacheEntry]:
        with self._lock:
            entry = self._cache.get(fingerprint)
            if entry is None:
                self._misses += 1
                return None
            self._cache.move_to_end(fingerprint)
            self._hits += 1
            return entry

    async def put(self, fingerprint: str, quotes: Sequence[Quote], timestamp: float) -> None:
        entry = CacheEntry(fingerprint=fingerprint, quotes=tuple(quotes), created_at=timestamp)
        with self._lock:
            if fingerprint in self._cache:
                self._cache.move_to_end(fingerprint)
            while len(self._cache) >= self.max_size and fingerprint not in self._cache:
                self._cache.popitem(last=False)
                self._evictions += 1
                logger.debug("[QUOTE_CACHE] Evicted oldest entry (capacity)")
            self._cache[fingerprint] = entry

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def get_stats(self) -> Dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            Dict with hits, misses, evictions, size, hit_rate
        """
        with self._lock:
            total = self._hits + self._misses
            return {
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
                "size": len(self._cache),
                "max_size": self.max_size,
                "hit_rate": round(self._hits / total * 100, 2) if total > 0 else 0.0,
            }


class RedisQuoteCacheStore(QuoteCacheStore):
    """
    Quote cache shared through Redis.

    Entries are written with SETEX using retention_seconds purely as garbage
    collection; freshness still comes from the stored created_at.

    Args:
        client_factory: Awaitable returning a redis.asyncio client or None
            (shipquote.core.redis_client.get_redis in production)
        key_prefix: Namespace for cache keys
        retention_seconds: Redis expiry for each entry
    """

    def __init__(self, client_factory, key_prefix: str = "shipquote:quotes:", retention_seconds: int = 3600):
        self._client_factory = client_factory
        self.key_prefix = key_prefix
        self.retention_seconds = retention_seconds

    def _key(self, fingerprint: str) -> str:
        return f"{self.key_prefix}{fingerprint}"

    async def _client(self):
        client = await self._client_factory()
        if client is None:
            raise QuoteCacheUnavailableError("Redis is not configured or unreachable")
        return client

    async def get(self, fingerprint: str) -> Optional[CacheEntry]:
        client = await self._client()
        raw = await client.get(self._key(fingerprint))
        if raw is None:
            return None

        try:
            payload = CachedQuotesPayload.model_validate_json(raw)
            quotes = tuple(schema.to_quote() for schema in payload.quotes)
        except (ValidationError, QuoteValidationError, ValueError) as e:
            raise QuoteCacheError(
                f"Corrupt quote cache entry: {e}",
                details={"fingerprint": fingerprint},
            ) from e

        return CacheEntry(fingerprint=payload.fingerprint, quotes=quotes, created_at=payload.created_at)

    async def put(self, fingerprint: str, quotes: Sequence[Quote], timestamp: float) -> None:
        client = await self._client()
        payload = CachedQuotesPayload(
            fingerprint=fingerprint,
            created_at=timestamp,
            quotes=[QuoteSchema.model_validate(quote) for quote in quotes],
        )
        await client.setex(self._key(fingerprint), self.retention_seconds, payload.model_dump_json())
