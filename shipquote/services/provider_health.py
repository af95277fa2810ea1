"""
Provider Health Service v1.0.0

Quotes a small test shipment from every provider and reports which ones
answer in time. Checks run concurrently, each with its own timeout.

Overall status:
- ONLINE: every provider answered
- DEGRADED: some answered
- OFFLINE: none answered (or no providers are configured)
"""
import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from shipquote.modules.shipping.providers.base import BaseProvider

logger = logging.getLogger(__name__)

DEFAULT_CHECK_TIMEOUT_SECONDS = 5.0


class ProviderState(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"


class SystemState(str, Enum):
    ONLINE = "ONLINE"
    DEGRADED = "DEGRADED"
    OFFLINE = "OFFLINE"


@dataclass(frozen=True)
class ProviderStatus:
    provider_name: str
    status: ProviderState
    response_time_ms: float
    last_check: datetime
    error: Optional[str] = None

    @property
    def is_online(self) -> bool:
        return self.status == ProviderState.ONLINE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider_name": self.provider_name,
            "status": self.status.value,
            "response_time_ms": self.response_time_ms,
            "last_check": self.last_check.isoformat(),
            "error": self.error,
        }


@dataclass(frozen=True)
class SystemStatus:
    status: SystemState
    active_count: int
    total_count: int
    providers: List[ProviderStatus] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "active_count": self.active_count,
            "total_count": self.total_count,
            "providers": [p.to_dict() for p in self.providers],
        }


class ProviderHealthService:
    """
    Checks provider availability.

    Usage:
        service = ProviderHealthService(build_default_providers(settings))
        status = await service.get_system_status()
    """

    def __init__(
        self,
        providers: Sequence[BaseProvider],
        timeout: float = DEFAULT_CHECK_TIMEOUT_SECONDS,
        check_weight: float = 1.0,
        check_destination: str = "Bogotá",
    ):
        self.providers = list(providers)
        self.timeout = timeout
        self.check_weight = check_weight
        self.check_destination = check_destination

    async def check_health(self) -> List[ProviderStatus]:
        """Check all providers; results follow provider order."""
        return list(await asyncio.gather(
            *(self._check_provider(index, provider) for index, provider in enumerate(self.providers))
        ))

    async def get_system_status(self) -> SystemStatus:
        providers = await self.check_health()
        active_count = sum(1 for p in providers if p.is_online)
        total_count = len(providers)

        if total_count > 0 and active_count == total_count:
            status = SystemState.ONLINE
        elif active_count == 0:
            status = SystemState.OFFLINE
        else:
            status = SystemState.DEGRADED

        if status != SystemState.ONLINE:
            logger.warning(f"[PROVIDER_HEALTH] System {status.value}: {active_count}/{total_count} providers online")

        return SystemStatus(
            status=status,
            active_count=active_count,
            total_count=total_count,
            providers=providers,
        )

    async def _check_provider(self, index: int, provider: BaseProvider) -> ProviderStatus:
        try:
            name = provider.display_name
        except Exception:
            name = f"Provider {index + 1}"

        started = time.perf_counter()
        error = None
        try:
            await asyncio.wait_for(
                provider.quote(self.check_weight, self.check_destination),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            error = f"Provider timeout after {self.timeout}s"
        except Exception as e:
            error = str(e) or e.__class__.__name__

        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        if error:
            logger.info(f"[PROVIDER_HEALTH] {name} offline: {error}")

        return ProviderStatus(
            provider_name=name,
            status=ProviderState.OFFLINE if error else ProviderState.ONLINE,
            response_time_ms=elapsed_ms,
            last_check=datetime.now(timezone.utc),
            error=error,
        )
