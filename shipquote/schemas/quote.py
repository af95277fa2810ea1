"""
Quote schemas
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from shipquote.modules.shipping.providers.base import Quote
from shipquote.services.provider_health import ProviderState, SystemState


class QuoteSchema(BaseModel):
    provider_id: str
    provider_name: str
    price: float
    currency: str
    min_days: int
    max_days: int
    estimated_days: int
    transport_mode: str
    is_cheapest: bool = False
    is_fastest: bool = False

    class Config:
        from_attributes = True

    def to_quote(self) -> Quote:
        return Quote(**self.model_dump(exclude={"estimated_days"}))


class ProviderMessageSchema(BaseModel):
    provider: str
    message: str
    error: Optional[str] = None

    class Config:
        from_attributes = True


class QuoteAggregationResponse(BaseModel):
    quotes: List[QuoteSchema]
    messages: List[ProviderMessageSchema] = []
    from_cache: bool = False

    class Config:
        from_attributes = True


class CachedQuotesPayload(BaseModel):
    """Shape of a quote cache entry stored in Redis."""
    fingerprint: str
    created_at: float
    quotes: List[QuoteSchema] = Field(default_factory=list)


class ProviderStatusSchema(BaseModel):
    provider_name: str
    status: ProviderState
    response_time_ms: Optional[float] = None
    last_check: datetime
    error: Optional[str] = None

    class Config:
        from_attributes = True


class SystemStatusResponse(BaseModel):
    status: SystemState
    active_count: int
    total_count: int
    providers: List[ProviderStatusSchema]

    class Config:
        from_attributes = True
