from shipquote.schemas.quote import (
    QuoteSchema,
    ProviderMessageSchema,
    QuoteAggregationResponse,
    CachedQuotesPayload,
    ProviderStatusSchema,
    SystemStatusResponse,
)
