"""
ShipQuote Exception Hierarchy

Structured exception classes for quote aggregation. All exceptions carry a
code, message and details so failures can be logged and reported uniformly.

Exception Hierarchy:
    ShipQuoteError
    ├── QuoteValidationError
    ├── ProviderError
    │   ├── ProviderRequestError
    │   └── ProviderTimeoutError
    └── QuoteCacheError
        └── QuoteCacheUnavailableError
"""
import logging
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)


class ShipQuoteError(Exception):
    """
    Base exception for all ShipQuote errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code for programmatic handling
        details: Additional context for debugging
        severity: P0-P3 severity level
    """

    default_code: str = "SHIPQUOTE_ERROR"
    default_severity: str = "P2"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        severity: Optional[str] = None,
    ):
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        self.severity = severity or self.default_severity
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "severity": self.severity,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


# =============================================================================
# QUOTE ERRORS
# =============================================================================

class QuoteValidationError(ShipQuoteError):
    """A quote or quote request was built with invalid values."""
    default_code = "QUOTE_VALIDATION_FAILED"

    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        details["field"] = field
        super().__init__(message, details=details, **kwargs)
        self.field = field


# =============================================================================
# PROVIDER ERRORS
# =============================================================================

class ProviderError(ShipQuoteError):
    """Base exception for pricing provider failures."""
    default_code = "PROVIDER_ERROR"
    default_severity = "P1"

    def __init__(self, message: str, provider: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        details["provider"] = provider
        super().__init__(message, details=details, **kwargs)
        self.provider = provider


class ProviderRequestError(ProviderError):
    """Provider refused the shipment parameters."""
    default_code = "PROVIDER_REQUEST_INVALID"
    default_severity = "P3"


class ProviderTimeoutError(ProviderError):
    """Provider did not answer within its deadline."""
    default_code = "PROVIDER_TIMEOUT"

    def __init__(self, message: str, timeout_seconds: Optional[float] = None, **kwargs):
        details = kwargs.pop("details", {})
        details["timeout_seconds"] = timeout_seconds
        super().__init__(message, details=details, **kwargs)
        self.timeout_seconds = timeout_seconds


# =============================================================================
# CACHE ERRORS
# =============================================================================

class QuoteCacheError(ShipQuoteError):
    """Base exception for quote cache failures."""
    default_code = "QUOTE_CACHE_ERROR"
    default_severity = "P3"


class QuoteCacheUnavailableError(QuoteCacheError):
    """Cache backend is not reachable."""
    default_code = "QUOTE_CACHE_UNAVAILABLE"
