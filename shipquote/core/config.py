"""
Application configuration

Defaults describe a single-process deployment with an in-memory quote cache.
Runtime validation rejects settings the aggregator cannot honour.
"""
import json
import logging
from typing import List, Union
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DEFAULT_ENABLED_PROVIDERS = ["FEDEX", "DHL", "LOCAL"]
CACHE_BACKENDS = ("memory", "redis")


class Settings(BaseSettings):
    # App
    APP_NAME: str = "ShipQuote"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Redis - optional, only needed for the redis cache backend
    REDIS_URL: str = ""

    # Quote aggregation
    QUOTE_PROVIDER_TIMEOUT_SECONDS: float = 5.0
    QUOTE_FRAGILE_SURCHARGE: float = 1.15
    QUOTE_CURRENCY: str = "COP"

    # Quote cache
    QUOTE_CACHE_BACKEND: str = "memory"
    QUOTE_CACHE_TTL_SECONDS: float = 300.0  # 5 minutes
    QUOTE_CACHE_KEY_PREFIX: str = "shipquote:quotes:"
    QUOTE_CACHE_RETENTION_SECONDS: int = 3600  # Redis expiry, garbage collection only

    # Providers - accepts JSON array or comma-separated string
    QUOTE_ENABLED_PROVIDERS: Union[str, List[str]] = DEFAULT_ENABLED_PROVIDERS
    PROVIDER_SIMULATED_LATENCY_SECONDS: float = 0.0

    @field_validator("QUOTE_ENABLED_PROVIDERS", mode="before")
    @classmethod
    def parse_enabled_providers(cls, v):
        if isinstance(v, str):
            if not v.strip():
                return list(DEFAULT_ENABLED_PROVIDERS)
            if v.startswith("["):
                try:
                    v = json.loads(v)
                except json.JSONDecodeError:
                    pass
            if isinstance(v, str):
                v = v.split(",")
        if isinstance(v, list):
            return [str(code).strip().upper() for code in v if str(code).strip()]
        return v

    @field_validator("QUOTE_CACHE_BACKEND", mode="before")
    @classmethod
    def normalize_cache_backend(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
        if v not in CACHE_BACKENDS:
            raise ValueError(f"QUOTE_CACHE_BACKEND must be one of {CACHE_BACKENDS}, got {v!r}")
        return v

    @field_validator("QUOTE_PROVIDER_TIMEOUT_SECONDS", "QUOTE_CACHE_TTL_SECONDS")
    @classmethod
    def must_be_positive(cls, v):
        if v <= 0:
            raise ValueError("must be greater than 0")
        return v

    @field_validator("QUOTE_FRAGILE_SURCHARGE")
    @classmethod
    def surcharge_not_discount(cls, v):
        if v < 1:
            raise ValueError("QUOTE_FRAGILE_SURCHARGE must be >= 1")
        return v

    @field_validator("PROVIDER_SIMULATED_LATENCY_SECONDS")
    @classmethod
    def latency_not_negative(cls, v):
        if v < 0:
            raise ValueError("PROVIDER_SIMULATED_LATENCY_SECONDS must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_production_config(self):
        """Runtime validation to catch broken production configurations."""
        if self.ENVIRONMENT == "production":
            errors = []

            if self.DEBUG:
                errors.append(
                    "DEBUG=True is forbidden in production. "
                    "Set DEBUG=false or ENVIRONMENT=development"
                )

            if self.QUOTE_CACHE_BACKEND == "redis" and not self.REDIS_URL:
                errors.append(
                    "QUOTE_CACHE_BACKEND=redis requires REDIS_URL in production."
                )

            if self.PROVIDER_SIMULATED_LATENCY_SECONDS > 0:
                errors.append(
                    "PROVIDER_SIMULATED_LATENCY_SECONDS must be 0 in production."
                )

            if errors:
                raise ValueError(
                    "PRODUCTION CONFIG VIOLATIONS:\n" + "\n".join(f"  - {e}" for e in errors)
                )

        if self.PROVIDER_SIMULATED_LATENCY_SECONDS >= self.QUOTE_PROVIDER_TIMEOUT_SECONDS:
            logger.warning(
                f"Simulated provider latency {self.PROVIDER_SIMULATED_LATENCY_SECONDS}s is not below "
                f"the provider timeout {self.QUOTE_PROVIDER_TIMEOUT_SECONDS}s; every provider will time out"
            )

        return self

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
