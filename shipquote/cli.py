"""
ShipQuote command line

Usage:
    python run_quote.py quote --origin Bogotá --destination Medellín --weight 4.5
    python run_quote.py quote --origin Bogotá --destination Cali --weight 12 --fragile
    python run_quote.py status
"""
import argparse
import asyncio
import json
import logging
from datetime import date
from typing import List, Optional

from shipquote.core.exceptions import ShipQuoteError
from shipquote.modules.shipping.providers import build_default_providers
from shipquote.modules.shipping.providers.base import QuoteRequest
from shipquote.schemas.quote import QuoteAggregationResponse, SystemStatusResponse
from shipquote.services.provider_health import ProviderHealthService
from shipquote.services.quote_aggregator import build_default_aggregator

logger = logging.getLogger("shipquote.cli")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Shipment quote aggregator")
    parser.add_argument("--log-level", default=None, help="Overrides LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    quote = subparsers.add_parser("quote", help="Quote a shipment with every enabled provider")
    quote.add_argument("--origin", required=True)
    quote.add_argument("--destination", required=True)
    quote.add_argument("--weight", type=float, required=True, help="Weight in kg")
    quote.add_argument("--pickup-date", type=date.fromisoformat, default=None, help="YYYY-MM-DD (default: today)")
    quote.add_argument("--fragile", action="store_true")

    subparsers.add_parser("status", help="Check provider availability")
    return parser


async def run_quote(args, settings) -> QuoteAggregationResponse:
    request = QuoteRequest(
        origin=args.origin,
        destination=args.destination,
        weight=args.weight,
        pickup_date=args.pickup_date or date.today(),
        fragile=args.fragile,
    )
    aggregator = build_default_aggregator(settings)
    try:
        result = await aggregator.aggregate(request)
        await aggregator.wait_for_pending_writes()
    finally:
        if settings.QUOTE_CACHE_BACKEND == "redis":
            from shipquote.core.redis_client import close_redis
            await close_redis()
    return QuoteAggregationResponse.model_validate(result)


async def run_status(settings) -> SystemStatusResponse:
    service = ProviderHealthService(
        build_default_providers(settings),
        timeout=settings.QUOTE_PROVIDER_TIMEOUT_SECONDS,
    )
    return SystemStatusResponse.model_validate(await service.get_system_status())


def main(argv: Optional[List[str]] = None) -> int:
    from shipquote.core.config import settings

    args = build_parser().parse_args(argv)
    configure_logging(args.log_level or settings.LOG_LEVEL)

    try:
        if args.command == "quote":
            response = asyncio.run(run_quote(args, settings))
            exit_code = 0 if response.quotes else 2
        else:
            response = asyncio.run(run_status(settings))
            exit_code = 0 if response.active_count else 2
    except ShipQuoteError as e:
        logger.error(f"{e.code}: {e.message}")
        print(json.dumps(e.to_dict(), indent=2))
        return 1

    print(response.model_dump_json(indent=2))
    return exit_code
