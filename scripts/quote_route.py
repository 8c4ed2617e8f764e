"""Quote the best route between two assets.

Quotes either against a local market file, building the router in-process,
or against a running router API.

Usage:
    python -m scripts.quote_route --market tests/fixtures/markets/demo.json \
        --asset-in 0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2 \
        --asset-out 0x6b175474e89094c44da98b954eedeac495271d0f \
        --amount 1000000000000000000

    python -m scripts.quote_route --url http://localhost:8000 ...
"""

import argparse
import json
import logging
import sys
from pathlib import Path

import httpx
import structlog

from swaprouter.errors import RouterError
from swaprouter.market import load_market
from swaprouter.routing import Router

logger = structlog.get_logger()


def quote_local(market_file: Path, asset_in: str, asset_out: str, amount: int) -> dict:
    """Quote in-process against a market file."""
    market = load_market(market_file)
    router = Router(market.registry, market.ledger)
    expected = router.get_expected_out(asset_in, asset_out, amount)
    return {
        "amountOut": str(expected.amount_out),
        "tokenPath": [asset.address for asset in expected.token_path],
        "symbols": [asset.symbol for asset in expected.token_path],
        "exchangePath": [
            venue.address if venue is not None else None for venue in expected.exchange_path
        ],
        "registryVersion": expected.registry_version,
        "arbitrageDetected": expected.arbitrage_detected,
    }


def quote_remote(url: str, asset_in: str, asset_out: str, amount: int, timeout: float) -> dict:
    """Quote through a running router API."""
    response = httpx.post(
        f"{url.rstrip('/')}/quote",
        json={"assetIn": asset_in, "assetOut": asset_out, "amountIn": str(amount)},
        timeout=timeout,
    )
    response.raise_for_status()
    return response.json()


def main() -> int:
    parser = argparse.ArgumentParser(description="Quote the best route between two assets")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--market",
        type=Path,
        help="Market JSON file to quote against in-process",
    )
    source.add_argument(
        "--url",
        type=str,
        help="URL of a running router API (e.g., http://localhost:8000)",
    )
    parser.add_argument("--asset-in", required=True, help="Address of the asset to sell")
    parser.add_argument("--asset-out", required=True, help="Address of the asset to buy")
    parser.add_argument("--amount", type=int, required=True, help="Raw amount of asset-in")
    parser.add_argument(
        "--timeout",
        type=float,
        default=10.0,
        help="HTTP timeout in seconds (default: 10)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )

    try:
        if args.market is not None:
            if not args.market.exists():
                logger.error("market_file_not_found", path=str(args.market))
                return 1
            result = quote_local(args.market, args.asset_in, args.asset_out, args.amount)
        else:
            result = quote_remote(
                args.url, args.asset_in, args.asset_out, args.amount, args.timeout
            )
    except RouterError as e:
        logger.error("quote_failed", error=type(e).__name__, detail=str(e))
        return 1
    except httpx.HTTPError as e:
        logger.error("quote_request_failed", url=args.url, error=str(e))
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
