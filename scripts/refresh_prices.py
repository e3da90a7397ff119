"""Run one price refresh cycle (for cron).

Usage:
    PYTHONPATH=src python scripts/refresh_prices.py

Exits non-zero when there are no active coins, CoinGecko fails, or the
database write is rolled back.
"""

import asyncio
import logging
import sys

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)-5s %(name)s - %(message)s")
logger = logging.getLogger("refresh_prices")
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


async def main() -> int:
    from pricetracker.config import settings
    from pricetracker.db.session import build_engine, build_session_factory
    from pricetracker.domain.errors import PriceTrackerError
    from pricetracker.infra.http.client import HttpClient
    from pricetracker.infra.price.coingecko import CoinGeckoProvider
    from pricetracker.services.refresher import PriceRefresher

    engine = build_engine(settings.database_url, echo=False)
    session_factory = build_session_factory(engine)

    try:
        async with HttpClient(timeout=settings.http_timeout) as http_client:
            provider = CoinGeckoProvider(
                http_client,
                api_key=settings.coingecko_api_key,
                base_url=settings.coingecko_base_url,
            )
            async with session_factory() as session:
                result = await PriceRefresher(session, provider).refresh()
    except PriceTrackerError as e:
        logger.error("Refresh failed: %s (%s)", e.message, e.details)
        return 1
    finally:
        await engine.dispose()

    for record in result.updated:
        print(f"  {record.symbol:<8} {record.name:<20} ${record.price_usd:,.2f}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
