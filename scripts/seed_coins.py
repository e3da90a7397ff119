"""Register the default tracked coins.

Usage:
    PYTHONPATH=src python scripts/seed_coins.py

Idempotent: coins whose symbol or CoinGecko id is already registered are skipped.
"""

import asyncio
import logging
import sys

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)-5s %(name)s - %(message)s")
logger = logging.getLogger("seed_coins")
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

COINS = [
    {"name": "Bitcoin", "symbol": "BTC", "external_id": "bitcoin"},
    {"name": "Ethereum", "symbol": "ETH", "external_id": "ethereum"},
]


async def main() -> None:
    from pricetracker.config import settings
    from pricetracker.db.session import build_engine, build_session_factory
    from pricetracker.domain.errors import ConflictError, PriceTrackerError
    from pricetracker.services.registry import CoinRegistry

    engine = build_engine(settings.database_url, echo=False)
    session_factory = build_session_factory(engine)

    added = 0
    async with session_factory() as session:
        registry = CoinRegistry(session)
        for spec in COINS:
            try:
                await registry.add_coin(**spec)
                added += 1
            except ConflictError:
                logger.info("Skipping %s: already registered", spec["symbol"])
            except PriceTrackerError as e:
                logger.error("Failed to add %s: %s (%s)", spec["symbol"], e.message, e.details)
                await engine.dispose()
                sys.exit(1)

    await engine.dispose()
    logger.info("Seeded %d new coins", added)


if __name__ == "__main__":
    asyncio.run(main())
