"""Create the coins, prices and latest_prices tables.

Usage:
    PYTHONPATH=src python scripts/init_db.py

Idempotent: existing tables are left untouched. There is no migration tooling;
schema changes require dropping and recreating the tables.
"""

import asyncio
import logging

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)-5s %(name)s - %(message)s")
logger = logging.getLogger("init_db")
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


async def main() -> None:
    from pricetracker.config import settings
    from pricetracker.db.session import build_engine, create_all

    engine = build_engine(settings.database_url, echo=False)
    await create_all(engine)
    await engine.dispose()
    logger.info("Tables ready on %s:%s/%s", settings.db_host, settings.db_port, settings.db_name)


if __name__ == "__main__":
    asyncio.run(main())
