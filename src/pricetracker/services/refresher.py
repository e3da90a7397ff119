"""PriceRefresher: one refresh cycle from active coins through CoinGecko into history and latest."""

import logging
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, localcontext

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pricetracker.db.models.price import PRICE_PRECISION, PRICE_SCALE
from pricetracker.db.repos.coin_repo import CoinRepo
from pricetracker.db.repos.price_repo import PriceRepo
from pricetracker.domain.errors import NoActiveCoinsError, StorageError
from pricetracker.domain.models import PriceRecord, RefreshResult
from pricetracker.infra.price.coingecko import CoinGeckoProvider

logger = logging.getLogger(__name__)

MISSING_PRICE = Decimal("0")

PRICE_QUANTUM = Decimal(1).scaleb(-PRICE_SCALE)


def to_column_scale(price: Decimal) -> Decimal:
    """Round to the stored scale so the returned record equals the persisted row."""
    with localcontext() as ctx:
        ctx.prec = PRICE_PRECISION
        return price.quantize(PRICE_QUANTUM, rounding=ROUND_HALF_UP)


class PriceRefresher:
    """Stateless per call. All writes of a cycle commit together or not at all."""

    def __init__(self, session: AsyncSession, provider: CoinGeckoProvider) -> None:
        self._session = session
        self._provider = provider
        self._coins = CoinRepo(session)
        self._prices = PriceRepo(session)

    async def refresh(self) -> RefreshResult:
        try:
            coins = await self._coins.list_all(active_only=True)
            # Hand the pooled connection back for the duration of the CoinGecko call.
            await self._session.commit()
        except SQLAlchemyError as e:
            raise StorageError(details=str(e)) from e
        if not coins:
            raise NoActiveCoinsError()

        # Raises UpstreamFetchError before anything is written.
        quotes = await self._provider.get_prices([c.external_id for c in coins])

        observed_at = datetime.now(timezone.utc)
        updated: list[PriceRecord] = []
        try:
            for coin in coins:
                quote = quotes.get(coin.external_id)
                if quote is None:
                    logger.warning("No USD quote for %s (%s), recording 0", coin.symbol, coin.external_id)
                    price = MISSING_PRICE
                else:
                    price = to_column_scale(quote.usd)

                await self._prices.add_observation(coin.name, coin.symbol, price, observed_at)
                await self._prices.upsert_latest(coin.name, coin.symbol, price, observed_at)
                updated.append(PriceRecord(name=coin.name, symbol=coin.symbol, price_usd=price, observed_at=observed_at))
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            logger.exception("Refresh rolled back after %d of %d coins", len(updated), len(coins))
            raise StorageError(details=str(e)) from e

        logger.info("Refreshed %d coins at %s", len(updated), observed_at.isoformat())
        return RefreshResult(updated=updated, observed_at=observed_at)
