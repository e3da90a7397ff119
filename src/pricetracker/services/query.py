from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pricetracker.db.models.coin import Coin
from pricetracker.db.models.price import LatestPrice, PriceObservation
from pricetracker.db.repos.coin_repo import CoinRepo
from pricetracker.db.repos.price_repo import PriceRepo
from pricetracker.domain.errors import StorageError


class QueryService:
    """Read-only views over the stored coins and prices."""

    def __init__(self, session: AsyncSession) -> None:
        self._coins = CoinRepo(session)
        self._prices = PriceRepo(session)

    async def get_latest_prices(self) -> list[LatestPrice]:
        try:
            return await self._prices.list_latest()
        except SQLAlchemyError as e:
            raise StorageError(details=str(e)) from e

    async def get_coins(self) -> list[Coin]:
        try:
            return await self._coins.list_all()
        except SQLAlchemyError as e:
            raise StorageError(details=str(e)) from e

    async def get_history(self, symbol: Optional[str] = None, limit: int = 100) -> list[PriceObservation]:
        try:
            return await self._prices.list_history(symbol=symbol.upper() if symbol else None, limit=limit)
        except SQLAlchemyError as e:
            raise StorageError(details=str(e)) from e
