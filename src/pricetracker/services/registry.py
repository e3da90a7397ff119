"""CoinRegistry: the table-backed list of coins the refresher tracks."""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pricetracker.db.models.coin import Coin
from pricetracker.db.repos.coin_repo import CoinRepo
from pricetracker.domain.errors import ConflictError, NotFoundError, StorageError, ValidationError

logger = logging.getLogger(__name__)


def _require(value: Optional[str], field: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError("Missing required fields", details=f"{field} is required")
    return str(value).strip()


class CoinRegistry:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._repo = CoinRepo(session)

    async def list_coins(self, active_only: bool = False) -> list[Coin]:
        try:
            return await self._repo.list_all(active_only=active_only)
        except SQLAlchemyError as e:
            raise StorageError(details=str(e)) from e

    async def add_coin(
        self,
        name: Optional[str],
        symbol: Optional[str],
        external_id: Optional[str],
        is_active: bool = True,
    ) -> Coin:
        """Register a coin. Symbol is stored upper-case, external id lower-case."""
        name = _require(name, "name")
        symbol = _require(symbol, "symbol").upper()
        external_id = _require(external_id, "coingecko_id").lower()

        try:
            existing = await self._repo.find_duplicate(symbol, external_id)
            if existing is not None:
                raise ConflictError(
                    "Coin already exists",
                    details=f"{existing.symbol} ({existing.external_id}) is already registered",
                )
            coin = await self._repo.create(name=name, symbol=symbol, external_id=external_id, is_active=is_active)
            await self._session.commit()
            await self._session.refresh(coin)
        except IntegrityError as e:
            await self._session.rollback()
            raise ConflictError(details=str(e.orig)) from e
        except SQLAlchemyError as e:
            await self._session.rollback()
            raise StorageError(details=str(e)) from e

        logger.info("Registered coin %s (%s), active=%s", coin.symbol, coin.external_id, coin.is_active)
        return coin

    async def remove_coin(self, coin_id: int) -> None:
        """Delete a coin. Its price history and latest row are kept."""
        try:
            deleted = await self._repo.delete(coin_id)
            if not deleted:
                raise NotFoundError("Coin not found", details=f"No coin with id {coin_id}")
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            raise StorageError(details=str(e)) from e
        logger.info("Removed coin id=%d", coin_id)

    async def set_active(self, coin_id: int, is_active: bool) -> Coin:
        try:
            coin = await self._repo.get_by_id(coin_id)
            if coin is None:
                raise NotFoundError("Coin not found", details=f"No coin with id {coin_id}")
            coin.is_active = is_active
            await self._session.commit()
            await self._session.refresh(coin)
        except SQLAlchemyError as e:
            await self._session.rollback()
            raise StorageError(details=str(e)) from e
        return coin
