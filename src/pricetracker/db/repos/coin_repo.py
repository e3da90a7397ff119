from typing import Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from pricetracker.db.models.coin import Coin


class CoinRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_all(self, active_only: bool = False) -> list[Coin]:
        """List coins ordered by name."""
        stmt = select(Coin).order_by(Coin.name.asc(), Coin.id.asc())
        if active_only:
            stmt = stmt.where(Coin.is_active.is_(True))
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_id(self, coin_id: int) -> Optional[Coin]:
        result = await self._session.execute(
            select(Coin).where(Coin.id == coin_id)
        )
        return result.scalar_one_or_none()

    async def find_duplicate(self, symbol: str, external_id: str) -> Optional[Coin]:
        result = await self._session.execute(
            select(Coin).where(or_(Coin.symbol == symbol, Coin.external_id == external_id)).limit(1)
        )
        return result.scalar_one_or_none()

    async def create(self, name: str, symbol: str, external_id: str, is_active: bool = True) -> Coin:
        coin = Coin(name=name, symbol=symbol, external_id=external_id, is_active=is_active)
        self._session.add(coin)
        await self._session.flush()
        return coin

    async def delete(self, coin_id: int) -> bool:
        result = await self._session.execute(delete(Coin).where(Coin.id == coin_id))
        return result.rowcount > 0
