from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from pricetracker.db.models.price import LatestPrice, PriceObservation

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class PriceRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add_observation(self, name: str, symbol: str, price_usd: Decimal, observed_at: datetime) -> PriceObservation:
        obs = PriceObservation(name=name, symbol=symbol, price_usd=price_usd, observed_at=observed_at)
        self._session.add(obs)
        await self._session.flush()
        return obs

    async def upsert_latest(self, name: str, symbol: str, price_usd: Decimal, observed_at: datetime) -> None:
        """INSERT ... ON CONFLICT (symbol) DO UPDATE: overwrite every field of an existing row."""
        dialect = self._session.get_bind().dialect.name
        insert = _UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise NotImplementedError(f"Upsert not supported for dialect {dialect}")

        stmt = insert(LatestPrice).values(
            symbol=symbol, name=name, price_usd=price_usd, observed_at=observed_at,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["symbol"],
            set_={
                "name": stmt.excluded["name"],
                "price_usd": stmt.excluded["price_usd"],
                "observed_at": stmt.excluded["observed_at"],
            },
        )
        await self._session.execute(stmt)

    async def list_latest(self) -> list[LatestPrice]:
        """Latest snapshot ordered by name."""
        result = await self._session.execute(
            select(LatestPrice)
            .order_by(LatestPrice.name.asc(), LatestPrice.symbol.asc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def list_history(self, symbol: Optional[str] = None, limit: int = 100) -> list[PriceObservation]:
        """Observations newest first, optionally for one symbol."""
        stmt = select(PriceObservation)
        if symbol:
            stmt = stmt.where(PriceObservation.symbol == symbol)
        stmt = stmt.order_by(PriceObservation.observed_at.desc(), PriceObservation.id.desc()).limit(limit)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())
