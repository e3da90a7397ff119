"""Price history and latest-price snapshot tables."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from pricetracker.db.session import Base

# Micro-cap quotes go well below 1e-8 USD.
PRICE_PRECISION = 38
PRICE_SCALE = 18


class PriceObservation(Base):
    """One observed USD price per coin per refresh. Append-only."""

    __tablename__ = "prices"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100))
    symbol: Mapped[str] = mapped_column(String(20), index=True)
    price_usd: Mapped[Decimal] = mapped_column(Numeric(PRICE_PRECISION, PRICE_SCALE))
    observed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)


class LatestPrice(Base):
    """Most recent observation per symbol. Upserted on every refresh."""

    __tablename__ = "latest_prices"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    symbol: Mapped[str] = mapped_column(String(20), unique=True)
    name: Mapped[str] = mapped_column(String(100))
    price_usd: Mapped[Decimal] = mapped_column(Numeric(PRICE_PRECISION, PRICE_SCALE))
    observed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
