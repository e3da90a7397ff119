"""Domain types for quotes and refresh cycles."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class Quote(BaseModel):
    """One entry of the CoinGecko simple-price response, e.g. ``{"usd": 65000}``."""

    usd: Decimal = Field(ge=0)


class PriceRecord(BaseModel):
    """A price written during a refresh; mirrors the LatestPrice row."""

    name: str
    symbol: str
    price_usd: Decimal
    observed_at: datetime


class RefreshResult(BaseModel):
    updated: list[PriceRecord]
    observed_at: datetime
