from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, computed_field, field_serializer


class PriceResponse(BaseModel):
    name: str
    symbol: str
    price_usd: Decimal
    observed_at: datetime

    model_config = {"from_attributes": True}

    @field_serializer("price_usd")
    def serialize_price(self, value: Decimal) -> float:
        return float(value)

    @computed_field
    @property
    def last_updated(self) -> datetime:
        return self.observed_at


class PriceHistoryResponse(PriceResponse):
    id: int


class RefreshResponse(BaseModel):
    message: str
    updated: list[PriceResponse]
