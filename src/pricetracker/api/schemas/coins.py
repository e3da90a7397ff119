from typing import Optional

from pydantic import AliasChoices, BaseModel, Field


class CoinCreateRequest(BaseModel):
    # Presence is checked by CoinRegistry.add_coin.
    name: Optional[str] = None
    symbol: Optional[str] = None
    coingecko_id: Optional[str] = Field(None, validation_alias=AliasChoices("coingecko_id", "external_id"))
    is_active: bool = True


class CoinUpdateRequest(BaseModel):
    is_active: bool


class CoinResponse(BaseModel):
    id: int
    name: str
    symbol: str
    coingecko_id: str = Field(validation_alias=AliasChoices("coingecko_id", "external_id"))
    is_active: bool

    model_config = {"from_attributes": True}


class CoinAddedResponse(BaseModel):
    message: str
    coin: CoinResponse


class MessageResponse(BaseModel):
    message: str
