from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pricetracker.api.deps import get_db, require_api_key
from pricetracker.api.schemas.coins import (
    CoinAddedResponse,
    CoinCreateRequest,
    CoinResponse,
    CoinUpdateRequest,
    MessageResponse,
)
from pricetracker.services.registry import CoinRegistry

router = APIRouter(prefix="/api", tags=["coins"])

DbDep = Annotated[AsyncSession, Depends(get_db)]


@router.get("/coins", response_model=list[CoinResponse])
async def list_coins(
    db: DbDep,
    active_only: bool = Query(False, description="Only coins included in refreshes"),
) -> list[CoinResponse]:
    coins = await CoinRegistry(db).list_coins(active_only=active_only)
    return [CoinResponse.model_validate(c) for c in coins]


@router.post("/add-coin", response_model=CoinAddedResponse, dependencies=[Depends(require_api_key)])
async def add_coin(body: CoinCreateRequest, db: DbDep) -> CoinAddedResponse:
    coin = await CoinRegistry(db).add_coin(
        name=body.name,
        symbol=body.symbol,
        external_id=body.coingecko_id,
        is_active=body.is_active,
    )
    return CoinAddedResponse(message=f"{coin.name} added", coin=CoinResponse.model_validate(coin))


@router.patch("/coins/{coin_id}", response_model=CoinResponse, dependencies=[Depends(require_api_key)])
async def update_coin(coin_id: int, body: CoinUpdateRequest, db: DbDep) -> CoinResponse:
    """Activate or deactivate a coin without deleting it."""
    coin = await CoinRegistry(db).set_active(coin_id, body.is_active)
    return CoinResponse.model_validate(coin)


@router.delete("/remove-coin/{coin_id}", response_model=MessageResponse, dependencies=[Depends(require_api_key)])
async def remove_coin(coin_id: int, db: DbDep) -> MessageResponse:
    await CoinRegistry(db).remove_coin(coin_id)
    return MessageResponse(message=f"Coin {coin_id} removed")
