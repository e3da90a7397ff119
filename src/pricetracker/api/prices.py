from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pricetracker.api.deps import get_db, get_price_provider, require_api_key
from pricetracker.api.schemas.prices import PriceHistoryResponse, PriceResponse, RefreshResponse
from pricetracker.infra.price.coingecko import CoinGeckoProvider
from pricetracker.services.query import QueryService
from pricetracker.services.refresher import PriceRefresher

router = APIRouter(prefix="/api", tags=["prices"])

DbDep = Annotated[AsyncSession, Depends(get_db)]


@router.get("/prices", response_model=list[PriceResponse])
async def list_latest_prices(db: DbDep) -> list[PriceResponse]:
    """Latest price per coin, ordered by name."""
    rows = await QueryService(db).get_latest_prices()
    return [PriceResponse.model_validate(r) for r in rows]


@router.get("/prices/history", response_model=list[PriceHistoryResponse])
async def list_price_history(
    db: DbDep,
    symbol: Optional[str] = Query(None, description="Filter by ticker symbol"),
    limit: int = Query(100, ge=1, le=1000),
) -> list[PriceHistoryResponse]:
    rows = await QueryService(db).get_history(symbol=symbol, limit=limit)
    return [PriceHistoryResponse.model_validate(r) for r in rows]


@router.post("/refresh", response_model=RefreshResponse, dependencies=[Depends(require_api_key)])
async def refresh_prices(
    db: DbDep,
    provider: CoinGeckoProvider = Depends(get_price_provider),
) -> RefreshResponse:
    """Fetch current quotes for every active coin and store them."""
    result = await PriceRefresher(db, provider).refresh()
    return RefreshResponse(
        message="Prices updated",
        updated=[PriceResponse.model_validate(r) for r in result.updated],
    )
