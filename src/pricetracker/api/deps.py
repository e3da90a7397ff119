from typing import AsyncGenerator, Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pricetracker.config import Settings
from pricetracker.container import Container
from pricetracker.domain.errors import AuthorizationError
from pricetracker.infra.price.coingecko import CoinGeckoProvider
from pricetracker.services.guard import authorize


@inject
async def get_db(
    session_factory: async_sessionmaker[AsyncSession] = Depends(Provide[Container.session_factory]),
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@inject
def get_settings(settings: Settings = Depends(Provide[Container.settings])) -> Settings:
    return settings


@inject
def get_price_provider(
    provider: CoinGeckoProvider = Depends(Provide[Container.coingecko]),
) -> CoinGeckoProvider:
    return provider


async def require_api_key(
    x_api_key: Optional[str] = Header(None, alias="x-api-key"),
    settings: Settings = Depends(get_settings),
) -> None:
    """Gate for mutating endpoints: 401 when the header is absent, 403 when it is wrong."""
    if not x_api_key:
        raise AuthorizationError("Unauthorized", details="Missing x-api-key header")
    if not authorize(x_api_key, settings.api_key):
        raise AuthorizationError("Forbidden", details="Invalid API key", status_code=403)
