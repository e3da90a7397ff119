from dependency_injector import containers, providers

from pricetracker.config import Settings
from pricetracker.db.session import build_engine, build_session_factory
from pricetracker.infra.http.client import HttpClient
from pricetracker.infra.price.coingecko import CoinGeckoProvider


class Container(containers.DeclarativeContainer):
    wiring_config = containers.WiringConfiguration(modules=["pricetracker.api.deps"])

    settings = providers.Singleton(Settings)

    engine = providers.Singleton(
        build_engine,
        database_url=settings.provided.database_url,
        echo=settings.provided.debug,
    )

    session_factory = providers.Singleton(
        build_session_factory,
        engine=engine,
    )

    http_client = providers.Singleton(
        HttpClient,
        timeout=settings.provided.http_timeout,
    )

    coingecko = providers.Singleton(
        CoinGeckoProvider,
        http_client=http_client,
        api_key=settings.provided.coingecko_api_key,
        base_url=settings.provided.coingecko_base_url,
    )
