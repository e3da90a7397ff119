from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from pricetracker.api.deps import get_db, get_price_provider, get_settings
from pricetracker.api.main import app
from pricetracker.config import Settings
from pricetracker.db.session import Base
from pricetracker.domain.errors import UpstreamFetchError
from pricetracker.domain.models import Quote
import pricetracker.db.models  # noqa: F401

API_KEY = "test-secret"
AUTH = {"x-api-key": API_KEY}


@pytest.fixture()
def provider():
    mock = MagicMock()
    mock.get_prices = AsyncMock(return_value={
        "bitcoin": Quote(usd=Decimal("65000")),
        "ethereum": Quote(usd=Decimal("3200")),
    })
    return mock


@pytest.fixture()
async def client(provider):
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, expire_on_commit=False)

    async def override_get_db():
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: Settings(api_key=API_KEY)
    app.dependency_overrides[get_price_provider] = lambda: provider
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


async def _seed(client) -> None:
    for body in (
        {"name": "Ethereum", "symbol": "ETH", "coingecko_id": "ethereum"},
        {"name": "Bitcoin", "symbol": "BTC", "coingecko_id": "bitcoin"},
    ):
        res = await client.post("/api/add-coin", json=body, headers=AUTH)
        assert res.status_code == 200


class TestRootAndHealth:
    async def test_banner(self, client):
        res = await client.get("/")
        assert res.status_code == 200
        assert res.headers["content-type"].startswith("text/plain")
        assert "/api/prices" in res.text

    async def test_health(self, client):
        res = await client.get("/api/health")
        assert res.json()["status"] == "ok"


class TestRefreshAPI:
    async def test_refresh_then_read(self, client, provider):
        await _seed(client)

        res = await client.post("/api/refresh", headers=AUTH)
        assert res.status_code == 200
        data = res.json()
        assert data["message"] == "Prices updated"
        assert [(u["symbol"], u["price_usd"]) for u in data["updated"]] == [("BTC", 65000.0), ("ETH", 3200.0)]
        provider.get_prices.assert_called_once_with(["bitcoin", "ethereum"])

        res = await client.get("/api/prices")
        assert res.status_code == 200
        rows = res.json()
        assert [(r["name"], r["symbol"], r["price_usd"]) for r in rows] == [
            ("Bitcoin", "BTC", 65000.0),
            ("Ethereum", "ETH", 3200.0),
        ]
        assert rows[0]["last_updated"] == rows[0]["observed_at"]

    async def test_refresh_twice_keeps_one_latest_row_per_symbol(self, client, provider):
        await _seed(client)
        await client.post("/api/refresh", headers=AUTH)

        provider.get_prices.return_value = {
            "bitcoin": Quote(usd=Decimal("66000")),
            "ethereum": Quote(usd=Decimal("3300")),
        }
        await client.post("/api/refresh", headers=AUTH)

        rows = (await client.get("/api/prices")).json()
        assert [(r["symbol"], r["price_usd"]) for r in rows] == [("BTC", 66000.0), ("ETH", 3300.0)]

        history = (await client.get("/api/prices/history", params={"symbol": "BTC"})).json()
        assert [h["price_usd"] for h in history] == [66000.0, 65000.0]

    async def test_reads_are_stable(self, client):
        await _seed(client)
        await client.post("/api/refresh", headers=AUTH)

        first = (await client.get("/api/prices")).json()
        second = (await client.get("/api/prices")).json()
        assert first == second

    async def test_missing_header_is_401_and_writes_nothing(self, client, provider):
        await _seed(client)

        res = await client.post("/api/refresh")
        assert res.status_code == 401
        assert res.json()["error"] == "Unauthorized"
        provider.get_prices.assert_not_called()
        assert (await client.get("/api/prices")).json() == []
        assert (await client.get("/api/prices/history")).json() == []

    async def test_wrong_key_is_403_and_writes_nothing(self, client, provider):
        await _seed(client)

        res = await client.post("/api/refresh", headers={"x-api-key": "wrong"})
        assert res.status_code == 403
        provider.get_prices.assert_not_called()
        assert (await client.get("/api/prices")).json() == []

    async def test_no_active_coins_is_400(self, client, provider):
        res = await client.post("/api/refresh", headers=AUTH)
        assert res.status_code == 400
        assert res.json() == {"error": "No active coins to refresh"}
        provider.get_prices.assert_not_called()
        assert (await client.get("/api/prices/history")).json() == []

    async def test_upstream_failure_is_500(self, client, provider):
        await _seed(client)
        provider.get_prices.side_effect = UpstreamFetchError(details="CoinGecko returned HTTP 503")

        res = await client.post("/api/refresh", headers=AUTH)
        assert res.status_code == 500
        assert res.json() == {"error": "Failed to fetch prices", "details": "CoinGecko returned HTTP 503"}
        assert (await client.get("/api/prices")).json() == []

    async def test_missing_quote_recorded_as_zero(self, client, provider):
        await _seed(client)
        provider.get_prices.return_value = {"bitcoin": Quote(usd=Decimal("65000"))}

        res = await client.post("/api/refresh", headers=AUTH)
        assert res.status_code == 200

        rows = (await client.get("/api/prices")).json()
        assert {r["symbol"]: r["price_usd"] for r in rows} == {"BTC": 65000.0, "ETH": 0.0}


class TestHistoryAPI:
    async def test_empty(self, client):
        res = await client.get("/api/prices/history")
        assert res.status_code == 200
        assert res.json() == []

    async def test_limit_out_of_range_is_400(self, client):
        res = await client.get("/api/prices/history", params={"limit": 0})
        assert res.status_code == 400
        assert res.json()["error"] == "Invalid request"


@pytest.fixture()
async def broken_db_client():
    session = MagicMock()
    session.execute = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("connection refused")))

    async def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


class TestStorageFailureAPI:
    @pytest.mark.parametrize("path", ["/api/prices", "/api/prices/history", "/api/coins"])
    async def test_storage_failure_is_500(self, broken_db_client, path):
        res = await broken_db_client.get(path)
        assert res.status_code == 500
        data = res.json()
        assert data["error"] == "Database error"
        assert "connection refused" in data["details"]
