"""Tests for CoinRegistry: add / list / remove / activate."""

import pytest

from pricetracker.domain.errors import ConflictError, NotFoundError, ValidationError
from pricetracker.services.registry import CoinRegistry


class TestAddCoin:
    async def test_add_normalizes_symbol_and_id(self, session):
        registry = CoinRegistry(session)
        coin = await registry.add_coin(name=" Bitcoin ", symbol="btc", external_id="Bitcoin")

        assert coin.id is not None
        assert coin.name == "Bitcoin"
        assert coin.symbol == "BTC"
        assert coin.external_id == "bitcoin"
        assert coin.is_active is True

    async def test_add_inactive(self, session):
        coin = await CoinRegistry(session).add_coin("Dogecoin", "DOGE", "dogecoin", is_active=False)
        assert coin.is_active is False

    @pytest.mark.parametrize(
        "name,symbol,external_id",
        [
            (None, "BTC", "bitcoin"),
            ("Bitcoin", "", "bitcoin"),
            ("Bitcoin", "BTC", "   "),
        ],
    )
    async def test_missing_fields_rejected(self, session, name, symbol, external_id):
        registry = CoinRegistry(session)
        with pytest.raises(ValidationError):
            await registry.add_coin(name=name, symbol=symbol, external_id=external_id)
        assert await registry.list_coins() == []

    async def test_duplicate_symbol_conflicts(self, session):
        registry = CoinRegistry(session)
        await registry.add_coin("Bitcoin", "BTC", "bitcoin")

        with pytest.raises(ConflictError):
            await registry.add_coin("Other", "btc", "other-coin")

    async def test_duplicate_external_id_conflicts(self, session):
        registry = CoinRegistry(session)
        await registry.add_coin("Bitcoin", "BTC", "bitcoin")

        with pytest.raises(ConflictError):
            await registry.add_coin("Bitcoin 2", "XBT", "bitcoin")


class TestListCoins:
    async def test_sorted_by_name(self, session):
        registry = CoinRegistry(session)
        await registry.add_coin("Solana", "SOL", "solana")
        await registry.add_coin("Bitcoin", "BTC", "bitcoin")
        await registry.add_coin("Ethereum", "ETH", "ethereum")

        names = [c.name for c in await registry.list_coins()]
        assert names == ["Bitcoin", "Ethereum", "Solana"]

    async def test_active_only(self, session):
        registry = CoinRegistry(session)
        await registry.add_coin("Bitcoin", "BTC", "bitcoin")
        await registry.add_coin("Dogecoin", "DOGE", "dogecoin", is_active=False)

        active = await registry.list_coins(active_only=True)
        assert [c.symbol for c in active] == ["BTC"]
        assert len(await registry.list_coins()) == 2


class TestRemoveCoin:
    async def test_remove(self, session):
        registry = CoinRegistry(session)
        coin = await registry.add_coin("Bitcoin", "BTC", "bitcoin")

        await registry.remove_coin(coin.id)
        assert await registry.list_coins() == []

    async def test_remove_unknown_id(self, session):
        registry = CoinRegistry(session)
        await registry.add_coin("Bitcoin", "BTC", "bitcoin")

        with pytest.raises(NotFoundError):
            await registry.remove_coin(99)
        assert [c.symbol for c in await registry.list_coins()] == ["BTC"]


class TestSetActive:
    async def test_deactivate_and_reactivate(self, session):
        registry = CoinRegistry(session)
        coin = await registry.add_coin("Bitcoin", "BTC", "bitcoin")

        updated = await registry.set_active(coin.id, False)
        assert updated.is_active is False
        assert await registry.list_coins(active_only=True) == []

        updated = await registry.set_active(coin.id, True)
        assert updated.is_active is True

    async def test_unknown_id(self, session):
        with pytest.raises(NotFoundError):
            await CoinRegistry(session).set_active(42, False)
