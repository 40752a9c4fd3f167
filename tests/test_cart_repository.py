"""Tests for CartRepository quantity merge and observation."""
from __future__ import annotations

import asyncio
from decimal import Decimal

import pytest

from conftest import make_product
from storefront.core.exceptions import LocalStoreUnavailable
from storefront.domain import CartLine, cart_total


async def next_emission(stream, timeout: float = 1.0):
    return await asyncio.wait_for(anext(stream), timeout=timeout)


# ============= Mutations =============


class TestCartMutations:
    """Tests for add/set/remove/clear."""

    @pytest.mark.asyncio
    async def test_add_set_remove_scenario(self, cart, product_store):
        product = make_product(1, price=Decimal("1000"))
        product_store.insert(product)

        await cart.add_product(product)
        await cart.add_product(product)
        items = await cart.get_cart()
        assert len(items) == 1
        assert items[0].quantity == 2
        assert await cart.get_total() == Decimal("2000")

        await cart.set_quantity(1, 5)
        assert (await cart.get_cart())[0].quantity == 5
        assert await cart.get_total() == Decimal("5000")

        await cart.remove_product(1)
        assert await cart.get_cart() == []
        assert await cart.get_total() == Decimal("0")

    @pytest.mark.asyncio
    async def test_repeated_adds_keep_one_line(self, cart, cart_store):
        product = make_product(3)

        for _ in range(7):
            line = await cart.add_product(product)

        assert line == CartLine(product_id=3, quantity=7)
        assert cart_store.get_lines() == [CartLine(3, 7)]

    @pytest.mark.asyncio
    async def test_concurrent_adds_merge(self, cart, cart_store):
        product = make_product(2)

        await asyncio.gather(*(cart.add_product(product) for _ in range(20)))

        assert cart_store.get_lines() == [CartLine(2, 20)]

    @pytest.mark.asyncio
    async def test_set_quantity_zero_removes_line(self, cart):
        await cart.add_product(make_product(1))
        await cart.add_product(make_product(2))

        assert await cart.set_quantity(1, 0) is True

        assert [item.product_id for item in await cart.get_cart()] == [2]

    @pytest.mark.asyncio
    async def test_set_quantity_on_missing_line(self, cart):
        assert await cart.set_quantity(9, 3) is False
        assert await cart.get_cart() == []

    @pytest.mark.asyncio
    async def test_out_of_stock_is_rejected(self, cart, cart_store):
        assert await cart.add_product(make_product(1, stock=0)) is None
        assert cart_store.get_lines() == []

    @pytest.mark.asyncio
    async def test_adding_remote_only_product_caches_it(self, cart, product_store):
        remote_only = make_product(50, name="Remote only", price=Decimal("250"))

        await cart.add_product(remote_only)

        assert product_store.get_by_id(50) == remote_only
        assert await cart.get_total() == Decimal("250")

    @pytest.mark.asyncio
    async def test_clear_cart_and_count_items(self, cart):
        await cart.add_product(make_product(1))
        await cart.add_product(make_product(1))
        await cart.add_product(make_product(2))

        assert await cart.count_items() == 3
        assert await cart.clear_cart() == 2
        assert await cart.count_items() == 0

    @pytest.mark.asyncio
    async def test_line_outlives_cached_product(self, cart, catalog, cart_store):
        product = make_product(1, price=Decimal("1000"))
        await cart.add_product(product)
        await cart.add_product(product)

        await catalog.clear_local_cache()

        items = await cart.get_cart()
        assert [(i.product_id, i.quantity) for i in items] == [(1, 2)]
        assert items[0].product.name == "Product 1"
        assert await cart.get_total() == Decimal("2000")

        line = await cart.add_product(product)
        assert line.quantity == 3
        assert cart_store.get_lines() == [CartLine(1, 3)]

    @pytest.mark.asyncio
    async def test_deleted_product_stays_in_cart(self, cart, catalog):
        await cart.add_product(make_product(1))
        await cart.add_product(make_product(2, price=Decimal("250")))

        await catalog.delete_product(make_product(2))

        assert [item.product_id for item in await cart.get_cart()] == [1, 2]
        assert await cart.get_total() == Decimal("1250")

    @pytest.mark.asyncio
    async def test_closed_store_raises(self, cart, database):
        database.close()

        with pytest.raises(LocalStoreUnavailable):
            await cart.get_cart()


# ============= Observation =============


class TestCartObservation:
    """Tests for observe_cart and observe_total."""

    @pytest.mark.asyncio
    async def test_observe_cart_emits_current_then_changes(self, cart):
        stream = cart.observe_cart()
        try:
            assert await next_emission(stream) == []

            await cart.add_product(make_product(1))
            items = await next_emission(stream)
            assert [(i.product_id, i.quantity) for i in items] == [(1, 1)]

            await cart.set_quantity(1, 0)
            assert await next_emission(stream) == []
        finally:
            await stream.aclose()

    @pytest.mark.asyncio
    async def test_observe_cart_waits_for_a_change(self, cart):
        stream = cart.observe_cart()
        try:
            await next_emission(stream)
            with pytest.raises(asyncio.TimeoutError):
                await next_emission(stream, timeout=0.1)
        finally:
            await stream.aclose()

    @pytest.mark.asyncio
    async def test_price_change_reprices_cart(self, cart, catalog):
        await cart.add_product(make_product(1, price=Decimal("1000")))
        await cart.add_product(make_product(1, price=Decimal("1000")))
        totals = cart.observe_total()
        try:
            assert await next_emission(totals) == Decimal("2000")

            await catalog.update_product(make_product(1, price=Decimal("1500")))

            assert await next_emission(totals) == Decimal("3000")
        finally:
            await totals.aclose()

    @pytest.mark.asyncio
    async def test_total_matches_observed_cart(self, cart):
        carts = cart.observe_cart()
        totals = cart.observe_total()
        try:
            await next_emission(carts)
            await next_emission(totals)

            await cart.add_product(make_product(1, price=Decimal("19.99")))
            await cart.add_product(make_product(2, price=Decimal("5.01")))
            await cart.set_quantity(1, 3)

            items = await next_emission(carts)
            total = await next_emission(totals)
            assert total == cart_total(items) == Decimal("64.98")
        finally:
            await carts.aclose()
            await totals.aclose()
