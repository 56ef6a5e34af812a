"""Unit tests for ProductLockRegistry"""

import asyncio
import pytest

from stock_ledger.app.services.product_locks import ProductLockRegistry


@pytest.mark.asyncio
class TestProductLockRegistry:

    async def test_acquire_marks_product_locked(self):
        locks = ProductLockRegistry()

        assert locks.is_locked("CHAT-MARG-2015") is False
        async with locks.acquire("CHAT-MARG-2015"):
            assert locks.is_locked("CHAT-MARG-2015") is True
            assert locks.is_locked("RIES-2020") is False
        assert locks.is_locked("CHAT-MARG-2015") is False

    async def test_same_product_is_serialized(self):
        locks = ProductLockRegistry()
        events = []

        async def worker(name: str):
            async with locks.acquire("CHAT-MARG-2015"):
                events.append(f"{name}:start")
                await asyncio.sleep(0.01)
                events.append(f"{name}:end")

        await asyncio.gather(worker("a"), worker("b"))

        assert events == ["a:start", "a:end", "b:start", "b:end"]

    async def test_different_products_run_concurrently(self):
        locks = ProductLockRegistry()
        inside = asyncio.Event()

        async def holder():
            async with locks.acquire("CHAT-MARG-2015"):
                await asyncio.wait_for(inside.wait(), timeout=1)

        async def other():
            async with locks.acquire("RIES-2020"):
                inside.set()

        await asyncio.gather(holder(), other())

        assert inside.is_set()

    async def test_acquire_many_holds_every_lock(self):
        locks = ProductLockRegistry()

        async with locks.acquire_many(["RIES-2020", "CHAT-MARG-2015", "RIES-2020"]):
            assert locks.is_locked("CHAT-MARG-2015")
            assert locks.is_locked("RIES-2020")

        assert not locks.is_locked("CHAT-MARG-2015")
        assert not locks.is_locked("RIES-2020")

    async def test_acquire_many_with_no_products(self):
        locks = ProductLockRegistry()

        async with locks.acquire_many([]):
            pass

    async def test_opposite_orders_do_not_deadlock(self):
        locks = ProductLockRegistry()

        async def take(codes):
            async with locks.acquire_many(codes):
                await asyncio.sleep(0.01)

        await asyncio.wait_for(
            asyncio.gather(take(["A", "B"]), take(["B", "A"])),
            timeout=1,
        )

    async def test_lock_released_on_exception(self):
        locks = ProductLockRegistry()

        with pytest.raises(RuntimeError):
            async with locks.acquire("CHAT-MARG-2015"):
                raise RuntimeError("boom")

        assert locks.is_locked("CHAT-MARG-2015") is False

    async def test_one_lock_per_product_code(self):
        locks = ProductLockRegistry()

        for _ in range(3):
            async with locks.acquire("CHAT-MARG-2015"):
                pass
            async with locks.acquire_many(["RIES-2020", "CHAT-MARG-2015"]):
                pass

        assert len(locks._locks) == 2
