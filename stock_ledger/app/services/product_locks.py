"""Per-product locks

Batch remainders are read, allocated and written back in several steps.
Two ledger operations on the same product code must not interleave, so
every mutating use case holds the product's lock for its whole
transaction.
"""

import asyncio
from contextlib import AsyncExitStack, asynccontextmanager
from typing import AsyncIterator, Iterable


class ProductLockRegistry:
    """
    Hands out one asyncio.Lock per product code

    Locks for several products are always taken in sorted order so two
    multi-product operations cannot deadlock each other.
    """

    def __init__(self):
        # One lock per product code ever seen, never evicted; bounded by the catalogue
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock_for(self, product_code: str) -> asyncio.Lock:
        lock = self._locks.get(product_code)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[product_code] = lock
        return lock

    def is_locked(self, product_code: str) -> bool:
        lock = self._locks.get(product_code)
        return lock is not None and lock.locked()

    @asynccontextmanager
    async def acquire(self, product_code: str) -> AsyncIterator[None]:
        async with self._lock_for(product_code):
            yield

    @asynccontextmanager
    async def acquire_many(self, product_codes: Iterable[str]) -> AsyncIterator[None]:
        async with AsyncExitStack() as stack:
            for product_code in sorted(set(product_codes)):
                await stack.enter_async_context(self._lock_for(product_code))
            yield
