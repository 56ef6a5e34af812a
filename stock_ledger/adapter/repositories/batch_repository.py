"""SQLAlchemy implementation of BatchRepository

Provides persistence for Batch entities with pessimistic locking support
so FIFO allocation reads and writes the same rows it locked.
"""

from typing import Optional
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from stock_ledger.app.repositories.batch_repository import BatchRepository
from stock_ledger.domain.batch import Batch


class SqlAlchemyBatchRepository(BatchRepository):
    """
    SQLAlchemy implementation of BatchRepository

    Features:
    - FIFO ordering (received_at, id)
    - Pessimistic locking via SELECT FOR UPDATE (ignored by SQLite)
    - Remaining quantity written with a flush per row
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_available(self, product_code: str, for_update: bool = False) -> list[Batch]:
        stmt = (
            select(Batch)
            .where(Batch.product_code == product_code)
            .where(Batch.remaining_quantity > 0)
            .order_by(Batch.received_at.asc(), Batch.id.asc())
        )

        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_product_code(self, product_code: str) -> list[Batch]:
        stmt = (
            select(Batch)
            .where(Batch.product_code == product_code)
            .order_by(Batch.received_at.asc(), Batch.id.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_id(self, batch_id: int, for_update: bool = False) -> Optional[Batch]:
        """
        Retrieve batch by ID with optional row-level locking

        Args:
            batch_id: Batch ID
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            Batch if found, None otherwise
        """
        stmt = select(Batch).where(Batch.id == batch_id)

        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_remaining(self, batch_id: int, new_remaining: int) -> None:
        """
        Update remaining quantity of a batch

        Args:
            batch_id: Batch ID
            new_remaining: New remaining quantity

        Note:
            Should be called within a transaction with the batch already locked
        """
        batch = await self.get_by_id(batch_id, for_update=False)
        if batch:
            batch.remaining_quantity = new_remaining
            self.session.add(batch)
            await self.session.flush()

    async def create(self, batch: Batch) -> Batch:
        self.session.add(batch)
        await self.session.flush()
        await self.session.refresh(batch)
        return batch

    async def list_product_codes(self) -> list[str]:
        stmt = select(Batch.product_code).distinct().order_by(Batch.product_code)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_consumed_total(self, product_code: str) -> int:
        stmt = select(
            func.coalesce(func.sum(Batch.received_quantity - Batch.remaining_quantity), 0)
        ).where(Batch.product_code == product_code)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())
