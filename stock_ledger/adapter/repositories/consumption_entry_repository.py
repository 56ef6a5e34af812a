"""SQLAlchemy implementation of ConsumptionEntryRepository

Provides persistence for the consumption ledger.
"""

from typing import Optional
from sqlalchemy import delete
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from stock_ledger.app.repositories.consumption_entry_repository import ConsumptionEntryRepository
from stock_ledger.domain.consumption_entry import ConsumptionLedgerEntry


class SqlAlchemyConsumptionEntryRepository(ConsumptionEntryRepository):
    """
    SQLAlchemy implementation of ConsumptionEntryRepository

    Features:
    - LIFO listing per order/product (batch_id DESC)
    - Order listings refresh entries already in the session identity map
    - Entry lowering and deletion with immediate flush
    - Bulk deletion per order
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, entry: ConsumptionLedgerEntry) -> ConsumptionLedgerEntry:
        """
        Create a new ledger entry

        Args:
            entry: ConsumptionLedgerEntry to persist

        Returns:
            Created entry with generated ID
        """
        self.session.add(entry)
        await self.session.flush()
        await self.session.refresh(entry)
        return entry

    async def get_by_id(self, entry_id: int) -> Optional[ConsumptionLedgerEntry]:
        stmt = select(ConsumptionLedgerEntry).where(ConsumptionLedgerEntry.id == entry_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_order_product(
        self, order_id: int, product_code: str
    ) -> list[ConsumptionLedgerEntry]:
        stmt = (
            select(ConsumptionLedgerEntry)
            .where(ConsumptionLedgerEntry.order_id == order_id)
            .where(ConsumptionLedgerEntry.product_code == product_code)
            .order_by(ConsumptionLedgerEntry.batch_id.desc(), ConsumptionLedgerEntry.id.desc())
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_order(self, order_id: int) -> list[ConsumptionLedgerEntry]:
        stmt = (
            select(ConsumptionLedgerEntry)
            .where(ConsumptionLedgerEntry.order_id == order_id)
            .order_by(ConsumptionLedgerEntry.product_code, ConsumptionLedgerEntry.batch_id.desc())
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update_quantity(self, entry_id: int, new_quantity: int) -> None:
        entry = await self.get_by_id(entry_id)
        if entry:
            entry.quantity = new_quantity
            self.session.add(entry)
            await self.session.flush()

    async def delete(self, entry_id: int) -> None:
        entry = await self.get_by_id(entry_id)
        if entry:
            await self.session.delete(entry)
            await self.session.flush()

    async def delete_for_order(self, order_id: int) -> int:
        stmt = delete(ConsumptionLedgerEntry).where(ConsumptionLedgerEntry.order_id == order_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount or 0

    async def get_quantity_sum(self, product_code: str) -> int:
        stmt = select(
            func.coalesce(func.sum(ConsumptionLedgerEntry.quantity), 0)
        ).where(ConsumptionLedgerEntry.product_code == product_code)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def search(
        self,
        product_code: Optional[str] = None,
        order_id: Optional[int] = None,
    ) -> list[ConsumptionLedgerEntry]:
        stmt = select(ConsumptionLedgerEntry)

        if product_code is not None:
            stmt = stmt.where(ConsumptionLedgerEntry.product_code == product_code)
        if order_id is not None:
            stmt = stmt.where(ConsumptionLedgerEntry.order_id == order_id)

        stmt = stmt.order_by(
            ConsumptionLedgerEntry.created_at.desc(), ConsumptionLedgerEntry.id.desc()
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
