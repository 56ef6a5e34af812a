"""Integration tests for the SQLAlchemy repositories"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal

from sqlmodel.ext.asyncio.session import AsyncSession
from stock_ledger.adapter.repositories import (
    SqlAlchemyBatchRepository,
    SqlAlchemyConsumptionEntryRepository,
    SqlAlchemyWorkingSheetRepository,
)
from stock_ledger.domain.batch import Batch
from stock_ledger.domain.consumption_entry import ConsumptionLedgerEntry
from stock_ledger.domain.working_sheet import WorkingSheet


def make_entry(order_id: int, product_code: str, batch_id: int, quantity: int) -> ConsumptionLedgerEntry:
    return ConsumptionLedgerEntry(
        order_id=order_id,
        product_code=product_code,
        batch_id=batch_id,
        quantity=quantity,
        unit_price_at_consumption=Decimal("10.000000"),
    )


@pytest.mark.asyncio
class TestBatchRepository:

    async def test_list_available_in_fifo_order(self, db_session: AsyncSession):
        repo = SqlAlchemyBatchRepository(db_session)
        base = datetime(2024, 1, 1)
        late = await repo.create(
            Batch(product_code="A", received_quantity=5, remaining_quantity=5,
                  unit_cost=Decimal("1"), received_at=base + timedelta(days=2))
        )
        early = await repo.create(
            Batch(product_code="A", received_quantity=5, remaining_quantity=5,
                  unit_cost=Decimal("1"), received_at=base)
        )
        tie = await repo.create(
            Batch(product_code="A", received_quantity=5, remaining_quantity=5,
                  unit_cost=Decimal("1"), received_at=base)
        )
        await repo.create(
            Batch(product_code="A", received_quantity=5, remaining_quantity=0,
                  unit_cost=Decimal("1"), received_at=base - timedelta(days=1))
        )
        await repo.create(
            Batch(product_code="B", received_quantity=5, remaining_quantity=5,
                  unit_cost=Decimal("1"), received_at=base)
        )

        batches = await repo.list_available("A", for_update=True)

        assert [b.id for b in batches] == [early.id, tie.id, late.id]

    async def test_update_remaining_and_consumed_total(self, db_session: AsyncSession):
        repo = SqlAlchemyBatchRepository(db_session)
        first = await repo.create(
            Batch(product_code="A", received_quantity=10, remaining_quantity=10, unit_cost=Decimal("1"))
        )
        await repo.create(
            Batch(product_code="A", received_quantity=4, remaining_quantity=1, unit_cost=Decimal("1"))
        )

        await repo.update_remaining(first.id, 6)

        reloaded = await repo.get_by_id(first.id)
        assert reloaded.remaining_quantity == 6
        assert await repo.get_consumed_total("A") == 7
        assert await repo.get_consumed_total("NONE") == 0

    async def test_list_product_codes_distinct_sorted(self, db_session: AsyncSession):
        repo = SqlAlchemyBatchRepository(db_session)
        for code in ["RIES-2020", "CHAT-MARG-2015", "RIES-2020"]:
            await repo.create(
                Batch(product_code=code, received_quantity=1, remaining_quantity=1, unit_cost=Decimal("1"))
            )

        assert await repo.list_product_codes() == ["CHAT-MARG-2015", "RIES-2020"]

    async def test_get_missing_batch(self, db_session: AsyncSession):
        repo = SqlAlchemyBatchRepository(db_session)

        assert await repo.get_by_id(12345) is None


@pytest.mark.asyncio
class TestConsumptionEntryRepository:

    async def test_list_for_order_product_newest_batch_first(self, db_session: AsyncSession):
        repo = SqlAlchemyConsumptionEntryRepository(db_session)
        await repo.create(make_entry(1, "A", batch_id=1, quantity=5))
        await repo.create(make_entry(1, "A", batch_id=3, quantity=2))
        await repo.create(make_entry(1, "A", batch_id=2, quantity=4))
        await repo.create(make_entry(1, "B", batch_id=9, quantity=1))
        await repo.create(make_entry(2, "A", batch_id=7, quantity=1))

        entries = await repo.list_for_order_product(1, "A")

        assert [e.batch_id for e in entries] == [3, 2, 1]

    async def test_update_delete_and_sum(self, db_session: AsyncSession):
        repo = SqlAlchemyConsumptionEntryRepository(db_session)
        kept = await repo.create(make_entry(1, "A", batch_id=1, quantity=5))
        dropped = await repo.create(make_entry(1, "A", batch_id=2, quantity=2))

        await repo.update_quantity(kept.id, 3)
        await repo.delete(dropped.id)

        assert await repo.get_by_id(dropped.id) is None
        assert (await repo.get_by_id(kept.id)).quantity == 3
        assert await repo.get_quantity_sum("A") == 3
        assert await repo.get_quantity_sum("B") == 0

    async def test_delete_for_order(self, db_session: AsyncSession):
        repo = SqlAlchemyConsumptionEntryRepository(db_session)
        await repo.create(make_entry(1, "A", batch_id=1, quantity=5))
        await repo.create(make_entry(1, "B", batch_id=2, quantity=2))
        await repo.create(make_entry(2, "A", batch_id=1, quantity=1))

        deleted = await repo.delete_for_order(1)

        assert deleted == 2
        assert await repo.list_for_order(1) == []
        assert len(await repo.list_for_order(2)) == 1

    async def test_search_filters(self, db_session: AsyncSession):
        repo = SqlAlchemyConsumptionEntryRepository(db_session)
        await repo.create(make_entry(1, "A", batch_id=1, quantity=5))
        await repo.create(make_entry(1, "B", batch_id=2, quantity=2))
        await repo.create(make_entry(2, "A", batch_id=1, quantity=1))

        assert len(await repo.search()) == 3
        assert {e.order_id for e in await repo.search(product_code="A")} == {1, 2}
        assert [e.product_code for e in await repo.search(order_id=1, product_code="B")] == ["B"]
        assert await repo.search(order_id=99) == []


@pytest.mark.asyncio
class TestWorkingSheetRepository:

    async def test_adjust_quantity(self, db_session: AsyncSession):
        repo = SqlAlchemyWorkingSheetRepository(db_session)
        await repo.create(WorkingSheet(product_code="A", quantity=10))

        await repo.adjust_quantity("A", -4)
        await repo.adjust_quantity("A", 1)

        sheet = await repo.get_by_product_code("A", for_update=True)
        assert sheet.quantity == 7

    async def test_missing_sheet(self, db_session: AsyncSession):
        repo = SqlAlchemyWorkingSheetRepository(db_session)

        assert await repo.get_by_product_code("NONE") is None
