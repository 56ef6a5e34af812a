"""ReleaseOrder Use Case

Gives back everything an order consumed before the order is deleted,
then removes the order's ledger trail.
"""

import logging
from collections import defaultdict
from stock_ledger.libs.result import Result, Return, Error
from stock_ledger.app.services.unit_of_work import UnitOfWork
from stock_ledger.app.services.product_locks import ProductLockRegistry
from stock_ledger.app.repositories.batch_repository import BatchRepository
from stock_ledger.app.repositories.consumption_entry_repository import ConsumptionEntryRepository
from stock_ledger.app.repositories.working_sheet_repository import WorkingSheetRepository
from stock_ledger.app.use_cases.ledger.batch_ledger import BatchLedger, LedgerIntegrityError
from stock_ledger.app.use_cases.ledger.dtos import RestoreResultDTO
from stock_ledger.domain.consumption_entry import ConsumptionLedgerEntry
from .dtos import OrderReleaseDTO

logger = logging.getLogger(__name__)


class ReleaseOrder:
    """
    Use Case: Release all stock held by an order

    Business Rules:
    1. Every product in the order's ledger is restored in full (LIFO)
    2. Working sheets are credited with what was restored
    3. Leftover entries of the order are bulk-deleted afterwards
    4. Locks of all touched products are held, in sorted order, for the
       whole transaction

    Order lines without a ledger trail are not visible here; the order
    service credits their working sheet itself.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        batch_repo: BatchRepository,
        entry_repo: ConsumptionEntryRepository,
        sheet_repo: WorkingSheetRepository,
        locks: ProductLockRegistry,
    ):
        self.uow = uow
        self.entry_repo = entry_repo
        self.sheet_repo = sheet_repo
        self.ledger = BatchLedger(batch_repo, entry_repo)
        self.locks = locks

    async def execute(self, order_id: int) -> Result[OrderReleaseDTO]:
        """
        Execute order release

        The first read only picks the locks. Entries are read again, fresh,
        once the locks are held; if the order reached a product that was not
        locked in between, the locks are released and taken again over the
        wider set.

        Args:
            order_id: Order being deleted

        Returns:
            Result[OrderReleaseDTO]: Per-product restorations or error
        """
        try:
            entries = await self.entry_repo.list_for_order(order_id)
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="RELEASE_ORDER_FAILED",
                    message=f"Failed to read consumptions of order {order_id}",
                    reason=str(e),
                )
            )

        product_codes = {entry.product_code for entry in entries}

        while True:
            async with self.locks.acquire_many(product_codes):
                try:
                    entries = await self.entry_repo.list_for_order(order_id)
                    current = {entry.product_code for entry in entries}
                    if current <= product_codes:
                        return await self._release(order_id, entries)

                except LedgerIntegrityError as e:
                    await self.uow.rollback()
                    logger.error(f"Ledger integrity error releasing order {order_id}: {e.message}")
                    return Return.err(
                        Error(code=e.code, message=e.message, reason=f"order_id={order_id}")
                    )

                except Exception as e:
                    await self.uow.rollback()
                    logger.error(f"Failed to release order {order_id}: {e}")
                    return Return.err(
                        Error(
                            code="RELEASE_ORDER_FAILED",
                            message=f"Failed to release stock of order {order_id}",
                            reason=str(e),
                        )
                    )

            logger.info(
                f"Order {order_id} gained products {sorted(current - product_codes)} "
                f"while waiting for locks, retrying"
            )
            product_codes |= current

    async def _release(
        self, order_id: int, entries: list[ConsumptionLedgerEntry]
    ) -> Result[OrderReleaseDTO]:
        quantities: dict[str, int] = defaultdict(int)
        for entry in entries:
            quantities[entry.product_code] += entry.quantity

        restorations: list[RestoreResultDTO] = []
        for product_code in sorted(quantities):
            restoration = await self.ledger.restore(
                order_id, product_code, quantities[product_code]
            )
            restorations.append(restoration)

            sheet = await self.sheet_repo.get_by_product_code(product_code, for_update=True)
            if sheet is None:
                logger.error(
                    f"Product {product_code} not found in working sheets, "
                    f"{restoration.restored_total} not credited"
                )
            else:
                await self.sheet_repo.adjust_quantity(product_code, restoration.restored_total)

        entries_deleted = await self.entry_repo.delete_for_order(order_id)

        await self.uow.commit()

        restored_total = sum(r.restored_total for r in restorations)
        logger.info(
            f"Released order {order_id}: {restored_total} units over "
            f"{len(restorations)} product(s), {entries_deleted} leftover entries deleted"
        )

        return Return.ok(
            OrderReleaseDTO(
                order_id=order_id,
                restorations=restorations,
                restored_total=restored_total,
                entries_deleted=entries_deleted,
            )
        )
