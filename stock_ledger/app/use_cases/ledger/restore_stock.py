"""RestoreStock Use Case

Gives back stock an order consumed, newest batch first.
"""

import logging
from stock_ledger.libs.result import Result, Return, Error
from stock_ledger.app.services.unit_of_work import UnitOfWork
from stock_ledger.app.services.product_locks import ProductLockRegistry
from stock_ledger.app.repositories.batch_repository import BatchRepository
from stock_ledger.app.repositories.consumption_entry_repository import ConsumptionEntryRepository
from .batch_ledger import BatchLedger, LedgerIntegrityError
from .dtos import RestoreCommandDTO, RestoreResultDTO

logger = logging.getLogger(__name__)


class RestoreStock:
    """
    Use Case: Restore stock consumed by an order (LIFO)

    Business Rules:
    1. Entries of the order/product pair are walked by batch_id descending
    2. Entries reaching zero are deleted, others lowered
    3. No ledger trail -> entries_found=False, nothing mutated
    4. Restoring more than was consumed -> remainder reported as unaccounted
    5. Serialized per product code; all writes commit or roll back together
    """

    def __init__(
        self,
        uow: UnitOfWork,
        batch_repo: BatchRepository,
        entry_repo: ConsumptionEntryRepository,
        locks: ProductLockRegistry,
    ):
        self.uow = uow
        self.ledger = BatchLedger(batch_repo, entry_repo)
        self.locks = locks

    async def execute(self, command: RestoreCommandDTO) -> Result[RestoreResultDTO]:
        """
        Execute stock restoration

        Args:
            command: RestoreCommandDTO with order_id, product_code, quantity

        Returns:
            Result[RestoreResultDTO]: Restorations and unaccounted remainder, or error

        Errors:
            INVALID_QUANTITY: Quantity is not positive
            BATCH_NOT_FOUND / BATCH_OVERFLOW: Ledger entries contradict the batches
            RESTORE_STOCK_FAILED: Storage failure
        """
        if command.quantity <= 0:
            return Return.err(
                Error(
                    code="INVALID_QUANTITY",
                    message=f"Quantity must be positive, got {command.quantity}",
                )
            )

        async with self.locks.acquire(command.product_code):
            try:
                result = await self.ledger.restore(
                    command.order_id, command.product_code, command.quantity
                )
                await self.uow.commit()
                return Return.ok(result)

            except LedgerIntegrityError as e:
                await self.uow.rollback()
                logger.error(f"Ledger integrity error restoring {command.product_code}: {e.message}")
                return Return.err(
                    Error(
                        code=e.code,
                        message=e.message,
                        reason=f"order_id={command.order_id}, product_code={command.product_code}",
                    )
                )

            except Exception as e:
                await self.uow.rollback()
                logger.error(
                    f"Failed to restore {command.quantity} of {command.product_code} "
                    f"for order {command.order_id}: {e}"
                )
                return Return.err(
                    Error(
                        code="RESTORE_STOCK_FAILED",
                        message=f"Failed to restore stock for product {command.product_code}",
                        reason=str(e),
                    )
                )
