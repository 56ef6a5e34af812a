"""ConsumeStock Use Case

Consumes stock for an order from the product's batches, oldest first,
as one atomic step serialized per product code.
"""

import logging
from stock_ledger.libs.result import Result, Return, Error
from stock_ledger.app.services.unit_of_work import UnitOfWork
from stock_ledger.app.services.product_locks import ProductLockRegistry
from stock_ledger.app.repositories.batch_repository import BatchRepository
from stock_ledger.app.repositories.consumption_entry_repository import ConsumptionEntryRepository
from .batch_ledger import BatchLedger
from .dtos import ConsumeCommandDTO, ConsumeResultDTO

logger = logging.getLogger(__name__)


class ConsumeStock:
    """
    Use Case: Consume stock for an order (FIFO)

    Business Rules:
    1. Batches are drawn oldest first (received_at, then id)
    2. One ledger entry per batch touched, with the batch cost snapshot
    3. Shortfall is reported in the result, never as an error
    4. Serialized per product code; all writes commit or roll back together

    Flow:
    1. Acquire the product lock
    2. Run BatchLedger.consume inside the unit of work
    3. Commit
    4. Return allocations
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

    async def execute(self, command: ConsumeCommandDTO) -> Result[ConsumeResultDTO]:
        """
        Execute stock consumption

        Args:
            command: ConsumeCommandDTO with order_id, product_code, quantity

        Returns:
            Result[ConsumeResultDTO]: Allocations and shortfall, or storage error
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
                result = await self.ledger.consume(
                    command.order_id, command.product_code, command.quantity
                )
                await self.uow.commit()
                return Return.ok(result)

            except Exception as e:
                await self.uow.rollback()
                logger.error(
                    f"Failed to consume {command.quantity} of {command.product_code} "
                    f"for order {command.order_id}: {e}"
                )
                return Return.err(
                    Error(
                        code="CONSUME_STOCK_FAILED",
                        message=f"Failed to consume stock for product {command.product_code}",
                        reason=str(e),
                    )
                )
