"""AllocateOrderLine Use Case

Reserves stock for a new or increased order line: checks the working
sheet, consumes the batches FIFO and lowers the sellable quantity.
"""

import logging
from stock_ledger.libs.result import Result, Return, Error
from stock_ledger.app.services.unit_of_work import UnitOfWork
from stock_ledger.app.services.product_locks import ProductLockRegistry
from stock_ledger.app.repositories.batch_repository import BatchRepository
from stock_ledger.app.repositories.consumption_entry_repository import ConsumptionEntryRepository
from stock_ledger.app.repositories.working_sheet_repository import WorkingSheetRepository
from stock_ledger.app.use_cases.ledger.batch_ledger import BatchLedger
from .dtos import OrderLineCommandDTO, OrderLineAllocationDTO

logger = logging.getLogger(__name__)


class AllocateOrderLine:
    """
    Use Case: Allocate stock to an order line

    Business Rules:
    1. Availability is checked on the working sheet, not on the batches
    2. Working sheet quantity < requested -> INSUFFICIENT_QUANTITY, nothing changes
    3. Batches are consumed FIFO; a batch shortfall is logged, not rejected
    4. Working sheet is lowered by the full requested quantity
    5. All writes commit or roll back together, under the product lock

    Flow:
    1. Acquire product lock
    2. Get working sheet with lock (SELECT FOR UPDATE)
    3. Validate sufficient quantity
    4. Consume batches (BatchLedger)
    5. Lower working sheet quantity
    6. Commit
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
        self.sheet_repo = sheet_repo
        self.ledger = BatchLedger(batch_repo, entry_repo)
        self.locks = locks

    async def execute(self, command: OrderLineCommandDTO) -> Result[OrderLineAllocationDTO]:
        """
        Execute order line allocation

        Args:
            command: OrderLineCommandDTO with order_id, product_code, quantity

        Returns:
            Result[OrderLineAllocationDTO]: Allocation details or error

        Errors:
            INVALID_QUANTITY: Quantity is not positive
            PRODUCT_NOT_FOUND: No working sheet row for the product
            INSUFFICIENT_QUANTITY: Working sheet holds less than requested
            ALLOCATE_ORDER_LINE_FAILED: Storage failure
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
                result = await self.allocate(
                    command.order_id, command.product_code, command.quantity
                )
                if result.is_ok():
                    await self.uow.commit()
                else:
                    await self.uow.rollback()
                return result

            except Exception as e:
                await self.uow.rollback()
                logger.error(
                    f"Failed to allocate {command.quantity} of {command.product_code} "
                    f"to order {command.order_id}: {e}"
                )
                return Return.err(
                    Error(
                        code="ALLOCATE_ORDER_LINE_FAILED",
                        message=f"Failed to allocate stock for product {command.product_code}",
                        reason=str(e),
                    )
                )

    async def allocate(
        self, order_id: int, product_code: str, quantity: int
    ) -> Result[OrderLineAllocationDTO]:
        """
        Allocation steps without lock or commit

        The caller must hold the product lock and own the transaction.
        """
        sheet = await self.sheet_repo.get_by_product_code(product_code, for_update=True)

        if sheet is None:
            return Return.err(
                Error(
                    code="PRODUCT_NOT_FOUND",
                    message=f"Product {product_code} not found in working sheets",
                )
            )

        available = sheet.quantity
        if available < quantity:
            logger.warning(
                f"Insufficient quantity for {product_code}: need {quantity}, available {available}"
            )
            return Return.err(
                Error(
                    code="INSUFFICIENT_QUANTITY",
                    message=f"Insufficient quantity for {product_code}. Requested: {quantity}, Available: {available}",
                    reason=f"available={available}, requested={quantity}",
                )
            )

        consumption = await self.ledger.consume(order_id, product_code, quantity)

        if consumption.shortfall > 0:
            logger.warning(
                f"Working sheet allowed {quantity} of {product_code} for order {order_id} "
                f"but batches were short by {consumption.shortfall}"
            )

        await self.sheet_repo.adjust_quantity(product_code, -quantity)

        return Return.ok(
            OrderLineAllocationDTO(
                order_id=order_id,
                product_code=product_code,
                quantity=quantity,
                consumption=consumption,
                working_sheet_quantity=available - quantity,
            )
        )
