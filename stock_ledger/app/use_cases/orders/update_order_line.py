"""UpdateOrderLine Use Case

Applies a quantity edit on an order line as an allocation of the
increase or a release of the decrease.
"""

import logging
from stock_ledger.libs.result import Result, Return, Error
from stock_ledger.app.services.unit_of_work import UnitOfWork
from stock_ledger.app.services.product_locks import ProductLockRegistry
from stock_ledger.app.repositories.batch_repository import BatchRepository
from stock_ledger.app.repositories.consumption_entry_repository import ConsumptionEntryRepository
from stock_ledger.app.repositories.working_sheet_repository import WorkingSheetRepository
from stock_ledger.app.use_cases.ledger.batch_ledger import LedgerIntegrityError
from .allocate_order_line import AllocateOrderLine
from .release_order_line import ReleaseOrderLine
from .dtos import UpdateOrderLineCommandDTO, OrderLineUpdateDTO

logger = logging.getLogger(__name__)


class UpdateOrderLine:
    """
    Use Case: Change the quantity of an order line

    Business Rules:
    1. new > old: allocate the difference (availability check applies)
    2. new < old: release the difference (LIFO restoration)
    3. new == old: nothing happens
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
        self.locks = locks
        self.allocate_line = AllocateOrderLine(uow, batch_repo, entry_repo, sheet_repo, locks)
        self.release_line = ReleaseOrderLine(uow, batch_repo, entry_repo, sheet_repo, locks)

    async def execute(self, command: UpdateOrderLineCommandDTO) -> Result[OrderLineUpdateDTO]:
        """
        Execute order line update

        Args:
            command: UpdateOrderLineCommandDTO with old and new quantity

        Returns:
            Result[OrderLineUpdateDTO]: The allocation or release applied, or error
        """
        quantity_diff = command.new_quantity - command.old_quantity

        response = OrderLineUpdateDTO(
            order_id=command.order_id,
            product_code=command.product_code,
            old_quantity=command.old_quantity,
            new_quantity=command.new_quantity,
        )

        if quantity_diff == 0:
            return Return.ok(response)

        logger.info(
            f"Updating order {command.order_id} line {command.product_code}: "
            f"{command.old_quantity} -> {command.new_quantity}"
        )

        async with self.locks.acquire(command.product_code):
            try:
                if quantity_diff > 0:
                    result = await self.allocate_line.allocate(
                        command.order_id, command.product_code, quantity_diff
                    )
                    if result.is_err():
                        await self.uow.rollback()
                        return result
                    response.allocation = result.value
                else:
                    result = await self.release_line.release(
                        command.order_id, command.product_code, -quantity_diff
                    )
                    response.release = result.value

                await self.uow.commit()
                return Return.ok(response)

            except LedgerIntegrityError as e:
                await self.uow.rollback()
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
                    f"Failed to update order {command.order_id} line {command.product_code}: {e}"
                )
                return Return.err(
                    Error(
                        code="UPDATE_ORDER_LINE_FAILED",
                        message=f"Failed to update order line for product {command.product_code}",
                        reason=str(e),
                    )
                )
