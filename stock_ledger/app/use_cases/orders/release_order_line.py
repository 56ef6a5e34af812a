"""ReleaseOrderLine Use Case

Gives stock back from a decreased, deleted or returned order line.
"""

import logging
from stock_ledger.libs.result import Result, Return, Error
from stock_ledger.app.services.unit_of_work import UnitOfWork
from stock_ledger.app.services.product_locks import ProductLockRegistry
from stock_ledger.app.repositories.batch_repository import BatchRepository
from stock_ledger.app.repositories.consumption_entry_repository import ConsumptionEntryRepository
from stock_ledger.app.repositories.working_sheet_repository import WorkingSheetRepository
from stock_ledger.app.use_cases.ledger.batch_ledger import BatchLedger, LedgerIntegrityError
from .dtos import OrderLineCommandDTO, OrderLineReleaseDTO

logger = logging.getLogger(__name__)


class ReleaseOrderLine:
    """
    Use Case: Release stock from an order line

    Business Rules:
    1. Batches are credited LIFO from the order's ledger entries
    2. No ledger trail -> only the working sheet is credited (warning logged)
    3. Working sheet is credited by the full released quantity
    4. All writes commit or roll back together, under the product lock
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

    async def execute(self, command: OrderLineCommandDTO) -> Result[OrderLineReleaseDTO]:
        """
        Execute order line release

        Args:
            command: OrderLineCommandDTO with order_id, product_code, quantity

        Returns:
            Result[OrderLineReleaseDTO]: Restoration details or error
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
                result = await self.release(
                    command.order_id, command.product_code, command.quantity
                )
                await self.uow.commit()
                return result

            except LedgerIntegrityError as e:
                await self.uow.rollback()
                logger.error(f"Ledger integrity error releasing {command.product_code}: {e.message}")
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
                    f"Failed to release {command.quantity} of {command.product_code} "
                    f"from order {command.order_id}: {e}"
                )
                return Return.err(
                    Error(
                        code="RELEASE_ORDER_LINE_FAILED",
                        message=f"Failed to release stock for product {command.product_code}",
                        reason=str(e),
                    )
                )

    async def release(
        self, order_id: int, product_code: str, quantity: int
    ) -> Result[OrderLineReleaseDTO]:
        """
        Release steps without lock or commit

        The caller must hold the product lock and own the transaction.
        """
        restoration = await self.ledger.restore(order_id, product_code, quantity)

        if not restoration.entries_found:
            logger.warning(
                f"No consumptions found for {product_code} in order {order_id}, "
                f"restoring only in working sheet"
            )
        elif restoration.unaccounted > 0:
            logger.warning(
                f"Released {quantity} of {product_code} from order {order_id} but only "
                f"{restoration.restored_total} was recorded as consumed"
            )

        sheet = await self.sheet_repo.get_by_product_code(product_code, for_update=True)
        working_sheet_quantity = None

        if sheet is None:
            logger.error(f"Product {product_code} not found in working sheets, quantity not credited")
        else:
            working_sheet_quantity = sheet.quantity + quantity
            await self.sheet_repo.adjust_quantity(product_code, quantity)

        return Return.ok(
            OrderLineReleaseDTO(
                order_id=order_id,
                product_code=product_code,
                quantity=quantity,
                restoration=restoration,
                working_sheet_quantity=working_sheet_quantity,
            )
        )
