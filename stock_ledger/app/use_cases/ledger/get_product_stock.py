"""Get Product Stock Use Case

Retrieves the batches of a product with their totals and the
product's working sheet quantity.
"""

from stock_ledger.libs.result import Result, Return, Error
from stock_ledger.app.repositories.batch_repository import BatchRepository
from stock_ledger.app.repositories.consumption_entry_repository import ConsumptionEntryRepository
from stock_ledger.app.repositories.working_sheet_repository import WorkingSheetRepository
from .dtos import BatchDTO, ProductStockDTO


class GetProductStock:
    """
    Get Product Stock Use Case

    Read-only operation. The working sheet quantity is reported next to
    the batch totals; the two are allowed to differ.
    """

    def __init__(
        self,
        batch_repo: BatchRepository,
        entry_repo: ConsumptionEntryRepository,
        sheet_repo: WorkingSheetRepository,
    ):
        """
        Initialize GetProductStock use case

        Args:
            batch_repo: Repository for batches
            entry_repo: Repository for ledger entries
            sheet_repo: Repository for working sheets
        """
        self.batch_repo = batch_repo
        self.entry_repo = entry_repo
        self.sheet_repo = sheet_repo

    async def execute(self, product_code: str) -> Result[ProductStockDTO]:
        """
        Execute get product stock

        Args:
            product_code: Product code

        Returns:
            Result[ProductStockDTO]: Batches and totals, or error

        Errors:
            PRODUCT_NOT_FOUND: No batch and no working sheet row for the code
        """
        batches = await self.batch_repo.list_by_product_code(product_code)
        sheet = await self.sheet_repo.get_by_product_code(product_code)

        if not batches and sheet is None:
            return Return.err(
                Error(
                    code="PRODUCT_NOT_FOUND",
                    message=f"No batches or working sheet found for product {product_code}",
                )
            )

        recorded_in_ledger = await self.entry_repo.get_quantity_sum(product_code)

        return Return.ok(
            ProductStockDTO(
                product_code=product_code,
                batches=[
                    BatchDTO(
                        id=batch.id,
                        product_code=batch.product_code,
                        product_name=batch.product_name,
                        received_quantity=batch.received_quantity,
                        remaining_quantity=batch.remaining_quantity,
                        unit_cost=batch.unit_cost,
                        received_at=batch.received_at,
                    )
                    for batch in batches
                ],
                total_received=sum(batch.received_quantity for batch in batches),
                total_remaining=sum(batch.remaining_quantity for batch in batches),
                recorded_in_ledger=recorded_in_ledger,
                working_sheet_quantity=sheet.quantity if sheet is not None else None,
            )
        )
