"""ReconcileBatches Use Case

Checks, per product, that what is missing from the batches is exactly
what the consumption ledger says was consumed.
"""

import logging
import time
from datetime import datetime
from stock_ledger.libs.result import Result, Return, Error
from stock_ledger.app.repositories.batch_repository import BatchRepository
from stock_ledger.app.repositories.consumption_entry_repository import ConsumptionEntryRepository
from .dtos import BatchDiscrepancyDTO, ReconciliationResultDTO

logger = logging.getLogger(__name__)


class ReconcileBatches:
    """
    Use Case: Reconcile batch remainders against the consumption ledger

    Business Rules:
    1. Every product code with at least one batch is checked
    2. consumed_by_batches = sum(received - remaining) over its batches
    3. recorded_in_ledger = sum(quantity) over its ledger entries
    4. Any difference is reported as a discrepancy
    5. Does NOT modify any data (read-only reconciliation)
    """

    def __init__(
        self,
        batch_repo: BatchRepository,
        entry_repo: ConsumptionEntryRepository,
    ):
        self.batch_repo = batch_repo
        self.entry_repo = entry_repo

    async def execute(self) -> Result[ReconciliationResultDTO]:
        """
        Execute batch reconciliation

        Returns:
            Result[ReconciliationResultDTO]: Reconciliation result with any discrepancies
        """
        start_time = time.time()
        reconciliation_time = datetime.utcnow()

        try:
            logger.info("Starting batch ledger reconciliation")

            product_codes = await self.batch_repo.list_product_codes()
            total_products = len(product_codes)

            logger.info(f"Found {total_products} products to reconcile")

            discrepancies: list[BatchDiscrepancyDTO] = []

            for product_code in product_codes:
                consumed_by_batches = await self.batch_repo.get_consumed_total(product_code)
                recorded_in_ledger = await self.entry_repo.get_quantity_sum(product_code)

                if consumed_by_batches != recorded_in_ledger:
                    discrepancy = BatchDiscrepancyDTO(
                        product_code=product_code,
                        consumed_by_batches=consumed_by_batches,
                        recorded_in_ledger=recorded_in_ledger,
                        discrepancy=consumed_by_batches - recorded_in_ledger,
                    )
                    discrepancies.append(discrepancy)

                    logger.warning(
                        f"Discrepancy found for product {product_code}: "
                        f"consumed_by_batches={consumed_by_batches}, "
                        f"recorded_in_ledger={recorded_in_ledger}, "
                        f"discrepancy={discrepancy.discrepancy}"
                    )

            execution_time_ms = int((time.time() - start_time) * 1000)

            response = ReconciliationResultDTO(
                total_products_checked=total_products,
                discrepancies_found=len(discrepancies),
                discrepancies=discrepancies,
                reconciliation_time=reconciliation_time,
                execution_time_ms=execution_time_ms,
            )

            if discrepancies:
                logger.warning(
                    f"Reconciliation complete. Found {len(discrepancies)} discrepancies "
                    f"out of {total_products} products in {execution_time_ms}ms"
                )
            else:
                logger.info(
                    f"Reconciliation complete. All {total_products} products balanced "
                    f"in {execution_time_ms}ms"
                )

            return Return.ok(response)

        except Exception as e:
            logger.error(f"Batch reconciliation failed: {e}")
            return Return.err(
                Error(
                    code="RECONCILIATION_FAILED",
                    message="Failed to reconcile batches against the consumption ledger",
                    reason=str(e),
                )
            )
