"""Batch reconciler worker

Checks, on a schedule, that batch remainders and the consumption ledger
still agree for every product, and raises an alert per product that
does not. Run it from cron with --once, or as a long-lived process.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional

from config import ApplicationConfig
from stock_ledger.depends import create_engine, create_session_factory
from stock_ledger.adapter.repositories.batch_repository import SqlAlchemyBatchRepository
from stock_ledger.adapter.repositories.consumption_entry_repository import SqlAlchemyConsumptionEntryRepository
from stock_ledger.adapter.services.notification_service import create_notification_service
from stock_ledger.app.services.notification_service import NotificationService
from stock_ledger.app.use_cases.ledger import ReconcileBatches, ReconciliationResultDTO

logger = logging.getLogger(__name__)


def describe(result: ReconciliationResultDTO) -> list[str]:
    """Human-readable summary lines of a reconciliation run"""
    lines = [
        f"Products checked: {result.total_products_checked}",
        f"Discrepancies: {result.discrepancies_found}",
        f"Took: {result.execution_time_ms}ms",
    ]
    for d in result.discrepancies:
        lines.append(
            f"  {d.product_code}: batches={d.consumed_by_batches} "
            f"ledger={d.recorded_in_ledger} diff={d.discrepancy}"
        )
    return lines


class BatchReconcilerWorker:
    """
    Runs ReconcileBatches in its own session and alerts on discrepancies

    Usage:
        worker = BatchReconcilerWorker()
        result = await worker.run_once()
        await worker.run_forever(interval_seconds=3600)
        await worker.shutdown()
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        notification_service: Optional[NotificationService] = None,
    ):
        """
        Args:
            db_uri: Overrides ApplicationConfig.DB_URI
            notification_service: Overrides the configured alert channel
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.notification_service = notification_service or create_notification_service(
            ApplicationConfig.DISCREPANCY_NOTIFICATION_WEBHOOK
        )

        self.engine = create_engine(self.db_uri)
        self.async_session_factory = create_session_factory(self.engine)

        logger.info("BatchReconcilerWorker initialized")

    async def run_once(self) -> ReconciliationResultDTO:
        """
        Reconcile every product once

        Raises:
            RuntimeError: The reconciliation itself failed
        """
        if not ApplicationConfig.RECONCILIATION_ENABLED:
            logger.info("Batch reconciliation is disabled, skipping")
            return ReconciliationResultDTO(
                total_products_checked=0,
                discrepancies_found=0,
                discrepancies=[],
                reconciliation_time=datetime.utcnow(),
                execution_time_ms=0,
            )

        async with self.async_session_factory() as session:
            result = await ReconcileBatches(
                batch_repo=SqlAlchemyBatchRepository(session),
                entry_repo=SqlAlchemyConsumptionEntryRepository(session),
            ).execute()

        if result.is_err():
            logger.error(f"Batch reconciliation failed: {result.error.message}")
            raise RuntimeError(f"Batch reconciliation failed: {result.error.message}")

        response = result.value

        if response.discrepancies:
            logger.error(
                f"ALERT: {response.discrepancies_found} product(s) where batches and ledger disagree"
            )
            for line in describe(response)[3:]:
                logger.error(line)
            for discrepancy in response.discrepancies:
                await self.notification_service.send_discrepancy_alert(discrepancy)

        return response

    async def run_forever(self, interval_seconds: int = 86400):
        """Reconcile every interval_seconds until cancelled; a failed run does not stop the loop"""
        logger.info(f"Batch reconciliation every {interval_seconds}s")

        while True:
            try:
                result = await self.run_once()
                logger.info(
                    f"Reconciliation run done: {result.total_products_checked} products, "
                    f"{result.discrepancies_found} discrepancies, {result.execution_time_ms}ms"
                )
            except Exception as e:
                logger.error(f"Reconciliation run failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        await self.engine.dispose()
        logger.info("BatchReconcilerWorker shutdown complete")


async def main():
    """
    Command line entry point

        python -m stock_ledger.worker.batch_reconciler --once
        python -m stock_ledger.worker.batch_reconciler --interval 3600
    """
    import argparse

    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Reconcile batch remainders against the consumption ledger")
    parser.add_argument("--once", action="store_true", help="Reconcile once and exit")
    parser.add_argument(
        "--interval",
        type=int,
        default=ApplicationConfig.RECONCILIATION_INTERVAL_SECONDS,
        help="Seconds between runs (default: RECONCILIATION_INTERVAL_SECONDS)",
    )
    args = parser.parse_args()

    worker = BatchReconcilerWorker()

    try:
        if args.once:
            result = await worker.run_once()
            print("\n".join(describe(result)))
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
