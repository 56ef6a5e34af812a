"""Batch Ledger

FIFO consumption of receipt batches and LIFO restoration of what an
order consumed. The ledger mutates batch remainders and ledger entries
but never commits: it always runs inside the caller's unit of work,
under the caller's product lock.
"""

import logging
from stock_ledger.app.repositories.batch_repository import BatchRepository
from stock_ledger.app.repositories.consumption_entry_repository import ConsumptionEntryRepository
from stock_ledger.domain.consumption_entry import ConsumptionLedgerEntry
from .dtos import AllocationDTO, ConsumeResultDTO, RestorationDTO, RestoreResultDTO

logger = logging.getLogger(__name__)


class LedgerIntegrityError(Exception):
    """Stored ledger state contradicts the batches it points at"""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class BatchLedger:
    """
    Sole owner of Batch.remaining_quantity and ConsumptionLedgerEntry mutation

    Invariant kept by every call, per product:
        sum(received - remaining) over batches == sum(quantity) over entries

    consume walks batches oldest first (received_at, id).
    restore walks the order's entries newest batch first (batch_id DESC).
    Neither raises for shortfall or over-restoration; both are result fields.
    """

    def __init__(
        self,
        batch_repo: BatchRepository,
        entry_repo: ConsumptionEntryRepository,
    ):
        self.batch_repo = batch_repo
        self.entry_repo = entry_repo

    async def consume(self, order_id: int, product_code: str, quantity: int) -> ConsumeResultDTO:
        """
        Allocate quantity against the product's batches, oldest first

        Every batch touched gets its new remainder written immediately and
        one ledger entry recording the quantity taken and the batch cost.

        Args:
            order_id: Order the stock is consumed for
            product_code: Product code
            quantity: Quantity to consume (> 0)

        Returns:
            ConsumeResultDTO with consumed_total, shortfall and allocations
        """
        if quantity <= 0:
            raise ValueError(f"quantity must be positive, got {quantity}")

        batches = await self.batch_repo.list_available(product_code, for_update=True)

        still_needed = quantity
        allocations: list[AllocationDTO] = []

        for batch in batches:
            if still_needed <= 0:
                break

            take = min(batch.remaining_quantity, still_needed)
            if take <= 0:
                continue

            batch_id = batch.id
            unit_price = batch.unit_cost
            new_remaining = batch.remaining_quantity - take

            await self.batch_repo.update_remaining(batch_id, new_remaining)
            await self.entry_repo.create(
                ConsumptionLedgerEntry(
                    order_id=order_id,
                    product_code=product_code,
                    batch_id=batch_id,
                    quantity=take,
                    unit_price_at_consumption=unit_price,
                )
            )

            allocations.append(
                AllocationDTO(
                    batch_id=batch_id,
                    quantity=take,
                    unit_price_at_consumption=unit_price,
                )
            )
            still_needed -= take

            logger.debug(
                f"Consumed {take} from batch {batch_id} for order {order_id} "
                f"({product_code}), batch remaining={new_remaining}"
            )

        consumed_total = quantity - still_needed

        if still_needed > 0:
            logger.warning(
                f"Shortfall consuming {product_code} for order {order_id}: "
                f"requested={quantity}, consumed={consumed_total}, shortfall={still_needed}"
            )
        else:
            logger.info(
                f"FIFO consumption for {product_code} (order {order_id}): "
                f"{consumed_total} from {len(allocations)} batch(es)"
            )

        return ConsumeResultDTO(
            order_id=order_id,
            product_code=product_code,
            requested_quantity=quantity,
            consumed_total=consumed_total,
            shortfall=still_needed,
            allocations=allocations,
        )

    async def restore(self, order_id: int, product_code: str, quantity: int) -> RestoreResultDTO:
        """
        Give back stock an order consumed, newest batch first

        Entries are lowered, or deleted when they reach zero; the batch each
        entry points at is credited with the same amount.

        Args:
            order_id: Order whose consumption is reversed
            product_code: Product code
            quantity: Quantity to restore (> 0)

        Returns:
            RestoreResultDTO with restored_total, unaccounted and entries_found

        Raises:
            LedgerIntegrityError: An entry points at a missing batch, or the
                credit would push a batch above its received quantity
        """
        if quantity <= 0:
            raise ValueError(f"quantity must be positive, got {quantity}")

        entries = await self.entry_repo.list_for_order_product(order_id, product_code)

        if not entries:
            logger.warning(
                f"No consumptions found for {product_code} in order {order_id}, "
                f"nothing restored to batches"
            )
            return RestoreResultDTO(
                order_id=order_id,
                product_code=product_code,
                requested_quantity=quantity,
                restored_total=0,
                unaccounted=quantity,
                entries_found=False,
                restorations=[],
            )

        still_to_restore = quantity
        restorations: list[RestorationDTO] = []

        for entry in entries:
            if still_to_restore <= 0:
                break

            entry_id = entry.id
            batch_id = entry.batch_id
            take = min(entry.quantity, still_to_restore)
            left_in_entry = entry.quantity - take

            batch = await self.batch_repo.get_by_id(batch_id, for_update=True)
            if batch is None:
                raise LedgerIntegrityError(
                    "BATCH_NOT_FOUND",
                    f"Consumption {entry_id} of order {order_id} points at missing batch {batch_id}",
                )

            new_remaining = batch.remaining_quantity + take
            if new_remaining > batch.received_quantity:
                raise LedgerIntegrityError(
                    "BATCH_OVERFLOW",
                    f"Restoring {take} to batch {batch_id} would exceed its received "
                    f"quantity {batch.received_quantity} (remaining {batch.remaining_quantity})",
                )

            await self.batch_repo.update_remaining(batch_id, new_remaining)

            if left_in_entry > 0:
                await self.entry_repo.update_quantity(entry_id, left_in_entry)
            else:
                await self.entry_repo.delete(entry_id)

            restorations.append(
                RestorationDTO(
                    entry_id=entry_id,
                    batch_id=batch_id,
                    quantity=take,
                    entry_deleted=left_in_entry == 0,
                )
            )
            still_to_restore -= take

            logger.debug(
                f"Restored {take} to batch {batch_id} from consumption {entry_id}, "
                f"entry quantity now {left_in_entry}"
            )

        restored_total = quantity - still_to_restore

        if still_to_restore > 0:
            logger.warning(
                f"Restoration for {product_code} (order {order_id}) exceeds recorded "
                f"consumption: requested={quantity}, restored={restored_total}, "
                f"unaccounted={still_to_restore}"
            )
        else:
            logger.info(
                f"LIFO restoration for {product_code} (order {order_id}): "
                f"{restored_total} to {len(restorations)} batch(es)"
            )

        return RestoreResultDTO(
            order_id=order_id,
            product_code=product_code,
            requested_quantity=quantity,
            restored_total=restored_total,
            unaccounted=still_to_restore,
            entries_found=True,
            restorations=restorations,
        )
