"""List Consumptions Use Case

Searches the consumption ledger by product code and/or order.
"""

from typing import Optional
from stock_ledger.libs.result import Result, Return, Error
from stock_ledger.app.repositories.consumption_entry_repository import ConsumptionEntryRepository
from .dtos import ConsumptionEntryDTO, ListConsumptionsResponseDTO


class ListConsumptions:
    """
    Read-only search over ledger entries, newest first.
    Both filters are optional; without filters every entry is returned.
    """

    def __init__(self, entry_repo: ConsumptionEntryRepository):
        self.entry_repo = entry_repo

    async def execute(
        self,
        product_code: Optional[str] = None,
        order_id: Optional[int] = None,
    ) -> Result[ListConsumptionsResponseDTO]:
        try:
            entries = await self.entry_repo.search(product_code=product_code, order_id=order_id)
        except Exception as e:
            return Return.err(
                Error(
                    code="LIST_CONSUMPTIONS_FAILED",
                    message="Failed to list consumptions",
                    reason=str(e),
                )
            )

        dtos = [
            ConsumptionEntryDTO(
                id=entry.id,
                order_id=entry.order_id,
                product_code=entry.product_code,
                batch_id=entry.batch_id,
                quantity=entry.quantity,
                unit_price_at_consumption=entry.unit_price_at_consumption,
                created_at=entry.created_at,
            )
            for entry in entries
        ]

        return Return.ok(ListConsumptionsResponseDTO(entries=dtos, total=len(dtos)))
