"""Working Sheet Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from stock_ledger.domain.working_sheet import WorkingSheet


class WorkingSheetRepository(ABC):
    """Repository interface for the aggregate sellable quantity per product"""

    @abstractmethod
    async def get_by_product_code(
        self, product_code: str, for_update: bool = False
    ) -> Optional[WorkingSheet]:
        """
        Retrieve the working sheet row of a product

        Args:
            product_code: Product code
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            WorkingSheet if found, None otherwise
        """
        pass

    @abstractmethod
    async def adjust_quantity(self, product_code: str, delta: int) -> None:
        """
        Add delta (may be negative) to the sellable quantity of a product
        """
        pass

    @abstractmethod
    async def create(self, sheet: WorkingSheet) -> WorkingSheet:
        pass
