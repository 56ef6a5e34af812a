"""Batch Repository Interface

Defines the contract for batch persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Optional
from stock_ledger.domain.batch import Batch


class BatchRepository(ABC):
    """
    Repository interface for Batch persistence

    Batches are created by the receipt import; the ledger only reads them
    and rewrites remaining_quantity.
    """

    @abstractmethod
    async def list_available(self, product_code: str, for_update: bool = False) -> list[Batch]:
        """
        List batches of a product that still hold stock, oldest first

        Args:
            product_code: Product code
            for_update: If True, lock the rows with SELECT FOR UPDATE

        Returns:
            Batches with remaining_quantity > 0 ordered by received_at, id
        """
        pass

    @abstractmethod
    async def list_by_product_code(self, product_code: str) -> list[Batch]:
        """
        List every batch of a product (including empty ones), oldest first
        """
        pass

    @abstractmethod
    async def get_by_id(self, batch_id: int, for_update: bool = False) -> Optional[Batch]:
        """
        Retrieve batch by ID

        Args:
            batch_id: Batch ID
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Batch if found, None otherwise
        """
        pass

    @abstractmethod
    async def update_remaining(self, batch_id: int, new_remaining: int) -> None:
        """
        Persist a new remaining quantity for a batch

        Args:
            batch_id: Batch ID
            new_remaining: New remaining quantity
        """
        pass

    @abstractmethod
    async def create(self, batch: Batch) -> Batch:
        """
        Create a new batch

        Args:
            batch: Batch entity to persist

        Returns:
            Created Batch with generated ID
        """
        pass

    @abstractmethod
    async def list_product_codes(self) -> list[str]:
        """
        List distinct product codes that have at least one batch
        """
        pass

    @abstractmethod
    async def get_consumed_total(self, product_code: str) -> int:
        """
        Sum of (received_quantity - remaining_quantity) over a product's batches
        """
        pass
