"""Consumption Ledger Entry Repository Interface

Defines the contract for consumption ledger persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Optional
from stock_ledger.domain.consumption_entry import ConsumptionLedgerEntry


class ConsumptionEntryRepository(ABC):
    """
    Repository interface for ConsumptionLedgerEntry persistence

    Entries are written by BatchLedger.consume and reduced or deleted
    by BatchLedger.restore. Zero-quantity entries are never stored.
    """

    @abstractmethod
    async def create(self, entry: ConsumptionLedgerEntry) -> ConsumptionLedgerEntry:
        """
        Create a new ledger entry

        Args:
            entry: ConsumptionLedgerEntry to persist

        Returns:
            Created entry with generated ID
        """
        pass

    @abstractmethod
    async def list_for_order_product(
        self, order_id: int, product_code: str
    ) -> list[ConsumptionLedgerEntry]:
        """
        List entries of one order/product pair, newest batch first

        Args:
            order_id: Order ID
            product_code: Product code

        Returns:
            Entries ordered by batch_id DESC
        """
        pass

    @abstractmethod
    async def list_for_order(self, order_id: int) -> list[ConsumptionLedgerEntry]:
        """
        List every entry of an order
        """
        pass

    @abstractmethod
    async def update_quantity(self, entry_id: int, new_quantity: int) -> None:
        """
        Lower the quantity of an entry

        Args:
            entry_id: Entry ID
            new_quantity: New quantity (> 0)
        """
        pass

    @abstractmethod
    async def delete(self, entry_id: int) -> None:
        """
        Delete a single entry
        """
        pass

    @abstractmethod
    async def delete_for_order(self, order_id: int) -> int:
        """
        Delete every entry of an order

        Returns:
            Number of deleted entries
        """
        pass

    @abstractmethod
    async def get_quantity_sum(self, product_code: str) -> int:
        """
        Sum of entry quantities recorded for a product
        """
        pass

    @abstractmethod
    async def search(
        self,
        product_code: Optional[str] = None,
        order_id: Optional[int] = None,
    ) -> list[ConsumptionLedgerEntry]:
        """
        List entries matching the given filters, newest first

        Args:
            product_code: Optional product code filter
            order_id: Optional order filter

        Returns:
            Entries ordered by created_at DESC
        """
        pass
