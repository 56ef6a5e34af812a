"""Notification Service Interface

Defines the contract for alerting about ledger discrepancies.
"""

from abc import ABC, abstractmethod
from stock_ledger.app.use_cases.ledger.dtos import BatchDiscrepancyDTO


class NotificationService(ABC):
    """
    Abstract notification service for sending alerts

    Implementations can send notifications via:
    - Log output
    - Webhook (HTTP POST)
    """

    @abstractmethod
    async def send_discrepancy_alert(self, discrepancy: BatchDiscrepancyDTO) -> bool:
        """
        Send alert for a product whose batches and ledger disagree

        Args:
            discrepancy: BatchDiscrepancyDTO to alert about

        Returns:
            True if notification sent successfully, False otherwise
        """
        pass
