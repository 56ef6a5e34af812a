"""Discrepancy alert channels

Log output is always on; an HTTP webhook is added when
DISCREPANCY_NOTIFICATION_WEBHOOK is configured.
"""

import logging
from datetime import datetime
from typing import Optional
import httpx
from stock_ledger.app.services.notification_service import NotificationService
from stock_ledger.app.use_cases.ledger.dtos import BatchDiscrepancyDTO

logger = logging.getLogger(__name__)


class LoggingNotificationService(NotificationService):
    """Writes each discrepancy to the log at warning level"""

    async def send_discrepancy_alert(self, discrepancy: BatchDiscrepancyDTO) -> bool:
        logger.warning(
            f"[LEDGER DISCREPANCY] {discrepancy.product_code}: batches show "
            f"{discrepancy.consumed_by_batches} consumed, ledger records "
            f"{discrepancy.recorded_in_ledger} (off by {discrepancy.discrepancy})"
        )
        return True


class WebhookNotificationService(NotificationService):
    """
    POSTs each discrepancy as JSON to a webhook (chat channel, alerting bridge)

    A failed delivery is logged and reported as False; it never raises.
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        self.webhook_url = webhook_url
        self.timeout = timeout

    @staticmethod
    def build_payload(discrepancy: BatchDiscrepancyDTO) -> dict:
        return {
            "type": "ledger_discrepancy",
            "product_code": discrepancy.product_code,
            "consumed_by_batches": discrepancy.consumed_by_batches,
            "recorded_in_ledger": discrepancy.recorded_in_ledger,
            "discrepancy": discrepancy.discrepancy,
            "sent_at": datetime.utcnow().isoformat(),
        }

    async def send_discrepancy_alert(self, discrepancy: BatchDiscrepancyDTO) -> bool:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.webhook_url, json=self.build_payload(discrepancy)
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(
                f"Webhook alert for {discrepancy.product_code} to {self.webhook_url} failed: {e}"
            )
            return False

        logger.info(f"Webhook alert for {discrepancy.product_code} delivered")
        return True


class CompositeNotificationService(NotificationService):
    """
    Fans an alert out to several channels

    Delivered if any channel delivered it. A channel that raises does not
    stop the others.
    """

    def __init__(self, services: list[NotificationService]):
        self.services = services

    async def send_discrepancy_alert(self, discrepancy: BatchDiscrepancyDTO) -> bool:
        delivered = 0
        for channel in self.services:
            try:
                if await channel.send_discrepancy_alert(discrepancy):
                    delivered += 1
            except Exception as e:
                logger.error(f"{type(channel).__name__} raised while alerting: {e}")
        return delivered > 0


def create_notification_service(webhook_url: Optional[str] = None) -> NotificationService:
    """
    Build the alert channel for the reconciler

    Args:
        webhook_url: Optional webhook; without it alerts only go to the log

    Returns:
        LoggingNotificationService, or a composite of log + webhook
    """
    log_channel = LoggingNotificationService()
    if not webhook_url:
        return log_channel
    return CompositeNotificationService([log_channel, WebhookNotificationService(webhook_url)])
