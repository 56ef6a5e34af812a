"""Unit tests for discrepancy notification services"""

import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from stock_ledger.adapter.services.notification_service import (
    CompositeNotificationService,
    LoggingNotificationService,
    WebhookNotificationService,
    create_notification_service,
)
from stock_ledger.app.use_cases.ledger.dtos import BatchDiscrepancyDTO


@pytest.fixture
def sample_discrepancy():
    return BatchDiscrepancyDTO(
        product_code="CHAT-MARG-2015",
        consumed_by_batches=12,
        recorded_in_ledger=10,
        discrepancy=2,
    )


def mock_async_client(post: AsyncMock) -> MagicMock:
    client = MagicMock()
    client.post = post
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=client)


@pytest.mark.asyncio
class TestLoggingNotificationService:

    async def test_logs_and_succeeds(self, sample_discrepancy, caplog):
        service = LoggingNotificationService()

        with caplog.at_level("WARNING"):
            assert await service.send_discrepancy_alert(sample_discrepancy) is True

        assert "CHAT-MARG-2015" in caplog.text


@pytest.mark.asyncio
class TestWebhookNotificationService:

    async def test_posts_discrepancy_payload(self, sample_discrepancy):
        post = AsyncMock(return_value=MagicMock())
        service = WebhookNotificationService("https://hooks.example.com/stock")

        with patch("stock_ledger.adapter.services.notification_service.httpx.AsyncClient", mock_async_client(post)):
            sent = await service.send_discrepancy_alert(sample_discrepancy)

        assert sent is True
        post.assert_called_once()
        assert post.call_args.args[0] == "https://hooks.example.com/stock"
        payload = post.call_args.kwargs["json"]
        assert payload["type"] == "ledger_discrepancy"
        assert payload["product_code"] == "CHAT-MARG-2015"
        assert payload["consumed_by_batches"] == 12
        assert payload["recorded_in_ledger"] == 10
        assert payload["discrepancy"] == 2

    async def test_http_error_returns_false(self, sample_discrepancy):
        post = AsyncMock(side_effect=httpx.ConnectError("connection refused"))
        service = WebhookNotificationService("https://hooks.example.com/stock")

        with patch("stock_ledger.adapter.services.notification_service.httpx.AsyncClient", mock_async_client(post)):
            sent = await service.send_discrepancy_alert(sample_discrepancy)

        assert sent is False


@pytest.mark.asyncio
class TestCompositeNotificationService:

    async def test_succeeds_if_any_service_succeeds(self, sample_discrepancy):
        failing = MagicMock()
        failing.send_discrepancy_alert = AsyncMock(side_effect=Exception("down"))
        working = MagicMock()
        working.send_discrepancy_alert = AsyncMock(return_value=True)

        service = CompositeNotificationService([failing, working])

        assert await service.send_discrepancy_alert(sample_discrepancy) is True
        working.send_discrepancy_alert.assert_called_once_with(sample_discrepancy)

    async def test_fails_if_all_services_fail(self, sample_discrepancy):
        failing = MagicMock()
        failing.send_discrepancy_alert = AsyncMock(return_value=False)

        service = CompositeNotificationService([failing])

        assert await service.send_discrepancy_alert(sample_discrepancy) is False


class TestCreateNotificationService:

    def test_logging_only_without_webhook(self):
        assert isinstance(create_notification_service(None), LoggingNotificationService)

    def test_composite_with_webhook(self):
        service = create_notification_service("https://hooks.example.com/stock")

        assert isinstance(service, CompositeNotificationService)
        assert [type(s) for s in service.services] == [
            LoggingNotificationService,
            WebhookNotificationService,
        ]
