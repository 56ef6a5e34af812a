"""Unit tests for ReleaseOrderLine use case"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from stock_ledger.app.use_cases.orders.release_order_line import ReleaseOrderLine
from stock_ledger.app.use_cases.orders.dtos import OrderLineCommandDTO
from stock_ledger.domain.batch import Batch
from stock_ledger.domain.consumption_entry import ConsumptionLedgerEntry
from stock_ledger.domain.working_sheet import WorkingSheet


@pytest.fixture
def sample_batch():
    return Batch(
        id=1,
        product_code="CHAT-MARG-2015",
        received_quantity=12,
        remaining_quantity=6,
        unit_cost=Decimal("120.000000"),
    )


@pytest.fixture
def mock_batch_repo(sample_batch):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=sample_batch)
    repo.update_remaining = AsyncMock()
    return repo


@pytest.fixture
def mock_entry_repo():
    repo = MagicMock()
    repo.list_for_order_product = AsyncMock(
        return_value=[
            ConsumptionLedgerEntry(
                id=10,
                order_id=42,
                product_code="CHAT-MARG-2015",
                batch_id=1,
                quantity=6,
                unit_price_at_consumption=Decimal("120.000000"),
            )
        ]
    )
    repo.update_quantity = AsyncMock()
    repo.delete = AsyncMock()
    return repo


@pytest.fixture
def mock_sheet_repo():
    repo = MagicMock()
    repo.get_by_product_code = AsyncMock(
        return_value=WorkingSheet(id=1, product_code="CHAT-MARG-2015", quantity=10)
    )
    repo.adjust_quantity = AsyncMock()
    return repo


@pytest.fixture
def release_use_case(mock_uow, mock_batch_repo, mock_entry_repo, mock_sheet_repo, locks):
    return ReleaseOrderLine(
        uow=mock_uow,
        batch_repo=mock_batch_repo,
        entry_repo=mock_entry_repo,
        sheet_repo=mock_sheet_repo,
        locks=locks,
    )


@pytest.mark.asyncio
class TestReleaseOrderLine:

    async def test_release_restores_batches_and_credits_sheet(
        self, release_use_case, mock_batch_repo, mock_entry_repo, mock_sheet_repo, mock_uow
    ):
        command = OrderLineCommandDTO(order_id=42, product_code="CHAT-MARG-2015", quantity=4)

        result = await release_use_case.execute(command)

        assert result.is_ok()
        response = result.value
        assert response.restoration.restored_total == 4
        assert response.working_sheet_quantity == 14
        mock_batch_repo.update_remaining.assert_called_once_with(1, 10)
        mock_entry_repo.update_quantity.assert_called_once_with(10, 2)
        mock_sheet_repo.adjust_quantity.assert_called_once_with("CHAT-MARG-2015", 4)
        mock_uow.commit.assert_called_once()

    async def test_release_without_consumptions_credits_sheet_only(
        self, release_use_case, mock_batch_repo, mock_entry_repo, mock_sheet_repo, mock_uow
    ):
        """Lines created before the ledger existed still give their quantity back"""
        mock_entry_repo.list_for_order_product = AsyncMock(return_value=[])
        command = OrderLineCommandDTO(order_id=42, product_code="CHAT-MARG-2015", quantity=3)

        result = await release_use_case.execute(command)

        assert result.is_ok()
        assert result.value.restoration.entries_found is False
        assert result.value.working_sheet_quantity == 13
        mock_batch_repo.update_remaining.assert_not_called()
        mock_sheet_repo.adjust_quantity.assert_called_once_with("CHAT-MARG-2015", 3)
        mock_uow.commit.assert_called_once()

    async def test_sheet_credited_by_full_quantity_when_ledger_is_short(
        self, release_use_case, mock_sheet_repo
    ):
        command = OrderLineCommandDTO(order_id=42, product_code="CHAT-MARG-2015", quantity=8)

        result = await release_use_case.execute(command)

        assert result.is_ok()
        assert result.value.restoration.restored_total == 6
        assert result.value.restoration.unaccounted == 2
        mock_sheet_repo.adjust_quantity.assert_called_once_with("CHAT-MARG-2015", 8)

    async def test_missing_working_sheet(
        self, release_use_case, mock_sheet_repo, mock_uow
    ):
        mock_sheet_repo.get_by_product_code = AsyncMock(return_value=None)
        command = OrderLineCommandDTO(order_id=42, product_code="CHAT-MARG-2015", quantity=2)

        result = await release_use_case.execute(command)

        assert result.is_ok()
        assert result.value.working_sheet_quantity is None
        mock_sheet_repo.adjust_quantity.assert_not_called()
        mock_uow.commit.assert_called_once()

    async def test_integrity_error_rolls_back(
        self, release_use_case, mock_batch_repo, mock_sheet_repo, mock_uow
    ):
        mock_batch_repo.get_by_id = AsyncMock(return_value=None)
        command = OrderLineCommandDTO(order_id=42, product_code="CHAT-MARG-2015", quantity=2)

        result = await release_use_case.execute(command)

        assert result.is_err()
        assert result.error.code == "BATCH_NOT_FOUND"
        mock_sheet_repo.adjust_quantity.assert_not_called()
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()

    async def test_storage_error_rolls_back(
        self, release_use_case, mock_sheet_repo, mock_uow
    ):
        mock_sheet_repo.adjust_quantity = AsyncMock(side_effect=Exception("Database connection lost"))
        command = OrderLineCommandDTO(order_id=42, product_code="CHAT-MARG-2015", quantity=2)

        result = await release_use_case.execute(command)

        assert result.is_err()
        assert result.error.code == "RELEASE_ORDER_LINE_FAILED"
        mock_uow.rollback.assert_called_once()
