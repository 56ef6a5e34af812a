import pytest
from unittest.mock import AsyncMock, MagicMock

from stock_ledger.app.services.product_locks import ProductLockRegistry


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def locks():
    """Real lock registry (locks are process-local, nothing to mock)"""
    return ProductLockRegistry()
