import pytest_asyncio
from datetime import datetime, timedelta
from decimal import Decimal

from stock_ledger.depends import create_engine, create_session_factory, create_tables
from stock_ledger.domain.batch import Batch
from stock_ledger.domain.working_sheet import WorkingSheet


BASE_TIME = datetime(2024, 1, 1, 9, 0, 0)


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Create test database engine on a throwaway SQLite file"""
    test_db_url = f"sqlite+aiosqlite:///{tmp_path}/stock_test.db"

    engine = create_engine(test_db_url)
    await create_tables(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return create_session_factory(engine)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a new database session for each test"""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def seed_stock(session_factory):
    """
    Returns a coroutine that inserts batches and a working sheet for a product
    and commits them. Batch i is received i days after BASE_TIME.
    """

    async def _seed(product_code: str, quantities: list[int], sheet_quantity=None, unit_cost: str = "10.000000"):
        async with session_factory() as session:
            batches = [
                Batch(
                    product_code=product_code,
                    received_quantity=quantity,
                    remaining_quantity=quantity,
                    unit_cost=Decimal(unit_cost) + index,
                    received_at=BASE_TIME + timedelta(days=index),
                )
                for index, quantity in enumerate(quantities)
            ]
            session.add_all(batches)
            if sheet_quantity is not None:
                session.add(WorkingSheet(product_code=product_code, quantity=sheet_quantity))
            await session.commit()
            return [batch.id for batch in batches]

    return _seed
