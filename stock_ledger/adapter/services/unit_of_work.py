from sqlmodel.ext.asyncio.session import AsyncSession
from stock_ledger.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """
    Unit of work over one AsyncSession

    Repositories flush as they go; rollback discards every flushed batch,
    ledger entry and working sheet change of the session.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
