"""SQLAlchemy implementation of WorkingSheetRepository"""

from datetime import datetime
from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from stock_ledger.app.repositories.working_sheet_repository import WorkingSheetRepository
from stock_ledger.domain.working_sheet import WorkingSheet


class SqlAlchemyWorkingSheetRepository(WorkingSheetRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_product_code(
        self, product_code: str, for_update: bool = False
    ) -> Optional[WorkingSheet]:
        stmt = select(WorkingSheet).where(WorkingSheet.product_code == product_code)

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def adjust_quantity(self, product_code: str, delta: int) -> None:
        sheet = await self.get_by_product_code(product_code)
        if sheet:
            sheet.quantity = sheet.quantity + delta
            sheet.updated_at = datetime.utcnow()
            self.session.add(sheet)
            await self.session.flush()

    async def create(self, sheet: WorkingSheet) -> WorkingSheet:
        self.session.add(sheet)
        await self.session.flush()
        await self.session.refresh(sheet)
        return sheet
