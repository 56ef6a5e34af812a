from .batch_repository import SqlAlchemyBatchRepository
from .consumption_entry_repository import SqlAlchemyConsumptionEntryRepository
from .working_sheet_repository import SqlAlchemyWorkingSheetRepository

__all__ = [
    "SqlAlchemyBatchRepository",
    "SqlAlchemyConsumptionEntryRepository",
    "SqlAlchemyWorkingSheetRepository",
]
