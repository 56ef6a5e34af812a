from .batch_repository import BatchRepository
from .consumption_entry_repository import ConsumptionEntryRepository
from .working_sheet_repository import WorkingSheetRepository

__all__ = [
    "BatchRepository",
    "ConsumptionEntryRepository",
    "WorkingSheetRepository",
]
