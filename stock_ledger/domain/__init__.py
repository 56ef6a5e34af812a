from .base import BaseModel
from .batch import Batch
from .consumption_entry import ConsumptionLedgerEntry
from .working_sheet import WorkingSheet

__all__ = [
    "BaseModel",
    "Batch",
    "ConsumptionLedgerEntry",
    "WorkingSheet",
]
