"""Batch ledger use cases"""
from .batch_ledger import BatchLedger, LedgerIntegrityError
from .consume_stock import ConsumeStock
from .restore_stock import RestoreStock
from .list_consumptions import ListConsumptions
from .get_product_stock import GetProductStock
from .reconcile_batches import ReconcileBatches
from .dtos import (
    ConsumeCommandDTO,
    RestoreCommandDTO,
    AllocationDTO,
    ConsumeResultDTO,
    RestorationDTO,
    RestoreResultDTO,
    ConsumptionEntryDTO,
    ListConsumptionsResponseDTO,
    BatchDTO,
    ProductStockDTO,
    BatchDiscrepancyDTO,
    ReconciliationResultDTO,
)

__all__ = [
    "BatchLedger",
    "LedgerIntegrityError",
    "ConsumeStock",
    "RestoreStock",
    "ListConsumptions",
    "GetProductStock",
    "ReconcileBatches",
    "ConsumeCommandDTO",
    "RestoreCommandDTO",
    "AllocationDTO",
    "ConsumeResultDTO",
    "RestorationDTO",
    "RestoreResultDTO",
    "ConsumptionEntryDTO",
    "ListConsumptionsResponseDTO",
    "BatchDTO",
    "ProductStockDTO",
    "BatchDiscrepancyDTO",
    "ReconciliationResultDTO",
]
