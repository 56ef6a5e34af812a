"""Background workers for the batch ledger"""
from .batch_reconciler import BatchReconcilerWorker

__all__ = ["BatchReconcilerWorker"]
