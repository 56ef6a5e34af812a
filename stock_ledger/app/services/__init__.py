from .unit_of_work import UnitOfWork
from .notification_service import NotificationService
from .product_locks import ProductLockRegistry

__all__ = [
    "UnitOfWork",
    "NotificationService",
    "ProductLockRegistry",
]
