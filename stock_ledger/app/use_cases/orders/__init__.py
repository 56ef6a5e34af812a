"""Order stock use cases"""
from .allocate_order_line import AllocateOrderLine
from .release_order_line import ReleaseOrderLine
from .update_order_line import UpdateOrderLine
from .release_order import ReleaseOrder
from .dtos import (
    OrderLineCommandDTO,
    UpdateOrderLineCommandDTO,
    OrderLineAllocationDTO,
    OrderLineReleaseDTO,
    OrderLineUpdateDTO,
    OrderReleaseDTO,
)

__all__ = [
    "AllocateOrderLine",
    "ReleaseOrderLine",
    "UpdateOrderLine",
    "ReleaseOrder",
    "OrderLineCommandDTO",
    "UpdateOrderLineCommandDTO",
    "OrderLineAllocationDTO",
    "OrderLineReleaseDTO",
    "OrderLineUpdateDTO",
    "OrderReleaseDTO",
]
