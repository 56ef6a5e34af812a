"""Data Transfer Objects for Order Stock Use Cases"""

from typing import Optional
from pydantic import BaseModel, Field
from stock_ledger.app.use_cases.ledger.dtos import ConsumeResultDTO, RestoreResultDTO


class OrderLineCommandDTO(BaseModel):
    """
    Command DTO for allocating or releasing one order line

    Used as input to AllocateOrderLine and ReleaseOrderLine.
    """

    order_id: int = Field(
        ...,
        description="Order identifier"
    )

    product_code: str = Field(
        ...,
        min_length=1,
        description="Product code of the order line"
    )

    quantity: int = Field(
        ...,
        gt=0,
        description="Quantity to allocate or release (must be > 0)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "order_id": 42,
                "product_code": "CHAT-MARG-2015",
                "quantity": 6,
            }
        }


class UpdateOrderLineCommandDTO(BaseModel):
    """
    Command DTO for changing the quantity of an order line

    A line being created has old_quantity=0; a line being removed has new_quantity=0.
    """

    order_id: int = Field(..., description="Order identifier")
    product_code: str = Field(..., min_length=1, description="Product code of the order line")
    old_quantity: int = Field(..., ge=0, description="Quantity currently on the line")
    new_quantity: int = Field(..., ge=0, description="Quantity after the edit")


class OrderLineAllocationDTO(BaseModel):
    """Response DTO for AllocateOrderLine"""

    order_id: int
    product_code: str
    quantity: int
    consumption: ConsumeResultDTO
    working_sheet_quantity: int = Field(
        ...,
        description="Sellable quantity left after the allocation"
    )


class OrderLineReleaseDTO(BaseModel):
    """Response DTO for ReleaseOrderLine"""

    order_id: int
    product_code: str
    quantity: int
    restoration: RestoreResultDTO
    working_sheet_quantity: Optional[int] = Field(
        default=None,
        description="Sellable quantity after the release (None if the product has no working sheet)"
    )


class OrderLineUpdateDTO(BaseModel):
    """
    Response DTO for UpdateOrderLine

    Exactly one of allocation/release is set when the quantity changed,
    neither when it did not.
    """

    order_id: int
    product_code: str
    old_quantity: int
    new_quantity: int
    allocation: Optional[OrderLineAllocationDTO] = None
    release: Optional[OrderLineReleaseDTO] = None


class OrderReleaseDTO(BaseModel):
    """Response DTO for ReleaseOrder"""

    order_id: int
    restorations: list[RestoreResultDTO] = Field(
        default_factory=list,
        description="One restoration per product found in the order's ledger"
    )
    restored_total: int = Field(..., description="Quantity given back across all products")
    entries_deleted: int = Field(..., description="Ledger entries left over and bulk-deleted")
