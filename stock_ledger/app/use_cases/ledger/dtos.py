"""Data Transfer Objects for Ledger Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field


class ConsumeCommandDTO(BaseModel):
    """
    Command DTO for consuming stock for an order

    Used as input to ConsumeStock use case.
    """

    order_id: int = Field(
        ...,
        description="Order the stock is consumed for"
    )

    product_code: str = Field(
        ...,
        min_length=1,
        description="Product code to consume"
    )

    quantity: int = Field(
        ...,
        gt=0,
        description="Quantity to consume (must be > 0)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "order_id": 42,
                "product_code": "CHAT-MARG-2015",
                "quantity": 7,
            }
        }


class RestoreCommandDTO(BaseModel):
    """
    Command DTO for restoring stock consumed by an order

    Used as input to RestoreStock use case.
    """

    order_id: int = Field(
        ...,
        description="Order whose consumption is reversed"
    )

    product_code: str = Field(
        ...,
        min_length=1,
        description="Product code to restore"
    )

    quantity: int = Field(
        ...,
        gt=0,
        description="Quantity to restore (must be > 0)"
    )


class AllocationDTO(BaseModel):
    """Quantity taken from one batch during a consumption"""

    batch_id: int
    quantity: int
    unit_price_at_consumption: Decimal


class ConsumeResultDTO(BaseModel):
    """
    Response DTO for a FIFO consumption

    consumed_total + shortfall always equals requested_quantity.
    A nonzero shortfall is not an error; the caller decides what it means.
    """

    order_id: int = Field(..., description="Order the stock was consumed for")
    product_code: str = Field(..., description="Consumed product code")
    requested_quantity: int = Field(..., description="Quantity asked for")
    consumed_total: int = Field(..., description="Quantity actually drawn from batches")
    shortfall: int = Field(..., description="Quantity no batch could supply")
    allocations: list[AllocationDTO] = Field(
        default_factory=list,
        description="Per-batch allocations in FIFO order"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "order_id": 42,
                "product_code": "CHAT-MARG-2015",
                "requested_quantity": 7,
                "consumed_total": 7,
                "shortfall": 0,
                "allocations": [
                    {"batch_id": 1, "quantity": 5, "unit_price_at_consumption": "120.000000"},
                    {"batch_id": 2, "quantity": 2, "unit_price_at_consumption": "125.500000"},
                ],
            }
        }


class RestorationDTO(BaseModel):
    """Quantity given back to one batch during a restoration"""

    entry_id: int
    batch_id: int
    quantity: int
    entry_deleted: bool


class RestoreResultDTO(BaseModel):
    """
    Response DTO for a LIFO restoration

    restored_total + unaccounted always equals requested_quantity.
    entries_found is False when the order/product pair has no ledger trail.
    """

    order_id: int
    product_code: str
    requested_quantity: int
    restored_total: int
    unaccounted: int
    entries_found: bool
    restorations: list[RestorationDTO] = Field(default_factory=list)


class ConsumptionEntryDTO(BaseModel):
    """Ledger entry as returned by queries"""

    id: int
    order_id: int
    product_code: str
    batch_id: int
    quantity: int
    unit_price_at_consumption: Decimal
    created_at: datetime


class ListConsumptionsResponseDTO(BaseModel):
    """Response DTO for ListConsumptions use case"""

    entries: list[ConsumptionEntryDTO]
    total: int


class BatchDTO(BaseModel):
    """Batch as returned by queries"""

    id: int
    product_code: str
    product_name: Optional[str] = None
    received_quantity: int
    remaining_quantity: int
    unit_cost: Decimal
    received_at: datetime


class ProductStockDTO(BaseModel):
    """
    Response DTO for GetProductStock use case

    working_sheet_quantity is None when the product has no working sheet row.
    """

    product_code: str
    batches: list[BatchDTO]
    total_received: int
    total_remaining: int
    recorded_in_ledger: int
    working_sheet_quantity: Optional[int] = None


class BatchDiscrepancyDTO(BaseModel):
    """
    A product whose batches and ledger disagree

    consumed_by_batches is sum(received - remaining) over the batches,
    recorded_in_ledger is sum(quantity) over the ledger entries.
    """

    product_code: str = Field(..., description="Product code")
    consumed_by_batches: int = Field(..., description="Quantity missing from batches")
    recorded_in_ledger: int = Field(..., description="Quantity recorded in the ledger")
    discrepancy: int = Field(..., description="consumed_by_batches - recorded_in_ledger")


class ReconciliationResultDTO(BaseModel):
    """Response DTO for ReconcileBatches use case"""

    total_products_checked: int = Field(..., description="Number of product codes checked")
    discrepancies_found: int = Field(..., description="Number of products out of balance")
    discrepancies: list[BatchDiscrepancyDTO] = Field(default_factory=list)
    reconciliation_time: datetime = Field(..., description="When reconciliation started")
    execution_time_ms: int = Field(..., description="Reconciliation duration in milliseconds")
