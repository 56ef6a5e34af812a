"""Batch Domain Entity

One row per physical receipt of a product. Batches are created by the
receipt import and only their remaining quantity changes afterwards.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, DateTime, Integer, Numeric, String
from stock_ledger.domain.base import BaseModel, IdType


class Batch(BaseModel, table=True):
    """
    Batch - A receipt of stock for one product code

    Domain Rules:
    - product_code is not unique (several receipts per product)
    - received_quantity and unit_cost are fixed at receipt time
    - 0 <= remaining_quantity <= received_quantity
    - remaining_quantity is mutated only by the BatchLedger
    - FIFO order is received_at ascending, then id ascending
    """

    __tablename__ = "batches"
    __table_args__ = (
        CheckConstraint('remaining_quantity >= 0', name='remaining_non_negative'),
        CheckConstraint('remaining_quantity <= received_quantity', name='remaining_within_received'),
        Index('ix_batches_product_fifo', 'product_code', 'received_at', 'id'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique batch identifier (auto-increment)"
    )

    product_code: str = Field(
        sa_column=Column(String(64), nullable=False, index=True),
        description="Product code (shared by all batches of the product)"
    )

    product_name: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Product name as printed on the receipt"
    )

    receipt_id: Optional[int] = Field(
        default=None,
        description="Receipt this batch was imported from"
    )

    received_quantity: int = Field(
        sa_column=Column(Integer, nullable=False),
        description="Quantity received (immutable)"
    )

    remaining_quantity: int = Field(
        sa_column=Column(Integer, nullable=False),
        description="Quantity still available in this batch"
    )

    unit_cost: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Purchase cost per unit (precision: 18,6)"
    )

    received_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=False), nullable=False),
        description="Receipt timestamp (FIFO ordering key)"
    )

    @property
    def consumed_quantity(self) -> int:
        return self.received_quantity - self.remaining_quantity
