"""Consumption Ledger Entry Domain Entity

Durable record of how much of a batch was drawn for an order.
Restoration walks these rows to give stock back to the right batches.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, CheckConstraint, DateTime, ForeignKey, Integer, Numeric, String
from stock_ledger.domain.base import BaseModel, IdType


class ConsumptionLedgerEntry(BaseModel, table=True):
    """
    Consumption Ledger Entry - One (order, batch) allocation

    Domain Rules:
    - Created only by BatchLedger.consume, changed only by BatchLedger.restore
    - quantity is always > 0; an entry restored to zero is deleted
    - unit_price_at_consumption is a snapshot of Batch.unit_cost, never re-read
    - One order/product pair may own several entries (one per batch touched)
    """

    __tablename__ = "order_consumptions"
    __table_args__ = (
        CheckConstraint('quantity > 0', name='consumption_quantity_positive'),
        Index('ix_order_consumptions_order_product', 'order_id', 'product_code'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique entry identifier (auto-increment)"
    )

    order_id: int = Field(
        sa_column=Column(BigInteger, nullable=False, index=True),
        description="Order the stock was consumed for (owned by the order service)"
    )

    product_code: str = Field(
        sa_column=Column(String(64), nullable=False, index=True),
        description="Product code of the consumed batch"
    )

    batch_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("batches.id"), nullable=False),
        description="Batch the quantity was drawn from"
    )

    quantity: int = Field(
        sa_column=Column(Integer, nullable=False),
        description="Quantity drawn from the batch (> 0)"
    )

    unit_price_at_consumption: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Batch unit cost at consumption time"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=False), nullable=False),
        description="Consumption timestamp"
    )
