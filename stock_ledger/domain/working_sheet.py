"""Working Sheet Domain Entity

Aggregate sellable quantity per product, checked before any order
consumes stock. It can differ from the sum of batch remainders
(sample stock stays in batches but is not sellable).
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import DateTime, Integer, String
from stock_ledger.domain.base import BaseModel, IdType


class WorkingSheet(BaseModel, table=True):
    """Working Sheet - sellable quantity of one product"""

    __tablename__ = "working_sheets"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )

    product_code: str = Field(
        sa_column=Column(String(64), nullable=False, unique=True, index=True),
        description="Product code (one working sheet row per product)"
    )

    product_name: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
    )

    quantity: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Sellable quantity"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=False), nullable=False),
        description="Last quantity change"
    )
