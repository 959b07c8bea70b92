"""Invoice Counter Domain Entity

Single source of truth for invoice number allocation.
"""

from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import BigInteger, String
from src.domain.base import BaseModel, IdType


class InvoiceCounter(BaseModel, table=True):
    """
    Invoice Counter - Named monotonic counter

    Domain Rules:
    - One row per counter name
    - current_value only ever grows, by atomic increment
    - Allocated values are never handed back
    """

    __tablename__ = "invoice_counters"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique counter identifier (auto-increment)"
    )

    name: str = Field(
        sa_column=Column(String(50), nullable=False, unique=True),
        description="Counter name (e.g., 'invoice_number')"
    )

    current_value: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False),
        description="Last allocated value"
    )
