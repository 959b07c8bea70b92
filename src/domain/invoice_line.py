"""Invoice Line Domain Entity

Tracks individual line items within an invoice.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, Integer, String
from src.domain.base import (
    AMOUNT_MAX_DIGITS,
    BaseModel,
    DecimalType,
    IdType,
    DESCRIPTION_MAX_LENGTH,
    PRICE_DECIMAL_PLACES,
    QUANTITY_DECIMAL_PLACES,
    RATE_DECIMAL_PLACES,
    RATE_MAX_DIGITS,
    UtcDateTime,
    utc_now,
)


class InvoiceLine(BaseModel, table=True):
    """
    Invoice Line - Individual line item within an invoice

    Domain Rules:
    - Each line item belongs to exactly one invoice and is never shared
    - position keeps the order the items were submitted in
    - Line totals are computed by src.domain.pricing, never stored
    """

    __tablename__ = "invoice_lines"
    __table_args__ = (
        Index('ix_invoice_lines_invoice_id', 'invoice_id'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique invoice line identifier (auto-increment)"
    )

    invoice_id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to Invoice"
    )

    position: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False),
        description="Zero-based order of the item on the invoice"
    )

    description: str = Field(
        sa_column=Column(String(DESCRIPTION_MAX_LENGTH), nullable=False),
        description="Line item description (e.g., 'Website design')"
    )

    quantity: Decimal = Field(
        sa_column=Column(DecimalType(AMOUNT_MAX_DIGITS, QUANTITY_DECIMAL_PLACES), nullable=False),
        description="Quantity (e.g., hours, units)"
    )

    unit_price: Decimal = Field(
        sa_column=Column(DecimalType(AMOUNT_MAX_DIGITS, PRICE_DECIMAL_PLACES), nullable=False),
        description="Price per unit (precision: 18,6)"
    )

    tax_rate: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(DecimalType(RATE_MAX_DIGITS, RATE_DECIMAL_PLACES), nullable=False),
        description="Tax rate in percent (0-100)"
    )

    discount_rate: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(DecimalType(RATE_MAX_DIGITS, RATE_DECIMAL_PLACES), nullable=False),
        description="Discount rate in percent (0-100)"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(UtcDateTime(), nullable=False),
        description="Line item creation timestamp"
    )

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "invoice_id": 1,
                "position": 0,
                "description": "Website design",
                "quantity": "1.000000",
                "unit_price": "100.000000",
                "tax_rate": "10.0000",
                "discount_rate": "5.0000",
                "created_at": "2024-02-01T00:00:00Z"
            }
        }
