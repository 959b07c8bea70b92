"""Invoice Domain Entity

Tracks issued invoices, their client snapshot and lifecycle status.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import String, Date, Text
from src.domain.base import (
    BaseModel,
    DecimalType,
    IdType,
    CLIENT_NAME_MAX_LENGTH,
    EMAIL_MAX_LENGTH,
    TOTAL_DECIMAL_PLACES,
    UtcDateTime,
    utc_now,
)


class InvoiceStatus(str, Enum):
    """Invoice status types"""
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"


class Invoice(BaseModel, table=True):
    """
    Invoice - Billing document issued by an owner to a client

    Domain Rules:
    - invoice_number is unique across all owners and never changes
    - total_amount is the sum of all invoice line totals and is recomputed
      whenever the lines change
    - Client fields are a snapshot taken at creation/update time
    - Status transitions: draft -> sent (after delivery) -> paid;
      overdue is set externally and is accepted in any operation
    """

    __tablename__ = "invoices"
    __table_args__ = (
        Index('ix_invoices_owner_id', 'owner_id'),
        Index('ix_invoices_status', 'status'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique invoice identifier (auto-increment)"
    )

    owner_id: str = Field(
        description="Issuing account ID"
    )

    invoice_number: str = Field(
        sa_column=Column(String(50), nullable=False, unique=True),
        description="Unique invoice number (e.g., INV-00001)"
    )

    issue_date: date = Field(
        default_factory=date.today,
        sa_column=Column(Date, nullable=False),
        description="Issue date (defaults to creation date)"
    )

    due_date: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
        description="Payment due date"
    )

    client_name: str = Field(
        sa_column=Column(String(CLIENT_NAME_MAX_LENGTH), nullable=False),
        description="Client name snapshot"
    )

    client_email: Optional[str] = Field(
        default=None,
        sa_column=Column(String(EMAIL_MAX_LENGTH), nullable=True),
        description="Client e-mail snapshot"
    )

    client_address: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Client postal address snapshot"
    )

    total_amount: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(DecimalType(48, TOTAL_DECIMAL_PLACES), nullable=False),
        description="Exact sum of line totals (scale: 18)"
    )

    status: InvoiceStatus = Field(
        default=InvoiceStatus.DRAFT,
        description="Invoice status (draft, sent, paid, overdue)"
    )

    sent_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(UtcDateTime(), nullable=True),
        description="Timestamp of the last successful delivery"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(UtcDateTime(), nullable=False),
        description="Invoice creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(UtcDateTime(), nullable=False),
        description="Last update timestamp"
    )

    def mark_sent(self, sent_at: Optional[datetime] = None) -> bool:
        """
        Record a successful delivery

        Only a draft moves to sent; sent, paid and overdue invoices keep
        their status. sent_at is updated either way.

        Returns:
            True if the status changed
        """
        self.sent_at = sent_at or utc_now()
        if self.status == InvoiceStatus.DRAFT:
            self.status = InvoiceStatus.SENT
            return True
        return False

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "owner_id": "user_42",
                "invoice_number": "INV-00001",
                "issue_date": "2024-02-01",
                "due_date": "2024-03-01",
                "client_name": "Acme Corp",
                "client_email": "billing@acme.com",
                "client_address": "1 Main Street, Springfield",
                "total_amount": "105.000000",
                "status": "draft",
                "sent_at": None,
                "created_at": "2024-02-01T00:00:00Z",
                "updated_at": "2024-02-01T00:00:00Z"
            }
        }
