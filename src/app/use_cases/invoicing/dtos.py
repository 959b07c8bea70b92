"""Data Transfer Objects for Invoicing Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field

from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.invoice_line import InvoiceLine
from src.domain.pricing import compute_line


class LineItemDTO(BaseModel):
    """
    Line item as submitted by the caller

    Range checks happen in the use case (validate_line_item) so every
    caller gets the same VALIDATION_FAILED error.
    """

    description: str = Field(
        ...,
        description="What is being billed"
    )

    quantity: Decimal = Field(
        ...,
        description="Quantity (>= 0)"
    )

    unit_price: Decimal = Field(
        ...,
        description="Price per unit (>= 0)"
    )

    tax_rate: Decimal = Field(
        default=Decimal("0"),
        description="Tax rate in percent (0-100)"
    )

    discount_rate: Decimal = Field(
        default=Decimal("0"),
        description="Discount rate in percent (0-100)"
    )


class CreateInvoiceCommandDTO(BaseModel):
    """
    Command DTO for creating an invoice

    Used as input to CreateInvoice use case.
    """

    owner_id: str = Field(
        ...,
        description="Issuing account ID"
    )

    client_name: str = Field(
        ...,
        description="Client name (required)"
    )

    client_email: Optional[str] = Field(
        default=None,
        description="Client e-mail address"
    )

    client_address: Optional[str] = Field(
        default=None,
        description="Client postal address"
    )

    items: List[LineItemDTO] = Field(
        default_factory=list,
        description="Line items in display order (at least one)"
    )

    issue_date: Optional[date] = Field(
        default=None,
        description="Issue date (defaults to today)"
    )

    due_date: Optional[date] = Field(
        default=None,
        description="Payment due date"
    )

    status: Optional[InvoiceStatus] = Field(
        default=None,
        description="Initial status (defaults to draft)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "owner_id": "user_42",
                "client_name": "Acme Corp",
                "client_email": "billing@acme.com",
                "client_address": "1 Main Street, Springfield",
                "items": [
                    {
                        "description": "Website design",
                        "quantity": "1",
                        "unit_price": "100.00",
                        "tax_rate": "10",
                        "discount_rate": "5"
                    }
                ],
                "due_date": "2024-03-01"
            }
        }


class UpdateInvoiceCommandDTO(BaseModel):
    """
    Command DTO for updating an invoice

    Only fields that were explicitly set are applied (model_fields_set), so
    due_date=None clears the due date while an omitted due_date keeps it.
    The invoice number can never be changed.
    """

    invoice_id: int
    owner_id: str
    client_name: Optional[str] = None
    client_email: Optional[str] = None
    client_address: Optional[str] = None
    items: Optional[List[LineItemDTO]] = None
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    status: Optional[InvoiceStatus] = None


class LineItemResponseDTO(BaseModel):
    """Line item with its computed amounts"""

    position: int
    description: str
    quantity: Decimal
    unit_price: Decimal
    tax_rate: Decimal
    discount_rate: Decimal
    subtotal: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    line_total: Decimal


class InvoiceResponseDTO(BaseModel):
    """
    Response DTO for a single invoice

    Returned from create, get and update use cases.
    """

    invoice_id: int = Field(..., description="Invoice ID")
    owner_id: str = Field(..., description="Issuing account ID")
    invoice_number: str = Field(..., description="Unique invoice number")
    issue_date: date = Field(..., description="Issue date")
    due_date: Optional[date] = Field(default=None, description="Payment due date")
    client_name: str = Field(..., description="Client name")
    client_email: Optional[str] = Field(default=None, description="Client e-mail")
    client_address: Optional[str] = Field(default=None, description="Client address")
    status: str = Field(..., description="Invoice status")
    total_amount: Decimal = Field(..., description="Sum of line totals")
    line_items: List[LineItemResponseDTO] = Field(default_factory=list)
    sent_at: Optional[datetime] = Field(default=None, description="Last successful delivery")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


class InvoiceSummaryDTO(BaseModel):
    """Invoice without line items, used in listings"""

    invoice_id: int
    invoice_number: str
    issue_date: date
    due_date: Optional[date] = None
    client_name: str
    status: str
    total_amount: Decimal


class ListInvoicesResponseDTO(BaseModel):
    """Response DTO for listing an owner's invoices"""

    invoices: List[InvoiceSummaryDTO]
    limit: int
    offset: int


class RenderedInvoiceDTO(BaseModel):
    """Rendered invoice document"""

    invoice_id: int
    invoice_number: str
    filename: str
    content_type: str = "application/pdf"
    content: bytes


class DeliveryResponseDTO(BaseModel):
    """
    Outcome of a successful delivery

    status_recorded is False when the mail went out but the status update
    could not be saved; the delivery itself must not be retried.
    """

    invoice_id: int
    invoice_number: str
    recipient: str
    outcome: str = "delivered"
    message_id: str
    status: str
    status_recorded: bool = True
    sent_at: Optional[datetime] = None


def build_line_item_response(line: InvoiceLine) -> LineItemResponseDTO:
    amounts = compute_line(line)
    return LineItemResponseDTO(
        position=line.position,
        description=line.description,
        quantity=line.quantity,
        unit_price=line.unit_price,
        tax_rate=line.tax_rate,
        discount_rate=line.discount_rate,
        subtotal=amounts.subtotal,
        tax_amount=amounts.tax_amount,
        discount_amount=amounts.discount_amount,
        line_total=amounts.line_total,
    )


def build_invoice_response(invoice: Invoice, lines: List[InvoiceLine]) -> InvoiceResponseDTO:
    return InvoiceResponseDTO(
        invoice_id=invoice.id,
        owner_id=invoice.owner_id,
        invoice_number=invoice.invoice_number,
        issue_date=invoice.issue_date,
        due_date=invoice.due_date,
        client_name=invoice.client_name,
        client_email=invoice.client_email,
        client_address=invoice.client_address,
        status=invoice.status.value,
        total_amount=invoice.total_amount,
        line_items=[build_line_item_response(line) for line in lines],
        sent_at=invoice.sent_at,
        created_at=invoice.created_at,
        updated_at=invoice.updated_at,
    )


def build_invoice_summary(invoice: Invoice) -> InvoiceSummaryDTO:
    return InvoiceSummaryDTO(
        invoice_id=invoice.id,
        invoice_number=invoice.invoice_number,
        issue_date=invoice.issue_date,
        due_date=invoice.due_date,
        client_name=invoice.client_name,
        status=invoice.status.value,
        total_amount=invoice.total_amount,
    )
