"""Request schemas for Invoice API

Pydantic models for validating incoming HTTP requests.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from src.domain.base import (
    AMOUNT_MAX_DIGITS,
    CLIENT_NAME_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    EMAIL_MAX_LENGTH,
    PRICE_DECIMAL_PLACES,
    QUANTITY_DECIMAL_PLACES,
    RATE_DECIMAL_PLACES,
    RATE_MAX_DIGITS,
)
from src.domain.invoice import InvoiceStatus


class LineItemSchema(BaseModel):
    """Single billable line"""

    description: str = Field(
        ...,
        min_length=1,
        max_length=DESCRIPTION_MAX_LENGTH,
        description="What is being billed (required, non-empty)"
    )

    quantity: Decimal = Field(
        ...,
        ge=0,
        max_digits=AMOUNT_MAX_DIGITS,
        decimal_places=QUANTITY_DECIMAL_PLACES,
        description="Quantity (must be >= 0, up to 6 decimal places)"
    )

    unit_price: Decimal = Field(
        ...,
        ge=0,
        max_digits=AMOUNT_MAX_DIGITS,
        decimal_places=PRICE_DECIMAL_PLACES,
        description="Price per unit (must be >= 0, up to 6 decimal places)"
    )

    tax_rate: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        le=100,
        max_digits=RATE_MAX_DIGITS,
        decimal_places=RATE_DECIMAL_PLACES,
        description="Tax rate in percent (0-100, up to 4 decimal places)"
    )

    discount_rate: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        le=100,
        max_digits=RATE_MAX_DIGITS,
        decimal_places=RATE_DECIMAL_PLACES,
        description="Discount rate in percent (0-100, up to 4 decimal places)"
    )

    @field_validator("quantity", "unit_price", "tax_rate", "discount_rate")
    @classmethod
    def validate_finite(cls, v):
        """Reject NaN and Infinity"""
        if not v.is_finite():
            raise ValueError("Value must be a finite number")
        return v


class CreateInvoiceRequestSchema(BaseModel):
    """
    Request schema for creating an invoice

    Used for POST /invoices endpoint. The owner comes from the X-Owner-Id
    header, the invoice number and total are assigned by the service.
    """

    client_name: str = Field(
        ...,
        min_length=1,
        max_length=CLIENT_NAME_MAX_LENGTH,
        description="Client name (required, non-empty)"
    )

    client_email: Optional[str] = Field(
        default=None,
        max_length=EMAIL_MAX_LENGTH,
        description="Client e-mail, used as default delivery recipient"
    )

    client_address: Optional[str] = Field(
        default=None,
        description="Client postal address (multi-line)"
    )

    items: List[LineItemSchema] = Field(
        ...,
        min_length=1,
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
                "client_name": "Acme Corp",
                "client_email": "billing@acme.com",
                "client_address": "1 Main Street\nSpringfield",
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


class UpdateInvoiceRequestSchema(BaseModel):
    """
    Request schema for updating an invoice

    Used for PUT /invoices/{invoice_id}. Omitted fields are left unchanged;
    an explicit null clears optional fields such as due_date.
    """

    client_name: Optional[str] = Field(
        default=None, min_length=1, max_length=CLIENT_NAME_MAX_LENGTH
    )
    client_email: Optional[str] = Field(default=None, max_length=EMAIL_MAX_LENGTH)
    client_address: Optional[str] = None
    items: Optional[List[LineItemSchema]] = Field(default=None, min_length=1)
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    status: Optional[InvoiceStatus] = None


class SendInvoiceRequestSchema(BaseModel):
    """
    Request schema for sending an invoice

    Used for POST /invoices/{invoice_id}/send. Without a recipient the
    invoice's client e-mail is used.
    """

    recipient: Optional[str] = Field(
        default=None,
        description="Recipient e-mail address (defaults to client e-mail)"
    )
