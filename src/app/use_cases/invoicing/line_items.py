"""Boundary validation and conversion of submitted line items"""

from typing import List, Optional, Sequence
from src.domain.base import CLIENT_NAME_MAX_LENGTH, EMAIL_MAX_LENGTH
from src.domain.exceptions import InvoiceValidationError
from src.domain.invoice_line import InvoiceLine
from src.domain.pricing import to_decimal, validate_line_item
from .dtos import LineItemDTO


def validate_client_name(client_name: Optional[str]) -> None:
    if not client_name or not client_name.strip():
        raise InvoiceValidationError("Client name is required")
    if len(client_name.strip()) > CLIENT_NAME_MAX_LENGTH:
        raise InvoiceValidationError(
            f"Client name allows at most {CLIENT_NAME_MAX_LENGTH} characters"
        )


def validate_client_email(client_email: Optional[str]) -> None:
    # Syntax is checked when the invoice is sent
    if client_email and len(client_email) > EMAIL_MAX_LENGTH:
        raise InvoiceValidationError(
            f"Client e-mail allows at most {EMAIL_MAX_LENGTH} characters"
        )


def validate_items(items: Optional[Sequence[LineItemDTO]]) -> None:
    """
    Raises:
        InvoiceValidationError: no items, or any item fails validate_line_item
    """
    if not items:
        raise InvoiceValidationError("An invoice needs at least one line item")
    for index, item in enumerate(items):
        try:
            validate_line_item(item)
        except InvoiceValidationError as e:
            raise InvoiceValidationError(f"Line item {index + 1}: {e.message}", reason=e.reason) from e


def build_invoice_lines(items: Sequence[LineItemDTO]) -> List[InvoiceLine]:
    """Convert validated items into InvoiceLine entities, keeping their order"""
    return [
        InvoiceLine(
            position=position,
            description=item.description.strip(),
            quantity=to_decimal(item.quantity, "quantity"),
            unit_price=to_decimal(item.unit_price, "unit_price"),
            tax_rate=to_decimal(item.tax_rate or 0, "tax_rate"),
            discount_rate=to_decimal(item.discount_rate or 0, "discount_rate"),
        )
        for position, item in enumerate(items)
    ]
