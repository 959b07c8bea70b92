from .base import BaseModel
from .invoice import Invoice, InvoiceStatus
from .invoice_line import InvoiceLine
from .invoice_counter import InvoiceCounter
from .exceptions import (
    InvoiceError,
    InvoiceValidationError,
    AllocationError,
    RenderError,
    DeliveryError,
)

__all__ = [
    "BaseModel",
    "Invoice",
    "InvoiceStatus",
    "InvoiceLine",
    "InvoiceCounter",
    "InvoiceError",
    "InvoiceValidationError",
    "AllocationError",
    "RenderError",
    "DeliveryError",
]
