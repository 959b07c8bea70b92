from .invoice_repository import InvoiceRepository
from .invoice_line_repository import InvoiceLineRepository
from .invoice_counter_repository import InvoiceCounterRepository

__all__ = [
    "InvoiceRepository",
    "InvoiceLineRepository",
    "InvoiceCounterRepository",
]
