"""Invoicing use cases"""
from .create_invoice import CreateInvoice
from .update_invoice import UpdateInvoice
from .get_invoice import GetInvoice
from .list_invoices import ListInvoices
from .delete_invoice import DeleteInvoice
from .render_invoice import RenderInvoice
from .send_invoice import SendInvoice, normalize_recipient
from .dtos import (
    LineItemDTO,
    CreateInvoiceCommandDTO,
    UpdateInvoiceCommandDTO,
    LineItemResponseDTO,
    InvoiceResponseDTO,
    InvoiceSummaryDTO,
    ListInvoicesResponseDTO,
    RenderedInvoiceDTO,
    DeliveryResponseDTO,
)

__all__ = [
    "CreateInvoice",
    "UpdateInvoice",
    "GetInvoice",
    "ListInvoices",
    "DeleteInvoice",
    "RenderInvoice",
    "SendInvoice",
    "normalize_recipient",
    "LineItemDTO",
    "CreateInvoiceCommandDTO",
    "UpdateInvoiceCommandDTO",
    "LineItemResponseDTO",
    "InvoiceResponseDTO",
    "InvoiceSummaryDTO",
    "ListInvoicesResponseDTO",
    "RenderedInvoiceDTO",
    "DeliveryResponseDTO",
]
