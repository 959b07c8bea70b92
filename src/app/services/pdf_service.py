"""PDF Generation Service Interface

Defines the contract for rendering invoices to PDF documents.
"""

from abc import ABC, abstractmethod
from typing import List
from src.domain.invoice import Invoice
from src.domain.invoice_line import InvoiceLine


class PdfService(ABC):
    """
    Service interface for PDF generation

    Rendering is pure with respect to its input: the same invoice and
    lines always produce the same bytes.
    """

    @abstractmethod
    def render_invoice(self, invoice: Invoice, invoice_lines: List[InvoiceLine]) -> bytes:
        """
        Render an invoice PDF

        Args:
            invoice: Invoice entity with its computed total_amount
            invoice_lines: Line items in display order

        Returns:
            PDF document as bytes

        Raises:
            RenderError: total_amount is unset or there are no line items
        """
        pass


def attachment_filename(invoice: Invoice) -> str:
    """File name used for downloads and e-mail attachments"""
    return f"Invoice-{invoice.invoice_number}.pdf"
