from .unit_of_work import UnitOfWork
from .pdf_service import PdfService, attachment_filename
from .mail_service import MailService, MailMessage, MailAttachment
from .invoice_number_allocator import InvoiceNumberAllocator, format_invoice_number

__all__ = [
    "UnitOfWork",
    "PdfService",
    "attachment_filename",
    "MailService",
    "MailMessage",
    "MailAttachment",
    "InvoiceNumberAllocator",
    "format_invoice_number",
]
