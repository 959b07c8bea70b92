"""Error helpers for invoicing use cases"""

from libs.result import Error
from src.domain.exceptions import InvoiceError

INVOICE_NOT_FOUND = "INVOICE_NOT_FOUND"


def error_from_exception(exc: InvoiceError) -> Error:
    """Translate a domain exception into a Result error"""
    return Error(
        code=exc.code,
        message=exc.message,
        reason=exc.reason,
        retryable=exc.retryable,
    )


def invoice_not_found(invoice_id: int) -> Error:
    return Error(
        code=INVOICE_NOT_FOUND,
        message=f"Invoice with ID {invoice_id} not found",
        reason="Invoice does not exist or belongs to another owner",
    )
