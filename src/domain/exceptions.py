"""Invoice Domain Exceptions

Raised by the pricing engine, number allocator, renderer and mail transport.
Use cases translate them into Result errors with stable codes.
"""


class InvoiceError(Exception):
    """Base class for invoice domain failures"""

    code = "INVOICE_ERROR"
    retryable = False

    def __init__(self, message: str, reason: str = None):
        super().__init__(message)
        self.message = message
        self.reason = reason


class InvoiceValidationError(InvoiceError):
    """Malformed line item, missing client name or empty item list"""

    code = "VALIDATION_FAILED"
    retryable = False


class AllocationError(InvoiceError):
    """Invoice counter store unreachable or the increment was aborted"""

    code = "ALLOCATION_FAILED"
    retryable = True


class RenderError(InvoiceError):
    """Invoice cannot be rendered (no computed total or no line items)"""

    code = "RENDER_FAILED"
    retryable = False


class DeliveryError(InvoiceError):
    """
    Delivery did not complete

    retryable is True for transport failures (relay unreachable, rejected
    credentials, refused recipient, timeout) and False when the recipient
    address itself is unusable.
    """

    code = "DELIVERY_FAILED"

    def __init__(self, message: str, reason: str = None, retryable: bool = True):
        super().__init__(message, reason)
        self.retryable = retryable
