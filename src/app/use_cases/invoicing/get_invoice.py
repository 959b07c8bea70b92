"""GetInvoice Use Case

Retrieves a single invoice with its line items.
"""

from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from .dtos import InvoiceResponseDTO, build_invoice_response
from .errors import invoice_not_found


class GetInvoice:
    """Use Case: Get an owner's invoice by ID"""

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        invoice_line_repo: InvoiceLineRepository,
    ):
        self.invoice_repo = invoice_repo
        self.invoice_line_repo = invoice_line_repo

    async def execute(self, invoice_id: int, owner_id: str) -> Result[InvoiceResponseDTO]:
        try:
            invoice = await self.invoice_repo.get_by_id(invoice_id, owner_id)
            if not invoice:
                return Return.err(invoice_not_found(invoice_id))

            lines = await self.invoice_line_repo.get_by_invoice_id(invoice.id)
            return Return.ok(build_invoice_response(invoice, lines))

        except Exception as e:
            return Return.err(
                Error(
                    code="GET_INVOICE_FAILED",
                    message="Failed to retrieve invoice",
                    reason=str(e),
                )
            )
