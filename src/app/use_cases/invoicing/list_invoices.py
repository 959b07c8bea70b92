"""ListInvoices Use Case

Lists an owner's invoices, newest issue date first.
"""

from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.invoice import InvoiceStatus
from .dtos import ListInvoicesResponseDTO, build_invoice_summary


class ListInvoices:
    """
    Use Case: List invoices for an owner

    Business Rules:
    1. Only the owner's invoices are returned
    2. Optional status filter
    3. Pagination via limit/offset (limit capped at 100)
    """

    MAX_LIMIT = 100

    def __init__(self, invoice_repo: InvoiceRepository):
        self.invoice_repo = invoice_repo

    async def execute(
        self,
        owner_id: str,
        status: Optional[InvoiceStatus] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Result[ListInvoicesResponseDTO]:
        limit = max(1, min(limit, self.MAX_LIMIT))
        offset = max(0, offset)

        try:
            invoices = await self.invoice_repo.list_by_owner(
                owner_id, status=status, limit=limit, offset=offset
            )
            return Return.ok(
                ListInvoicesResponseDTO(
                    invoices=[build_invoice_summary(invoice) for invoice in invoices],
                    limit=limit,
                    offset=offset,
                )
            )

        except Exception as e:
            return Return.err(
                Error(
                    code="LIST_INVOICES_FAILED",
                    message="Failed to list invoices",
                    reason=str(e),
                )
            )
