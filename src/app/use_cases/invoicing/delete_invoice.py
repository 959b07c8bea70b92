"""DeleteInvoice Use Case

Removes an invoice and its line items.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from .errors import invoice_not_found

logger = logging.getLogger(__name__)


class DeleteInvoice:
    """
    Use Case: Delete an owner's invoice

    Nothing else references an invoice, so deletion is a plain removal.
    Its number is not reused.
    """

    def __init__(self, uow: UnitOfWork, invoice_repo: InvoiceRepository):
        self.uow = uow
        self.invoice_repo = invoice_repo

    async def execute(self, invoice_id: int, owner_id: str) -> Result[str]:
        """
        Returns:
            Result[str]: the deleted invoice number, or INVOICE_NOT_FOUND
        """
        try:
            invoice = await self.invoice_repo.get_by_id(invoice_id, owner_id)
            if not invoice:
                return Return.err(invoice_not_found(invoice_id))

            invoice_number = invoice.invoice_number
            await self.invoice_repo.delete(invoice)
            await self.uow.commit()

            logger.info(f"Deleted invoice {invoice_number} for owner {owner_id}")
            return Return.ok(invoice_number)

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="DELETE_INVOICE_FAILED",
                    message="Failed to delete invoice",
                    reason=str(e),
                )
            )
