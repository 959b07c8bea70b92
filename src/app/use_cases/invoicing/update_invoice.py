"""UpdateInvoice Use Case

Applies changes to an existing invoice and keeps its total consistent.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from src.domain.exceptions import InvoiceError
from src.domain.pricing import recompute_total
from .dtos import UpdateInvoiceCommandDTO, InvoiceResponseDTO, build_invoice_response
from .errors import error_from_exception, invoice_not_found
from .line_items import (
    build_invoice_lines,
    validate_client_email,
    validate_client_name,
    validate_items,
)

logger = logging.getLogger(__name__)


class UpdateInvoice:
    """
    Use Case: Update an invoice

    Business Rules:
    1. Invoice must exist and belong to the caller
    2. invoice_number is immutable
    3. Only explicitly provided fields change
    4. total_amount is recomputed from the resulting line items before
       every save, whether or not the items changed
    5. Any status may be set explicitly (e.g. sent -> paid, overdue)

    Flow:
    1. Retrieve invoice (owner-scoped)
    2. Validate and apply client / date / status changes
    3. Replace line items if provided
    4. Recompute total
    5. Save and commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        invoice_line_repo: InvoiceLineRepository,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.invoice_line_repo = invoice_line_repo

    async def execute(self, command: UpdateInvoiceCommandDTO) -> Result[InvoiceResponseDTO]:
        """
        Execute invoice update

        Args:
            command: UpdateInvoiceCommandDTO with the fields to change

        Returns:
            Result[InvoiceResponseDTO]: Updated invoice or error
            (INVOICE_NOT_FOUND, VALIDATION_FAILED, UPDATE_INVOICE_FAILED)
        """
        changes = command.model_fields_set

        try:
            # Step 1: Retrieve invoice
            invoice = await self.invoice_repo.get_by_id(command.invoice_id, command.owner_id)
            if not invoice:
                return Return.err(invoice_not_found(command.invoice_id))

            # Step 2: Apply scalar changes
            if "client_name" in changes:
                validate_client_name(command.client_name)
                invoice.client_name = command.client_name.strip()
            if "client_email" in changes:
                validate_client_email(command.client_email)
                invoice.client_email = command.client_email or None
            if "client_address" in changes:
                invoice.client_address = command.client_address or None
            if "issue_date" in changes and command.issue_date is not None:
                invoice.issue_date = command.issue_date
            if "due_date" in changes:
                invoice.due_date = command.due_date
            if "status" in changes and command.status is not None:
                invoice.status = command.status

            # Step 3: Replace line items
            if "items" in changes:
                validate_items(command.items)
                lines = await self.invoice_line_repo.replace_for_invoice(
                    invoice.id, build_invoice_lines(command.items)
                )
            else:
                lines = await self.invoice_line_repo.get_by_invoice_id(invoice.id)

            # Step 4: Recompute total
            previous_total = invoice.total_amount
            invoice.total_amount = recompute_total(lines)

            # Step 5: Save and commit
            updated_invoice = await self.invoice_repo.update(invoice)
            await self.uow.commit()

            logger.info(
                f"Updated invoice {updated_invoice.invoice_number}: "
                f"total {previous_total} -> {updated_invoice.total_amount}"
            )

            return Return.ok(build_invoice_response(updated_invoice, lines))

        except InvoiceError as e:
            await self.uow.rollback()
            return Return.err(error_from_exception(e))

        except Exception as e:
            await self.uow.rollback()
            logger.exception(f"Invoice update failed for invoice {command.invoice_id}")
            return Return.err(
                Error(
                    code="UPDATE_INVOICE_FAILED",
                    message="Failed to update invoice",
                    reason=str(e),
                )
            )
