"""CreateInvoice Use Case

Creates a numbered, fully totaled invoice from client and line item data.
"""

import logging
from datetime import date
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.invoice_number_allocator import InvoiceNumberAllocator
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from src.domain.exceptions import InvoiceError
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.pricing import recompute_total
from .dtos import CreateInvoiceCommandDTO, InvoiceResponseDTO, build_invoice_response
from .errors import error_from_exception
from .line_items import (
    build_invoice_lines,
    validate_client_email,
    validate_client_name,
    validate_items,
)

logger = logging.getLogger(__name__)


class CreateInvoice:
    """
    Use Case: Create an invoice

    Business Rules:
    1. Client name and at least one valid line item are required
    2. Invoice number comes from the global allocator (INV-NNNNN)
    3. total_amount is computed from the line items, never supplied
    4. Status defaults to draft
    5. All or nothing: either the numbered, totaled invoice and its lines
       are committed, or nothing is

    Flow:
    1. Validate client name and line items
    2. Allocate invoice number
    3. Compute total
    4. Persist invoice and lines
    5. Commit transaction
    6. Return response
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        invoice_line_repo: InvoiceLineRepository,
        allocator: InvoiceNumberAllocator,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.invoice_line_repo = invoice_line_repo
        self.allocator = allocator

    async def execute(self, command: CreateInvoiceCommandDTO) -> Result[InvoiceResponseDTO]:
        """
        Execute invoice creation

        Args:
            command: CreateInvoiceCommandDTO with owner, client snapshot and items

        Returns:
            Result[InvoiceResponseDTO]: Success with invoice details or error
            (VALIDATION_FAILED, ALLOCATION_FAILED, CREATE_INVOICE_FAILED)
        """
        try:
            # Step 1: Validate at the boundary, before any number is consumed
            validate_client_name(command.client_name)
            validate_client_email(command.client_email)
            validate_items(command.items)

            # Step 2: Allocate invoice number
            invoice_number = await self.allocator.allocate()

            # Step 3: Compute total
            lines = build_invoice_lines(command.items)
            total_amount = recompute_total(lines)

            # Step 4: Persist invoice and lines
            invoice = Invoice(
                owner_id=command.owner_id,
                invoice_number=invoice_number,
                issue_date=command.issue_date or date.today(),
                due_date=command.due_date,
                client_name=command.client_name.strip(),
                client_email=command.client_email or None,
                client_address=command.client_address or None,
                total_amount=total_amount,
                status=command.status or InvoiceStatus.DRAFT,
            )

            created_invoice = await self.invoice_repo.create(invoice)
            created_lines = await self.invoice_line_repo.replace_for_invoice(
                created_invoice.id, lines
            )

            # Step 5: Commit transaction
            await self.uow.commit()

            logger.info(
                f"Created invoice {created_invoice.invoice_number} for owner "
                f"{created_invoice.owner_id} with total {total_amount}"
            )

            # Step 6: Build response
            return Return.ok(build_invoice_response(created_invoice, created_lines))

        except InvoiceError as e:
            await self.uow.rollback()
            logger.warning(f"Invoice creation rejected for owner {command.owner_id}: {e.message}")
            return Return.err(error_from_exception(e))

        except Exception as e:
            await self.uow.rollback()
            logger.exception(f"Invoice creation failed for owner {command.owner_id}")
            return Return.err(
                Error(
                    code="CREATE_INVOICE_FAILED",
                    message="Failed to create invoice",
                    reason=str(e),
                )
            )
