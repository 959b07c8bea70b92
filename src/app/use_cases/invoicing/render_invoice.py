"""RenderInvoice Use Case

Renders an invoice to PDF for download.
"""

from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from src.app.services.pdf_service import PdfService, attachment_filename
from src.domain.exceptions import RenderError
from .dtos import RenderedInvoiceDTO
from .errors import error_from_exception, invoice_not_found


class RenderInvoice:
    """
    Use Case: Render invoice PDF

    Business Rules:
    1. Invoice must exist and belong to the caller
    2. Invoice and lines are loaded together and rendered as one snapshot
    3. Rendering never modifies the invoice
    4. An invoice without items or without a total fails with RENDER_FAILED

    Flow:
    1. Retrieve invoice
    2. Retrieve line items
    3. Render PDF
    4. Return bytes with attachment file name
    """

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        invoice_line_repo: InvoiceLineRepository,
        pdf_service: PdfService,
    ):
        self.invoice_repo = invoice_repo
        self.invoice_line_repo = invoice_line_repo
        self.pdf_service = pdf_service

    async def execute(self, invoice_id: int, owner_id: str) -> Result[RenderedInvoiceDTO]:
        """
        Execute invoice rendering

        Args:
            invoice_id: Invoice ID
            owner_id: Owning account ID

        Returns:
            Result[RenderedInvoiceDTO]: PDF bytes or error
        """
        try:
            # Step 1: Retrieve invoice
            invoice = await self.invoice_repo.get_by_id(invoice_id, owner_id)
            if not invoice:
                return Return.err(invoice_not_found(invoice_id))

            # Step 2: Retrieve line items
            invoice_lines = await self.invoice_line_repo.get_by_invoice_id(invoice.id)

            # Step 3: Render PDF
            pdf_bytes = self.pdf_service.render_invoice(invoice, invoice_lines)

            # Step 4: Build response
            return Return.ok(
                RenderedInvoiceDTO(
                    invoice_id=invoice.id,
                    invoice_number=invoice.invoice_number,
                    filename=attachment_filename(invoice),
                    content=pdf_bytes,
                )
            )

        except RenderError as e:
            return Return.err(error_from_exception(e))

        except Exception as e:
            return Return.err(
                Error(
                    code="RENDER_INVOICE_FAILED",
                    message="Failed to render invoice",
                    reason=str(e),
                )
            )
