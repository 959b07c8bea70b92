"""SendInvoice Use Case

Delivers the current rendering of an invoice to a recipient by e-mail.
"""

import logging
from html import escape
from typing import Optional
from email_validator import validate_email, EmailNotValidError
from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from src.app.services.mail_service import MailService, MailMessage, MailAttachment
from src.app.services.pdf_service import PdfService, attachment_filename
from src.app.services.unit_of_work import UnitOfWork
from src.domain.exceptions import DeliveryError, InvoiceError
from src.domain.invoice import Invoice
from src.domain.pricing import format_money
from .dtos import DeliveryResponseDTO
from .errors import error_from_exception, invoice_not_found

logger = logging.getLogger(__name__)


def normalize_recipient(
    recipient: Optional[str], missing_reason: str = "Recipient address is empty"
) -> str:
    """
    Validate a recipient address without contacting DNS

    Args:
        recipient: Address to check
        missing_reason: Error reason when the address is empty

    Raises:
        DeliveryError: address missing or malformed (not retryable)
    """
    if not recipient or not recipient.strip():
        raise DeliveryError(
            "Recipient e-mail address is required",
            reason=missing_reason,
            retryable=False,
        )
    try:
        result = validate_email(recipient.strip(), check_deliverability=False)
    except EmailNotValidError as e:
        raise DeliveryError(
            f"Recipient e-mail address is invalid: {recipient}",
            reason=str(e),
            retryable=False,
        ) from e
    return result.normalized


class SendInvoice:
    """
    Use Case: Send invoice by e-mail

    Business Rules:
    1. Recipient defaults to the invoice's client e-mail; a missing or
       malformed address fails before any transport call
    2. The attachment is rendered from the invoice's current state
    3. A render failure means nothing was sent (RENDER_FAILED, fix the data)
    4. A transport failure means an attempt was made (DELIVERY_FAILED,
       retryable without re-rendering); no retry happens here
    5. On success a draft invoice becomes sent; other statuses are kept

    Flow:
    1. Retrieve invoice and line items
    2. Resolve and validate recipient
    3. Render PDF
    4. Close the read transaction, then hand the message to the transport
    5. Record delivery on the invoice and commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        invoice_line_repo: InvoiceLineRepository,
        pdf_service: PdfService,
        mail_service: MailService,
        currency_symbol: str = "$",
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.invoice_line_repo = invoice_line_repo
        self.pdf_service = pdf_service
        self.mail_service = mail_service
        self.currency_symbol = currency_symbol

    async def execute(
        self, invoice_id: int, owner_id: str, recipient: Optional[str] = None
    ) -> Result[DeliveryResponseDTO]:
        """
        Execute invoice delivery

        Args:
            invoice_id: Invoice ID
            owner_id: Owning account ID
            recipient: Address to send to; None means the client e-mail

        Returns:
            Result[DeliveryResponseDTO]: delivered outcome or error
            (INVOICE_NOT_FOUND, DELIVERY_FAILED, RENDER_FAILED)
        """
        try:
            # Step 1: Retrieve invoice and line items as one snapshot
            invoice = await self.invoice_repo.get_by_id(invoice_id, owner_id)
            if not invoice:
                return Return.err(invoice_not_found(invoice_id))
            invoice_lines = await self.invoice_line_repo.get_by_invoice_id(invoice.id)

            # Step 2: Resolve and validate recipient
            if recipient is None:
                address = normalize_recipient(
                    invoice.client_email, missing_reason="Invoice has no client e-mail"
                )
            else:
                address = normalize_recipient(recipient)

            # Step 3: Render PDF
            pdf_bytes = self.pdf_service.render_invoice(invoice, invoice_lines)

            # Step 4: No lock or open transaction while waiting on the relay
            await self.uow.commit()
            message_id = await self.mail_service.send(self._build_message(invoice, address, pdf_bytes))

        except DeliveryError as e:
            await self.uow.rollback()
            logger.warning(f"Delivery of invoice {invoice_id} failed: {e.message} ({e.reason})")
            return Return.err(error_from_exception(e))

        except InvoiceError as e:
            await self.uow.rollback()
            return Return.err(error_from_exception(e))

        except Exception as e:
            await self.uow.rollback()
            logger.exception(f"Sending invoice {invoice_id} failed")
            return Return.err(
                Error(
                    code="SEND_INVOICE_FAILED",
                    message="Failed to send invoice",
                    reason=str(e),
                )
            )

        logger.info(f"Invoice {invoice.invoice_number} delivered to {address} ({message_id})")

        # Step 5: Record delivery. The mail is already out, so a failure here
        # only clears status_recorded. Rollback expires the entity; report copies.
        invoice_number = invoice.invoice_number
        status = invoice.status.value
        sent_at = None
        status_recorded = True
        try:
            invoice.mark_sent()
            invoice = await self.invoice_repo.update(invoice)
            await self.uow.commit()
            status = invoice.status.value
            sent_at = invoice.sent_at
        except Exception:
            await self.uow.rollback()
            status_recorded = False
            logger.exception(f"Could not record delivery of invoice {invoice_number}")

        return Return.ok(
            DeliveryResponseDTO(
                invoice_id=invoice_id,
                invoice_number=invoice_number,
                recipient=address,
                message_id=message_id,
                status=status,
                status_recorded=status_recorded,
                sent_at=sent_at,
            )
        )

    def _build_message(self, invoice: Invoice, recipient: str, pdf_bytes: bytes) -> MailMessage:
        total = format_money(invoice.total_amount, self.currency_symbol)
        due_date = invoice.due_date.strftime("%Y-%m-%d") if invoice.due_date else None
        lines = [
            f"Dear {invoice.client_name},",
            "",
            f"Please find attached invoice {invoice.invoice_number} for {total}.",
        ]
        if due_date:
            lines.append(f"Due date: {due_date}")
        lines.extend(["", "Thank you for your business!"])

        # Client-entered text is escaped in the HTML part
        html_parts = [
            f"<h2>Invoice {escape(invoice.invoice_number)}</h2>",
            f"<p>Dear {escape(invoice.client_name)},</p>",
            f"<p>Please find attached your invoice for {escape(total)}.</p>",
        ]
        if due_date:
            html_parts.append(f"<p>Due date: {due_date}</p>")
        html_parts.append("<p>Thank you for your business!</p>")

        return MailMessage(
            recipient=recipient,
            subject=f"Invoice {invoice.invoice_number}",
            text_body="\n".join(lines),
            html_body="\n".join(html_parts),
            attachments=[
                MailAttachment(
                    filename=attachment_filename(invoice),
                    content=pdf_bytes,
                    content_type="application/pdf",
                )
            ],
        )
