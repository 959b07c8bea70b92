"""Invoice API Routes

FastAPI routes for creating, maintaining, rendering and sending invoices.
Every route is scoped to the account given in the X-Owner-Id header.
"""

from typing import Optional
from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import Response
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.repositories.invoice_line_repository import SqlAlchemyInvoiceLineRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.invoice_number_allocator import InvoiceNumberAllocator
from src.app.services.mail_service import MailService
from src.app.services.pdf_service import PdfService
from src.app.use_cases.invoicing import (
    CreateInvoice,
    UpdateInvoice,
    GetInvoice,
    ListInvoices,
    DeleteInvoice,
    RenderInvoice,
    SendInvoice,
    LineItemDTO,
    CreateInvoiceCommandDTO,
    UpdateInvoiceCommandDTO,
    InvoiceResponseDTO,
    ListInvoicesResponseDTO,
    DeliveryResponseDTO,
)
from src.api.error import ClientError
from src.api.schemas.invoice_request import (
    CreateInvoiceRequestSchema,
    UpdateInvoiceRequestSchema,
    SendInvoiceRequestSchema,
)
from src.depends import (
    get_session,
    get_owner_id,
    get_invoice_number_allocator,
    get_pdf_service,
    get_mail_service,
)
from src.domain.invoice import InvoiceStatus

router = APIRouter(prefix="/invoices", tags=["Invoices"])

ERROR_EXAMPLE = {
    "application/json": {
        "example": {
            "error": {
                "code": "INVOICE_NOT_FOUND",
                "message": "Invoice with ID 123 not found",
                "reason": "Invoice does not exist or belongs to another owner",
                "retryable": False
            }
        }
    }
}


@router.post(
    "",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid client or line item data"},
        503: {"description": "Invoice number could not be allocated, safe to retry"},
    }
)
async def create_invoice(
    request: CreateInvoiceRequestSchema,
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session),
    allocator: InvoiceNumberAllocator = Depends(get_invoice_number_allocator),
):
    """
    Create an invoice.

    The invoice number (INV-00001, INV-00002, ...) and the total are assigned
    by the service. Status defaults to `draft`.

    **Returns:**
    - 201: Invoice created
    - 400: Validation failed (missing client name, no items, negative values)
    - 503: Number allocation failed
    """
    command = CreateInvoiceCommandDTO(
        owner_id=owner_id,
        **request.model_dump(exclude={"items"}),
        items=[LineItemDTO(**item.model_dump()) for item in request.items],
    )

    use_case = CreateInvoice(
        uow=SqlAlchemyUnitOfWork(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        invoice_line_repo=SqlAlchemyInvoiceLineRepository(session),
        allocator=allocator,
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "",
    response_model=ListInvoicesResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_invoices(
    status_filter: Optional[InvoiceStatus] = Query(default=None, alias="status"),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session),
):
    """
    List the caller's invoices, newest issue date first.

    **Query parameters:**
    - `status` (optional): draft, sent, paid or overdue
    - `limit` (optional): Page size, 1-100 (default 20)
    - `offset` (optional): Rows to skip (default 0)
    """
    use_case = ListInvoices(SqlAlchemyInvoiceRepository(session))
    result = await use_case.execute(owner_id, status=status_filter, limit=limit, offset=offset)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/{invoice_id}",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={404: {"description": "Invoice not found", "content": ERROR_EXAMPLE}}
)
async def get_invoice(
    invoice_id: int,
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session),
):
    """Get one invoice with its line items and computed amounts."""
    use_case = GetInvoice(
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyInvoiceLineRepository(session),
    )
    result = await use_case.execute(invoice_id, owner_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.put(
    "/{invoice_id}",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={404: {"description": "Invoice not found", "content": ERROR_EXAMPLE}}
)
async def update_invoice(
    invoice_id: int,
    request: UpdateInvoiceRequestSchema,
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session),
):
    """
    Update an invoice.

    Only fields present in the body are changed. When `items` is given the
    line items are replaced. The total is always recomputed; the invoice
    number never changes.
    """
    changes = request.model_dump(exclude_unset=True, exclude={"items"})
    if "items" in request.model_fields_set:
        changes["items"] = (
            [LineItemDTO(**item.model_dump()) for item in request.items]
            if request.items is not None
            else None
        )
    command = UpdateInvoiceCommandDTO(invoice_id=invoice_id, owner_id=owner_id, **changes)

    use_case = UpdateInvoice(
        uow=SqlAlchemyUnitOfWork(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        invoice_line_repo=SqlAlchemyInvoiceLineRepository(session),
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.delete(
    "/{invoice_id}",
    status_code=status.HTTP_200_OK,
    responses={404: {"description": "Invoice not found", "content": ERROR_EXAMPLE}}
)
async def delete_invoice(
    invoice_id: int,
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session),
):
    """Delete an invoice and its line items. The number is not reused."""
    use_case = DeleteInvoice(SqlAlchemyUnitOfWork(session), SqlAlchemyInvoiceRepository(session))
    result = await use_case.execute(invoice_id, owner_id)

    if result.is_err():
        raise ClientError(result.error)

    return {"invoice_id": invoice_id, "invoice_number": result.value, "deleted": True}


@router.get(
    "/{invoice_id}/pdf",
    responses={
        200: {
            "content": {"application/pdf": {}},
            "description": "PDF document"
        },
        404: {"description": "Invoice not found", "content": ERROR_EXAMPLE},
        422: {"description": "Invoice data cannot be rendered"},
    }
)
async def download_invoice_pdf(
    invoice_id: int,
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session),
    pdf_service: PdfService = Depends(get_pdf_service),
):
    """
    Download the invoice as a PDF file.

    The document is rendered from the invoice's current state on every call.
    """
    use_case = RenderInvoice(
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyInvoiceLineRepository(session),
        pdf_service,
    )
    result = await use_case.execute(invoice_id, owner_id)

    if result.is_err():
        raise ClientError(result.error)

    rendered = result.value
    return Response(
        content=rendered.content,
        media_type=rendered.content_type,
        headers={"Content-Disposition": f'attachment; filename="{rendered.filename}"'},
    )


@router.post(
    "/{invoice_id}/send",
    response_model=DeliveryResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        400: {"description": "Recipient missing or malformed"},
        404: {"description": "Invoice not found", "content": ERROR_EXAMPLE},
        422: {"description": "Invoice data cannot be rendered, nothing was sent"},
        502: {"description": "Mail transport failed, safe to retry"},
    }
)
async def send_invoice(
    invoice_id: int,
    request: Optional[SendInvoiceRequestSchema] = Body(default=None),
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session),
    pdf_service: PdfService = Depends(get_pdf_service),
    mail_service: MailService = Depends(get_mail_service),
):
    """
    E-mail the invoice PDF.

    Without a `recipient` in the body the client's e-mail is used. A draft
    invoice becomes `sent` once the relay accepts the message.
    """
    use_case = SendInvoice(
        uow=SqlAlchemyUnitOfWork(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        invoice_line_repo=SqlAlchemyInvoiceLineRepository(session),
        pdf_service=pdf_service,
        mail_service=mail_service,
        currency_symbol=ApplicationConfig.CURRENCY_SYMBOL,
    )
    recipient = request.recipient if request else None
    result = await use_case.execute(invoice_id, owner_id, recipient=recipient)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
