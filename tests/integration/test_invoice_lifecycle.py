"""Integration tests for invoice use cases with a real database

Tests cover:
- Create, update, list and delete with persisted line items
- Numbers are not reused after a failed or deleted invoice
- Rendering and sending a stored invoice
"""

import pytest
from datetime import date, timedelta
from decimal import Decimal

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.repositories.invoice_line_repository import SqlAlchemyInvoiceLineRepository
from src.adapter.services.pdf_service import ReportLabPdfService
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.invoicing import (
    CreateInvoice,
    UpdateInvoice,
    ListInvoices,
    DeleteInvoice,
    RenderInvoice,
    SendInvoice,
    CreateInvoiceCommandDTO,
    UpdateInvoiceCommandDTO,
    LineItemDTO,
)
from src.domain.exceptions import DeliveryError
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.invoice_line import InvoiceLine
from src.domain.pricing import recompute_total


def make_command(owner_id="user_42", client_name="Acme Corp", items=None, **kwargs):
    return CreateInvoiceCommandDTO(
        owner_id=owner_id,
        client_name=client_name,
        client_email="billing@acme.com",
        items=items
        if items is not None
        else [
            LineItemDTO(
                description="Website design",
                quantity=Decimal("1"),
                unit_price=Decimal("100"),
                tax_rate=Decimal("10"),
                discount_rate=Decimal("5"),
            )
        ],
        **kwargs,
    )


def make_create_use_case(session, allocator):
    return CreateInvoice(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyInvoiceLineRepository(session),
        allocator,
    )


@pytest.mark.asyncio
class TestInvoiceLifecycleIntegration:
    """Integration tests with real database"""

    async def test_end_to_end_invoice_creation(self, db_session: AsyncSession, allocator):
        # Act
        result = await make_create_use_case(db_session, allocator).execute(make_command())

        # Assert
        assert result.is_ok()
        response = result.value
        assert response.invoice_number == "INV-00001"
        assert response.total_amount == Decimal("105")
        assert response.status == "draft"

        # Verify database state
        invoice = await SqlAlchemyInvoiceRepository(db_session).get_by_id(response.invoice_id, "user_42")
        assert invoice is not None
        assert invoice.total_amount == Decimal("105")
        lines = await SqlAlchemyInvoiceLineRepository(db_session).get_by_invoice_id(invoice.id)
        assert [line.description for line in lines] == ["Website design"]

    async def test_failed_validation_consumes_no_number(self, db_session: AsyncSession, allocator):
        use_case = make_create_use_case(db_session, allocator)

        rejected = await use_case.execute(make_command(items=[]))
        accepted = await use_case.execute(make_command())

        assert rejected.error.code == "VALIDATION_FAILED"
        assert accepted.value.invoice_number == "INV-00001"

    async def test_failed_persist_skips_number(self, db_session: AsyncSession, allocator):
        """A number allocated for an invoice that was rolled back is never reused"""
        use_case = make_create_use_case(db_session, allocator)
        first = await use_case.execute(make_command())

        # Force a unique constraint violation on the second insert
        original_allocate = allocator.allocate

        async def duplicate_number():
            await original_allocate()
            return first.value.invoice_number

        allocator.allocate = duplicate_number
        failed = await use_case.execute(make_command())
        allocator.allocate = original_allocate

        third = await use_case.execute(make_command())

        assert failed.is_err()
        assert failed.error.code == "CREATE_INVOICE_FAILED"
        assert third.value.invoice_number == "INV-00003"

        invoices = (await db_session.execute(select(Invoice))).scalars().all()
        assert sorted(invoice.invoice_number for invoice in invoices) == ["INV-00001", "INV-00003"]

    async def test_update_items_recomputes_total(self, db_session: AsyncSession, allocator):
        created = await make_create_use_case(db_session, allocator).execute(
            make_command(items=[LineItemDTO(description="Consulting", quantity=Decimal("2"), unit_price=Decimal("50"))])
        )
        assert created.value.total_amount == Decimal("100")

        update = UpdateInvoice(
            SqlAlchemyUnitOfWork(db_session),
            SqlAlchemyInvoiceRepository(db_session),
            SqlAlchemyInvoiceLineRepository(db_session),
        )
        result = await update.execute(
            UpdateInvoiceCommandDTO(
                invoice_id=created.value.invoice_id,
                owner_id="user_42",
                items=[LineItemDTO(description="Consulting", quantity=Decimal("3"), unit_price=Decimal("50"))],
            )
        )

        assert result.is_ok()
        assert result.value.total_amount == Decimal("150")
        assert result.value.invoice_number == created.value.invoice_number

        lines = (await db_session.execute(select(InvoiceLine))).scalars().all()
        assert len(lines) == 1
        assert lines[0].quantity == Decimal("3")

    async def test_list_is_owner_scoped_and_filtered(self, db_session: AsyncSession, allocator):
        use_case = make_create_use_case(db_session, allocator)
        await use_case.execute(make_command(issue_date=date(2024, 1, 10)))
        await use_case.execute(make_command(issue_date=date(2024, 2, 10), status=InvoiceStatus.PAID))
        await use_case.execute(make_command(owner_id="someone_else"))

        list_use_case = ListInvoices(SqlAlchemyInvoiceRepository(db_session))
        everything = await list_use_case.execute("user_42")
        paid = await list_use_case.execute("user_42", status=InvoiceStatus.PAID)

        assert [i.invoice_number for i in everything.value.invoices] == ["INV-00002", "INV-00001"]
        assert [i.invoice_number for i in paid.value.invoices] == ["INV-00002"]

    async def test_delete_removes_lines_and_keeps_numbering(self, db_session: AsyncSession, allocator):
        use_case = make_create_use_case(db_session, allocator)
        created = await use_case.execute(make_command())

        deleted = await DeleteInvoice(
            SqlAlchemyUnitOfWork(db_session), SqlAlchemyInvoiceRepository(db_session)
        ).execute(created.value.invoice_id, "user_42")
        next_invoice = await use_case.execute(make_command())

        assert deleted.value == "INV-00001"
        assert next_invoice.value.invoice_number == "INV-00002"
        lines = (await db_session.execute(
            select(InvoiceLine).where(InvoiceLine.invoice_id == created.value.invoice_id)
        )).scalars().all()
        assert lines == []

    async def test_render_stored_invoice(self, db_session: AsyncSession, allocator):
        created = await make_create_use_case(db_session, allocator).execute(make_command())
        render = RenderInvoice(
            SqlAlchemyInvoiceRepository(db_session),
            SqlAlchemyInvoiceLineRepository(db_session),
            ReportLabPdfService(),
        )

        first = await render.execute(created.value.invoice_id, "user_42")
        second = await render.execute(created.value.invoice_id, "user_42")

        assert first.value.content.startswith(b"%PDF")
        assert first.value.content == second.value.content

    async def test_send_marks_invoice_sent(self, db_session: AsyncSession, allocator, mail_service):
        created = await make_create_use_case(db_session, allocator).execute(make_command())
        send = SendInvoice(
            SqlAlchemyUnitOfWork(db_session),
            SqlAlchemyInvoiceRepository(db_session),
            SqlAlchemyInvoiceLineRepository(db_session),
            ReportLabPdfService(),
            mail_service,
        )

        result = await send.execute(created.value.invoice_id, "user_42")

        assert result.is_ok()
        assert result.value.status == "sent"
        assert len(mail_service.sent) == 1
        assert mail_service.sent[0].attachments[0].content.startswith(b"%PDF")

        invoice = await SqlAlchemyInvoiceRepository(db_session).get_by_id(created.value.invoice_id, "user_42")
        assert invoice.status == InvoiceStatus.SENT
        assert invoice.sent_at is not None

    async def test_transport_failure_keeps_draft(self, db_session: AsyncSession, allocator, mail_service):
        created = await make_create_use_case(db_session, allocator).execute(make_command())
        mail_service.fail_with = DeliveryError("Mail relay unreachable or send failed", reason="refused")
        send = SendInvoice(
            SqlAlchemyUnitOfWork(db_session),
            SqlAlchemyInvoiceRepository(db_session),
            SqlAlchemyInvoiceLineRepository(db_session),
            ReportLabPdfService(),
            mail_service,
        )

        result = await send.execute(created.value.invoice_id, "user_42")

        assert result.error.code == "DELIVERY_FAILED"
        assert result.error.retryable is True
        invoice = await SqlAlchemyInvoiceRepository(db_session).get_by_id(created.value.invoice_id, "user_42")
        assert invoice.status == InvoiceStatus.DRAFT


@pytest.mark.asyncio
class TestStoredValuesIntegration:
    """Stored amounts and timestamps read back from a fresh session"""

    async def test_stored_total_matches_stored_lines(self, db_session: AsyncSession, session_factory, allocator):
        items = [
            LineItemDTO(
                description="Hours",
                quantity=Decimal("0.333333"),
                unit_price=Decimal("3"),
                tax_rate=Decimal("12.3456"),
            ),
            LineItemDTO(
                description="Micro fee",
                quantity=Decimal("1.000001"),
                unit_price=Decimal("0.000001"),
                tax_rate=Decimal("99.9999"),
                discount_rate=Decimal("33.3333"),
            ),
        ]
        created = await make_create_use_case(db_session, allocator).execute(make_command(items=items))
        assert created.is_ok()

        async with session_factory() as session:
            invoice = await SqlAlchemyInvoiceRepository(session).get_by_id(created.value.invoice_id, "user_42")
            lines = await SqlAlchemyInvoiceLineRepository(session).get_by_invoice_id(invoice.id)

        assert invoice.total_amount == recompute_total(lines)
        assert invoice.total_amount == created.value.total_amount
        assert [line.quantity for line in lines] == [Decimal("0.333333"), Decimal("1.000001")]

    async def test_large_precise_amounts_round_trip_exactly(
        self, db_session: AsyncSession, session_factory, allocator
    ):
        unit_price = Decimal("123456789012.123456")
        quantity = Decimal("999999999999.999999")
        created = await make_create_use_case(db_session, allocator).execute(
            make_command(
                items=[
                    LineItemDTO(
                        description="Fleet lease",
                        quantity=quantity,
                        unit_price=unit_price,
                        tax_rate=Decimal("0.0001"),
                    )
                ]
            )
        )
        assert created.is_ok()

        async with session_factory() as session:
            invoice = await SqlAlchemyInvoiceRepository(session).get_by_id(created.value.invoice_id, "user_42")
            lines = await SqlAlchemyInvoiceLineRepository(session).get_by_invoice_id(invoice.id)

        assert lines[0].unit_price == unit_price
        assert lines[0].quantity == quantity
        assert lines[0].tax_rate == Decimal("0.0001")
        assert invoice.total_amount == recompute_total(lines)

    async def test_timestamps_load_timezone_aware(self, db_session: AsyncSession, session_factory, allocator):
        created = await make_create_use_case(db_session, allocator).execute(make_command())

        async with session_factory() as session:
            invoice = await SqlAlchemyInvoiceRepository(session).get_by_id(created.value.invoice_id, "user_42")
            lines = await SqlAlchemyInvoiceLineRepository(session).get_by_invoice_id(invoice.id)

        assert invoice.created_at.utcoffset() == timedelta(0)
        assert invoice.updated_at.utcoffset() == timedelta(0)
        assert lines[0].created_at.utcoffset() == timedelta(0)
