"""Unit tests for ReportLabPdfService"""

import re
import pytest
from datetime import date, datetime, timezone
from decimal import Decimal

from src.adapter.services.pdf_service import ReportLabPdfService
from src.app.services.pdf_service import attachment_filename
from src.domain.base import DESCRIPTION_MAX_LENGTH
from src.domain.exceptions import RenderError
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.invoice_line import InvoiceLine
from src.domain.pricing import recompute_total

PAGE_OBJECT = re.compile(rb"/Type /Page\b")


def make_lines(count):
    return [
        InvoiceLine(
            id=i + 1,
            invoice_id=1,
            position=i,
            description=f"Consulting block {i + 1} <on-site & remote>",
            quantity=Decimal("1.5"),
            unit_price=Decimal("80"),
            tax_rate=Decimal("20"),
            discount_rate=Decimal("0"),
        )
        for i in range(count)
    ]


def make_invoice(lines, **overrides):
    fields = dict(
        id=1,
        owner_id="user_42",
        invoice_number="INV-00007",
        issue_date=date(2024, 2, 1),
        due_date=date(2024, 3, 1),
        client_name="Acme & Sons",
        client_email="billing@acme.com",
        client_address="1 Main Street\nSpringfield",
        total_amount=recompute_total(lines),
        status=InvoiceStatus.DRAFT,
        created_at=datetime(2024, 2, 1, tzinfo=timezone.utc),
        updated_at=datetime(2024, 2, 1, tzinfo=timezone.utc),
    )
    fields.update(overrides)
    return Invoice(**fields)


@pytest.fixture
def pdf_service():
    return ReportLabPdfService(company_name="Studio Nine", company_address="9 Harbour Road")


class TestRenderInvoice:
    """Test PDF rendering"""

    def test_produces_pdf(self, pdf_service):
        lines = make_lines(2)

        pdf_bytes = pdf_service.render_invoice(make_invoice(lines), lines)

        assert pdf_bytes.startswith(b"%PDF")
        assert len(PAGE_OBJECT.findall(pdf_bytes)) == 1

    def test_identical_input_identical_bytes(self, pdf_service):
        lines = make_lines(3)
        invoice = make_invoice(lines)

        assert pdf_service.render_invoice(invoice, lines) == pdf_service.render_invoice(invoice, lines)

    def test_content_changes_output(self, pdf_service):
        lines = make_lines(3)

        draft = pdf_service.render_invoice(make_invoice(lines), lines)
        paid = pdf_service.render_invoice(make_invoice(lines, status=InvoiceStatus.PAID), lines)

        assert draft != paid

    def test_many_items_continue_on_next_page(self, pdf_service):
        lines = make_lines(80)

        pdf_bytes = pdf_service.render_invoice(make_invoice(lines), lines)

        assert len(PAGE_OBJECT.findall(pdf_bytes)) > 1

    def test_longest_descriptions_render(self, pdf_service):
        lines = make_lines(30)
        for line in lines:
            line.description = "Extended maintenance " * 20
            line.description = line.description[:DESCRIPTION_MAX_LENGTH]

        pdf_bytes = pdf_service.render_invoice(make_invoice(lines), lines)

        assert pdf_bytes.startswith(b"%PDF")
        assert len(PAGE_OBJECT.findall(pdf_bytes)) > 1

    def test_optional_client_fields_may_be_absent(self, pdf_service):
        lines = make_lines(1)
        invoice = make_invoice(lines, client_email=None, client_address=None, due_date=None)

        assert pdf_service.render_invoice(invoice, lines).startswith(b"%PDF")

    def test_negative_total_renders(self, pdf_service):
        lines = make_lines(1)
        lines[0].discount_rate = Decimal("200")
        invoice = make_invoice(lines)

        assert invoice.total_amount < 0
        assert pdf_service.render_invoice(invoice, lines).startswith(b"%PDF")

    def test_no_items_raises(self, pdf_service):
        invoice = make_invoice([], total_amount=Decimal("0"))

        with pytest.raises(RenderError) as exc_info:
            pdf_service.render_invoice(invoice, [])

        assert exc_info.value.code == "RENDER_FAILED"
        assert exc_info.value.retryable is False

    def test_missing_total_raises(self, pdf_service):
        lines = make_lines(1)

        with pytest.raises(RenderError):
            pdf_service.render_invoice(make_invoice(lines, total_amount=None), lines)


def test_attachment_filename():
    lines = make_lines(1)

    assert attachment_filename(make_invoice(lines)) == "Invoice-INV-00007.pdf"
