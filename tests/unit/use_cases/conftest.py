import pytest
from datetime import date, datetime, timezone
from decimal import Decimal

from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.invoice_line import InvoiceLine


@pytest.fixture
def sample_invoice():
    """Draft invoice with a total of 105"""
    return Invoice(
        id=1,
        owner_id="user_42",
        invoice_number="INV-00001",
        issue_date=date(2024, 2, 1),
        due_date=date(2024, 3, 1),
        client_name="Acme Corp",
        client_email="billing@acme.com",
        client_address="1 Main Street\nSpringfield",
        total_amount=Decimal("105"),
        status=InvoiceStatus.DRAFT,
        created_at=datetime(2024, 2, 1, 9, 0, 0, tzinfo=timezone.utc),
        updated_at=datetime(2024, 2, 1, 9, 0, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def sample_lines():
    return [
        InvoiceLine(
            id=1,
            invoice_id=1,
            position=0,
            description="Website design",
            quantity=Decimal("1"),
            unit_price=Decimal("100"),
            tax_rate=Decimal("10"),
            discount_rate=Decimal("5"),
        )
    ]
