"""Unit tests for InvoiceNumberAllocator"""

import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock
from sqlalchemy.exc import OperationalError

from src.app.services.invoice_number_allocator import (
    InvoiceNumberAllocator,
    format_invoice_number,
)
from src.domain.exceptions import AllocationError


class InMemoryCounterRepository:
    """Counter that yields to the event loop mid-increment"""

    def __init__(self):
        self.value = 0

    async def increment(self, name):
        current = self.value
        await asyncio.sleep(0)
        self.value = current + 1
        return self.value


class TestFormatInvoiceNumber:
    """Test invoice number formatting"""

    def test_zero_padded(self):
        assert format_invoice_number(1) == "INV-00001"
        assert format_invoice_number(42) == "INV-00042"

    def test_widens_past_five_digits(self):
        assert format_invoice_number(99999) == "INV-99999"
        assert format_invoice_number(100000) == "INV-100000"

    def test_custom_prefix_and_width(self):
        assert format_invoice_number(7, prefix="ACME", width=3) == "ACME-007"


@pytest.mark.asyncio
class TestAllocate:
    """Test number allocation"""

    async def test_sequential_numbers(self):
        allocator = InvoiceNumberAllocator(InMemoryCounterRepository())

        first = await allocator.allocate()
        second = await allocator.allocate()

        assert first == "INV-00001"
        assert second == "INV-00002"

    async def test_concurrent_callers_get_distinct_numbers(self):
        """The lock keeps the read-modify-write of the counter from interleaving"""
        allocator = InvoiceNumberAllocator(InMemoryCounterRepository())

        numbers = await asyncio.gather(*(allocator.allocate() for _ in range(20)))

        assert len(set(numbers)) == 20
        assert sorted(numbers) == [format_invoice_number(i) for i in range(1, 21)]

    async def test_uses_configured_counter_name(self):
        counter_repo = MagicMock()
        counter_repo.increment = AsyncMock(return_value=3)
        allocator = InvoiceNumberAllocator(counter_repo, counter_name="custom")

        await allocator.allocate()

        counter_repo.increment.assert_called_once_with("custom")

    async def test_database_error_becomes_allocation_error(self):
        counter_repo = MagicMock()
        counter_repo.increment = AsyncMock(
            side_effect=OperationalError("UPDATE invoice_counters", {}, Exception("database is locked"))
        )
        allocator = InvoiceNumberAllocator(counter_repo)

        with pytest.raises(AllocationError) as exc_info:
            await allocator.allocate()

        assert exc_info.value.code == "ALLOCATION_FAILED"
        assert exc_info.value.retryable is True

    async def test_connection_error_becomes_allocation_error(self):
        counter_repo = MagicMock()
        counter_repo.increment = AsyncMock(side_effect=ConnectionRefusedError("refused"))
        allocator = InvoiceNumberAllocator(counter_repo)

        with pytest.raises(AllocationError):
            await allocator.allocate()
