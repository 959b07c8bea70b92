"""Invoice Number Allocator

Hands out unique, strictly increasing invoice numbers such as INV-00001.
"""

import asyncio
import logging
from sqlalchemy.exc import SQLAlchemyError
from src.app.repositories.invoice_counter_repository import InvoiceCounterRepository
from src.domain.exceptions import AllocationError

logger = logging.getLogger(__name__)

INVOICE_NUMBER_COUNTER = "invoice_number"


def format_invoice_number(value: int, prefix: str = "INV", width: int = 5) -> str:
    """
    Format a counter value as an invoice number

    Values wider than width widen the field instead of being truncated:
    format_invoice_number(123456) -> "INV-123456".
    """
    return f"{prefix}-{value:0{width}d}"


class InvoiceNumberAllocator:
    """
    Allocates invoice numbers from a single global counter

    Concurrency:
    - In-process callers are serialized by an asyncio.Lock, so numbers are
      issued in the order callers enter the critical section
    - Across processes the counter repository's atomic increment
      serializes callers on the counter row

    Numbers are never reused. A number allocated for an invoice that is
    later not persisted is simply skipped.
    """

    def __init__(
        self,
        counter_repo: InvoiceCounterRepository,
        prefix: str = "INV",
        width: int = 5,
        counter_name: str = INVOICE_NUMBER_COUNTER,
    ):
        self.counter_repo = counter_repo
        self.prefix = prefix
        self.width = width
        self.counter_name = counter_name
        self._lock = asyncio.Lock()

    async def allocate(self) -> str:
        """
        Allocate the next invoice number

        Returns:
            Formatted invoice number

        Raises:
            AllocationError: counter store unreachable or increment aborted
        """
        async with self._lock:
            try:
                value = await self.counter_repo.increment(self.counter_name)
            except (SQLAlchemyError, OSError, RuntimeError) as e:
                logger.error(f"Invoice number allocation failed: {e}")
                raise AllocationError(
                    "Could not allocate an invoice number", reason=str(e)
                ) from e

        invoice_number = format_invoice_number(value, self.prefix, self.width)
        logger.debug(f"Allocated invoice number {invoice_number}")
        return invoice_number
