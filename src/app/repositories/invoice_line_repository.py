"""Invoice Line Repository Interface

Defines the contract for invoice line persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List
from src.domain.invoice_line import InvoiceLine


class InvoiceLineRepository(ABC):
    """
    Repository interface for InvoiceLine persistence

    Line items are owned by their invoice and always replaced as a whole.
    """

    @abstractmethod
    async def get_by_invoice_id(self, invoice_id: int) -> List[InvoiceLine]:
        """
        Retrieve all line items for an invoice in position order

        Args:
            invoice_id: Invoice ID

        Returns:
            List of InvoiceLine items
        """
        pass

    @abstractmethod
    async def replace_for_invoice(
        self, invoice_id: int, lines: List[InvoiceLine]
    ) -> List[InvoiceLine]:
        """
        Replace every line item of an invoice

        Positions are reassigned from the order of lines.

        Args:
            invoice_id: Invoice ID
            lines: New line items

        Returns:
            Persisted InvoiceLine items with generated IDs
        """
        pass
