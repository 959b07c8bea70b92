"""Invoice Counter Repository Interface

Defines the contract for the counter store behind invoice numbering.
"""

from abc import ABC, abstractmethod
from typing import Optional


class InvoiceCounterRepository(ABC):
    """
    Repository interface for named monotonic counters

    increment() must read and write the counter in one indivisible step.
    Reading the current value and writing value + 1 separately lets two
    callers observe the same value and hand out a duplicate number.
    """

    @abstractmethod
    async def increment(self, name: str) -> int:
        """
        Atomically increment a counter and return the new value

        The new value is durable when this returns; it is not tied to any
        later transaction of the caller.

        Args:
            name: Counter name

        Returns:
            The incremented value (1 on first use)
        """
        pass

    @abstractmethod
    async def current_value(self, name: str) -> Optional[int]:
        """
        Read a counter without incrementing it

        Args:
            name: Counter name

        Returns:
            Last allocated value, None if the counter was never used
        """
        pass
