"""Unit of Work Interface

Transaction boundary for use cases.
"""

from abc import ABC, abstractmethod


class UnitOfWork(ABC):
    """
    Abstract unit of work

    Use cases commit once all their changes are staged and roll back on
    any failure, so a partially written invoice is never persisted.
    """

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
