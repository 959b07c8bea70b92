"""SQLAlchemy Invoice Counter Repository Implementation

Atomic counter increments backed by the invoice_counters table.
"""

from typing import Optional
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.invoice_counter_repository import InvoiceCounterRepository
from src.domain.invoice_counter import InvoiceCounter


class SqlAlchemyInvoiceCounterRepository(InvoiceCounterRepository):
    """
    SQLAlchemy implementation of InvoiceCounterRepository

    Features:
    - Single-statement increment (UPDATE ... SET v = v + 1 RETURNING v),
      so the database serializes concurrent callers on the counter row
    - Each increment runs and commits in its own session, independent of
      the caller's invoice transaction; a rolled back invoice never
      returns its number to the pool
    - First-use insert race resolved by retrying the increment
    """

    def __init__(self, session_factory):
        """
        Args:
            session_factory: Callable returning a new AsyncSession
                (e.g. sessionmaker(engine, class_=AsyncSession))
        """
        self.session_factory = session_factory

    async def increment(self, name: str) -> int:
        async with self.session_factory() as session:
            value = await self._increment(session, name)
            if value is not None:
                await session.commit()
                return value

            session.add(InvoiceCounter(name=name, current_value=1))
            try:
                await session.commit()
                return 1
            except IntegrityError:
                # Another caller created the row first
                await session.rollback()

            value = await self._increment(session, name)
            if value is None:
                raise RuntimeError(f"Counter {name} disappeared during allocation")
            await session.commit()
            return value

    async def current_value(self, name: str) -> Optional[int]:
        async with self.session_factory() as session:
            statement = select(InvoiceCounter.current_value).where(InvoiceCounter.name == name)
            result = await session.execute(statement)
            return result.scalar_one_or_none()

    @staticmethod
    async def _increment(session: AsyncSession, name: str) -> Optional[int]:
        statement = (
            update(InvoiceCounter)
            .where(InvoiceCounter.name == name)
            .values(current_value=InvoiceCounter.current_value + 1)
            .returning(InvoiceCounter.current_value)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(statement)
        return result.scalar_one_or_none()
