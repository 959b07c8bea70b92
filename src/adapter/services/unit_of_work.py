"""SQLAlchemy Unit of Work Implementation"""

from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """
    Commits or rolls back the request's AsyncSession

    Repositories sharing the session only flush; this is the single place
    where an invoice and its lines become durable together.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
