import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain  # noqa: F401  registers the table models
from src.adapter.repositories.invoice_counter_repository import SqlAlchemyInvoiceCounterRepository
from src.app.services.invoice_number_allocator import InvoiceNumberAllocator
from src.app.services.mail_service import MailService
from src.depends import get_session, get_invoice_number_allocator, get_mail_service


class RecordingMailService(MailService):
    """Keeps sent messages in memory; fails while fail_with is set"""

    def __init__(self):
        self.sent = []
        self.fail_with = None

    async def send(self, message):
        if self.fail_with:
            raise self.fail_with
        self.sent.append(message)
        return f"<{len(self.sent)}@test>"


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Create test database engine on a fresh SQLite file"""
    test_db_url = f"sqlite+aiosqlite:///{tmp_path / 'invoices_test.db'}"

    engine = create_async_engine(test_db_url, echo=False, future=True)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a new database session for each test"""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def allocator(session_factory):
    return InvoiceNumberAllocator(SqlAlchemyInvoiceCounterRepository(session_factory))


@pytest_asyncio.fixture
async def mail_service():
    return RecordingMailService()


@pytest_asyncio.fixture
async def client(db_session, allocator, mail_service):
    """Create test client with database, allocator and mail overrides"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    # Override the session dependency to use test session
    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_invoice_number_allocator] = lambda: allocator
    app.dependency_overrides[get_mail_service] = lambda: mail_service

    # Use ASGITransport for httpx AsyncClient
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
