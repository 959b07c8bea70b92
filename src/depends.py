from functools import lru_cache
from fastapi import Header, status
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from libs.result import Error
from src.adapter.repositories.invoice_counter_repository import SqlAlchemyInvoiceCounterRepository
from src.adapter.services.mail_service import create_mail_service
from src.adapter.services.pdf_service import ReportLabPdfService
from src.app.services.invoice_number_allocator import InvoiceNumberAllocator
from src.api.error import ClientError

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


async def get_owner_id(x_owner_id: str = Header(default=None)) -> str:
    """Owning account of the request, set by the upstream auth layer"""
    if not x_owner_id or not x_owner_id.strip():
        raise ClientError(
            Error(code="OWNER_REQUIRED", message="X-Owner-Id header is required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    return x_owner_id.strip()


@lru_cache
def get_invoice_number_allocator() -> InvoiceNumberAllocator:
    """Process-wide allocator; its lock must be shared by every request"""
    return InvoiceNumberAllocator(
        SqlAlchemyInvoiceCounterRepository(AsyncSessionLocal),
        prefix=ApplicationConfig.INVOICE_NUMBER_PREFIX,
        width=ApplicationConfig.INVOICE_NUMBER_WIDTH,
    )


def get_pdf_service() -> ReportLabPdfService:
    return ReportLabPdfService(
        company_name=ApplicationConfig.COMPANY_NAME,
        company_address=ApplicationConfig.COMPANY_ADDRESS,
        currency_symbol=ApplicationConfig.CURRENCY_SYMBOL,
    )


def get_mail_service():
    return create_mail_service(ApplicationConfig)
