from .unit_of_work import SqlAlchemyUnitOfWork
from .pdf_service import ReportLabPdfService
from .mail_service import (
    LoggingMailService,
    SmtpMailService,
    create_mail_service,
)

__all__ = [
    "SqlAlchemyUnitOfWork",
    "ReportLabPdfService",
    "LoggingMailService",
    "SmtpMailService",
    "create_mail_service",
]
