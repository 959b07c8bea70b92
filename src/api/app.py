"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import SQLModel

from fastapi.exceptions import RequestValidationError
from src.api.error import ClientError, client_error_handler, request_validation_error_handler
from src.api.middleware import log_request_middleware
from src.api.routes import invoices
import src.domain  # noqa: F401  registers the table models

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(config) -> FastAPI:
    """
    Build the invoice API

    Args:
        config: ApplicationConfig-like object

    Returns:
        FastAPI application with invoice routes mounted under API_PREFIX
    """
    configure_logging(config.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        from src.depends import engine

        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Invoice service started")
        yield
        await engine.dispose()
        logger.info("Invoice service stopped")

    app = FastAPI(title="Invoice Service", version="1.0.0", lifespan=lifespan)

    if config.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.CORS_ORIGINS,
            allow_credentials=config.CORS_ALLOW_CREDENTIALS,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization", "X-Owner-Id"],
        )

    if config.ENABLE_LOGGING_MIDDLEWARE:
        app.middleware("http")(log_request_middleware)

    app.add_exception_handler(ClientError, client_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.include_router(invoices.router, prefix=config.API_PREFIX)

    @app.get("/healthz", tags=["Health"])
    async def healthz():
        return {"ok": True}

    return app
