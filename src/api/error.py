"""API error handling

ClientError carries a use case Error to the HTTP layer; the registered
handler renders it as {"error": {...}}.
"""

import logging
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from libs.result import Error

logger = logging.getLogger(__name__)

# Default HTTP status per use case error code
ERROR_STATUS_CODES = {
    "INVOICE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "VALIDATION_FAILED": status.HTTP_400_BAD_REQUEST,
    "RENDER_FAILED": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "DELIVERY_FAILED": status.HTTP_502_BAD_GATEWAY,
    "ALLOCATION_FAILED": status.HTTP_503_SERVICE_UNAVAILABLE,
}


class ClientError(Exception):
    """Error returned to the API client"""

    def __init__(self, error: Error, status_code: int = None):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code or status_code_for(error)


def status_code_for(error: Error) -> int:
    # A bad recipient address is the caller's mistake, not a relay failure
    if error.code == "DELIVERY_FAILED" and not error.retryable:
        return status.HTTP_400_BAD_REQUEST
    return ERROR_STATUS_CODES.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            f"{request.method} {request.url.path} failed: {exc.error.code} {exc.error.reason}"
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error.model_dump()},
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies with the same shape as use case errors"""
    details = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()) if part != 'body')}: {err.get('msg')}"
        for err in exc.errors()
    )
    error = Error(
        code="VALIDATION_FAILED",
        message="Request validation failed",
        reason=details,
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": error.model_dump()},
    )
