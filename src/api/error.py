"""API Error Handling

Every error response has the shape
``{"error": {"code": ..., "message": ..., "retryable": ...}}``.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from libs.result import Error
from src.app.errors import (
    AuthenticationError,
    CascadeError,
    NotFoundError,
    RateLimitError,
    SheetsError,
    ValidationError,
)

logger = logging.getLogger(__name__)

SHEETS_ERROR_STATUS = {
    AuthenticationError: status.HTTP_502_BAD_GATEWAY,
    RateLimitError: status.HTTP_503_SERVICE_UNAVAILABLE,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    CascadeError: status.HTTP_409_CONFLICT,
}


class ClientError(Exception):
    """Use-case error surfaced to the HTTP caller"""

    def __init__(self, error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code


def not_found(entity: str, entity_id: str) -> ClientError:
    return ClientError(
        Error(code=f"{entity.upper()}_NOT_FOUND", message=f"{entity.replace('_', ' ').capitalize()} {entity_id} not found"),
        status_code=status.HTTP_404_NOT_FOUND,
    )


def error_body(code: str, message: str, retryable: bool = False) -> dict:
    return {"error": {"code": code, "message": message, "retryable": retryable}}


def sheets_error_status(error: SheetsError) -> int:
    for error_type, status_code in SHEETS_ERROR_STATUS.items():
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_502_BAD_GATEWAY


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.error.code, exc.error.message, exc.error.retryable),
    )


async def sheets_error_handler(request: Request, exc: SheetsError) -> JSONResponse:
    status_code = sheets_error_status(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=status_code,
        content=error_body(exc.code, exc.message, exc.retryable),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ClientError, client_error_handler)
    app.add_exception_handler(SheetsError, sheets_error_handler)
