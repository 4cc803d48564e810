"""Error Classifier

Maps raw transport/HTTP failures from the Sheets API into the store error
taxonomy. Status code wins; message text is only consulted when no status
is available.
"""

import asyncio
from typing import Optional

import httpx

from src.app.errors import (
    AuthenticationError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    SheetsError,
    UnknownError,
    ValidationError,
)

RATE_LIMIT_MARKERS = ("quota", "rate limit", "ratelimit", "too many requests", "resource_exhausted")
NETWORK_MARKERS = ("timeout", "timed out", "network", "econnreset", "enotfound", "connection", "dns", "socket")
AUTH_MARKERS = ("unauthorized", "unauthenticated", "invalid credentials", "authentication")
VALIDATION_MARKERS = ("invalid", "bad request", "unable to parse")


def _status_of(error: BaseException) -> Optional[int]:
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code
    status = getattr(error, "status_code", None) or getattr(error, "status", None)
    return status if isinstance(status, int) else None


def _message_of(error: BaseException) -> str:
    if isinstance(error, httpx.HTTPStatusError):
        try:
            body = error.response.json()
            message = body.get("error", {}).get("message")
            if message:
                return message
        except ValueError:
            pass
        return error.response.text or str(error)
    return str(error) or type(error).__name__


def _classify_status(status: int, message: str, operation: str) -> SheetsError:
    lowered = message.lower()
    if status == 401:
        return AuthenticationError(message, operation, status)
    if status == 403:
        if any(marker in lowered for marker in RATE_LIMIT_MARKERS):
            return RateLimitError(message, operation, status)
        return AuthenticationError(message, operation, status)
    if status == 429:
        return RateLimitError(message, operation, status)
    if status == 400:
        return ValidationError(message, operation, status)
    if status == 404:
        return NotFoundError(message, operation, status)
    if status >= 500:
        return NetworkError(message, operation, status)
    return UnknownError(message, operation, status, retryable=False)


def _classify_message(message: str, operation: str) -> SheetsError:
    lowered = message.lower()
    if any(marker in lowered for marker in RATE_LIMIT_MARKERS):
        return RateLimitError(message, operation)
    if any(marker in lowered for marker in AUTH_MARKERS):
        return AuthenticationError(message, operation)
    if any(marker in lowered for marker in NETWORK_MARKERS):
        return NetworkError(message, operation)
    if any(marker in lowered for marker in VALIDATION_MARKERS):
        return ValidationError(message, operation)
    return UnknownError(message, operation, retryable=False)


def classify_error(error: BaseException, operation: str = "operation") -> SheetsError:
    """
    Classify a failure raised by a remote store call

    Args:
        error: Raw exception (httpx error, timeout, or already classified)
        operation: Name of the store operation, kept for diagnostics

    Returns:
        SheetsError subclass tagged retryable or not
    """
    if isinstance(error, SheetsError):
        return error

    if isinstance(error, (httpx.TimeoutException, asyncio.TimeoutError)):
        return NetworkError(f"Request timed out: {_message_of(error)}", operation)

    if isinstance(error, httpx.TransportError):
        return NetworkError(_message_of(error), operation)

    message = _message_of(error)
    status = _status_of(error)
    if status is not None:
        return _classify_status(status, message, operation)

    return _classify_message(message, operation)
