"""Store Error Taxonomy

Closed set of failures the spreadsheet store can surface. Every error is
classified exactly once, at the boundary of a remote call.
"""

from typing import Optional


class SheetsError(Exception):
    """Base class for classified remote store failures"""

    code = "GOOGLE_SHEETS_ERROR"
    default_retryable = False

    def __init__(
        self,
        message: str,
        operation: str = "operation",
        status_code: Optional[int] = None,
        retryable: Optional[bool] = None,
    ):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.status_code = status_code
        self.retryable = self.default_retryable if retryable is None else retryable

    def __str__(self) -> str:
        return f"{self.message} (operation={self.operation}, code={self.code})"


class AuthenticationError(SheetsError):
    code = "AUTHENTICATION_FAILED"


class RateLimitError(SheetsError):
    code = "RATE_LIMIT_EXCEEDED"
    default_retryable = True


class NetworkError(SheetsError):
    code = "NETWORK_ERROR"
    default_retryable = True


class ValidationError(SheetsError):
    code = "VALIDATION_ERROR"


class NotFoundError(SheetsError):
    code = "NOT_FOUND"


class UnknownError(SheetsError):
    code = "UNKNOWN_ERROR"


class CascadeError(SheetsError):
    """A cascade delete stopped part way; completed steps are not rolled back"""

    code = "CASCADE_INCOMPLETE"

    def __init__(self, message: str, operation: str, completed_steps: list, failed_step: str, cause: SheetsError):
        super().__init__(
            message,
            operation=operation,
            status_code=cause.status_code,
            retryable=cause.retryable,
        )
        self.completed_steps = completed_steps
        self.failed_step = failed_step
        self.cause = cause
