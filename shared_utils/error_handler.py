"""
Structured error handling and response formatting.
Provides consistent error responses with error codes and context.
"""

from typing import Optional, Dict, Any
import logging

from shared_utils.constants import ErrorCode, ErrorMessages, LogScope
from shared_utils.logging_utils import get_scoped_logger


class AppException(Exception):
    """Base exception for application errors."""

    def __init__(
        self,
        error_code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        http_status: int = 500
    ):
        self.error_code = error_code
        self.message = message
        self.context = context or {}
        self.http_status = http_status
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to response dictionary."""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "context": self.context
            }
        }


class ValidationError(AppException):
    """Validation/input error."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            error_code=ErrorCode.INVALID_INPUT.value,
            message=message,
            context=context,
            http_status=400
        )


# ---------------------------------------------------------------------------
# Content / ingestion errors (absorbed inside the ingestion pipeline)
# ---------------------------------------------------------------------------


class SourceUnavailableError(AppException):
    """A content source failed to produce records."""

    def __init__(self, source_id: str, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            error_code=ErrorCode.SOURCE_UNAVAILABLE.value,
            message=f"Content source '{source_id}' unavailable: {message}",
            context={**(context or {}), "source_id": source_id},
            http_status=503,
        )


class SourceNotFoundError(AppException):
    """No content source is registered under the requested id."""

    def __init__(self, source_id: str):
        super().__init__(
            error_code=ErrorCode.SOURCE_NOT_FOUND.value,
            message=f"Unknown content source: {source_id}",
            context={"source_id": source_id},
            http_status=404,
        )


class SubmissionNotSupportedError(AppException):
    """The content source does not accept form posts."""

    def __init__(self, source_id: str):
        super().__init__(
            error_code=ErrorCode.SUBMISSION_NOT_SUPPORTED.value,
            message=f"Content source does not accept submissions: {source_id}",
            context={"source_id": source_id},
            http_status=405,
        )


class EmbeddingFailedError(AppException):
    """A single record's embedding call failed or timed out during ingestion."""

    def __init__(self, source_id: str, title: str, message: str):
        super().__init__(
            error_code=ErrorCode.EMBEDDING_FAILED.value,
            message=f"Embedding failed for '{title}': {message}",
            context={"source_id": source_id, "title": title},
            http_status=500,
        )


# ---------------------------------------------------------------------------
# Query-time errors (always surfaced to the caller)
# ---------------------------------------------------------------------------


class EmptyQueryError(AppException):
    """Query text is missing or blank."""

    def __init__(self):
        super().__init__(
            error_code=ErrorCode.EMPTY_QUERY.value,
            message=ErrorMessages.QUERY_REQUIRED,
            http_status=400,
        )


class NotReadyError(AppException):
    """Query arrived before the index finished building. Retryable."""

    def __init__(self, state: str):
        super().__init__(
            error_code=ErrorCode.NOT_READY.value,
            message=ErrorMessages.NOT_READY,
            context={"state": state},
            http_status=503,
        )


class EmbeddingUnavailableError(AppException):
    """The query embedding call failed or timed out. Retryable."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            error_code=ErrorCode.EMBEDDING_UNAVAILABLE.value,
            message=message,
            context=context,
            http_status=503,
        )


# ---------------------------------------------------------------------------
# Invariant violations (fatal, never coerced)
# ---------------------------------------------------------------------------


class DimensionMismatchError(AppException):
    """Embedding dimensionality differs from the rest of the index."""

    def __init__(self, expected: Optional[int], actual: int, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            error_code=ErrorCode.DIMENSION_MISMATCH.value,
            message=f"Embedding dimension mismatch: expected {expected}, got {actual}",
            context={**(context or {}), "expected": expected, "actual": actual},
            http_status=500,
        )


class InvalidStateTransition(AppException):
    """Readiness transition outside NOT_STARTED -> INDEXING -> READY."""

    def __init__(self, current: str, target: str):
        super().__init__(
            error_code=ErrorCode.INVALID_STATE_TRANSITION.value,
            message=f"Cannot transition readiness from {current} to {target}",
            context={"current": current, "target": target},
            http_status=500,
        )


def log_exception(
    exc: Exception,
    scope: str = LogScope.ERROR_HANDLER,
    logger: Optional[logging.Logger] = None
) -> None:
    """Log exception with structured context.

    Args:
        exc: Exception to log
        scope: Log scope identifier
        logger: Optional custom logger (uses structlog if not provided)
    """
    if logger is None:
        logger = get_scoped_logger(scope)

    if isinstance(exc, AppException):
        logger.error(
            "app_exception",
            error_code=exc.error_code,
            message=exc.message,
            http_status=exc.http_status,
            context=exc.context
        )
    else:
        logger.error(
            "unexpected_exception",
            error_type=type(exc).__name__,
            message=str(exc),
            traceback=True
        )


def handle_error(
    exc: Exception,
    scope: str = LogScope.ERROR_HANDLER,
    default_error_code: str = ErrorCode.EXTERNAL_SERVICE_ERROR.value
) -> Dict[str, Any]:
    """Handle exception and return structured error response.

    Args:
        exc: Exception to handle
        scope: Log scope
        default_error_code: Default error code for non-AppException errors

    Returns:
        Structured error response dictionary
    """
    log_exception(exc, scope)

    if isinstance(exc, AppException):
        return exc.to_dict()
    else:
        # Convert unexpected exceptions to structured format
        return {
            "error": {
                "code": default_error_code,
                "message": f"An unexpected error occurred: {str(exc)}",
                "context": {"error_type": type(exc).__name__}
            }
        }
