"""
Tests for shared_utils.error_handler.

Covers every exception subclass, to_dict() serialisation, HTTP status codes,
log_exception(), and handle_error().
"""

from unittest.mock import MagicMock

from shared_utils.constants import ErrorCode, ErrorMessages
from shared_utils.error_handler import (
    AppException,
    DimensionMismatchError,
    EmbeddingFailedError,
    EmbeddingUnavailableError,
    EmptyQueryError,
    InvalidStateTransition,
    NotReadyError,
    SourceNotFoundError,
    SourceUnavailableError,
    SubmissionNotSupportedError,
    ValidationError,
    handle_error,
    log_exception,
)


# ---------------------------------------------------------------------------
# AppException base
# ---------------------------------------------------------------------------


class TestAppException:
    def test_defaults(self) -> None:
        exc = AppException(error_code="TEST", message="boom")
        assert exc.error_code == "TEST"
        assert exc.message == "boom"
        assert exc.http_status == 500
        assert exc.context == {}
        assert str(exc) == "boom"

    def test_to_dict_structure(self) -> None:
        d = AppException("CODE", "msg", context={"a": 1}).to_dict()
        assert d == {"error": {"code": "CODE", "message": "msg", "context": {"a": 1}}}


# ---------------------------------------------------------------------------
# General-purpose subclasses
# ---------------------------------------------------------------------------


class TestValidationError:
    def test_code_and_status(self) -> None:
        exc = ValidationError("bad input", context={"field": "source_id"})
        assert exc.error_code == ErrorCode.INVALID_INPUT.value
        assert exc.http_status == 400
        assert exc.context == {"field": "source_id"}


# ---------------------------------------------------------------------------
# Content and ingestion errors
# ---------------------------------------------------------------------------


class TestSourceErrors:
    def test_source_unavailable(self) -> None:
        exc = SourceUnavailableError("blog", "HTTP 500", context={"path": "x"})
        assert exc.error_code == ErrorCode.SOURCE_UNAVAILABLE.value
        assert exc.context == {"path": "x", "source_id": "blog"}
        assert "blog" in exc.message

    def test_source_not_found(self) -> None:
        exc = SourceNotFoundError("videos")
        assert exc.http_status == 404
        assert exc.message == "Unknown content source: videos"

    def test_submission_not_supported(self) -> None:
        exc = SubmissionNotSupportedError("blog")
        assert exc.error_code == ErrorCode.SUBMISSION_NOT_SUPPORTED.value
        assert exc.http_status == 405
        assert exc.context == {"source_id": "blog"}

    def test_embedding_failed(self) -> None:
        exc = EmbeddingFailedError("portfolio", "Weather App", "timed out")
        assert exc.error_code == ErrorCode.EMBEDDING_FAILED.value
        assert exc.context == {"source_id": "portfolio", "title": "Weather App"}


# ---------------------------------------------------------------------------
# Query-time errors
# ---------------------------------------------------------------------------


class TestQueryErrors:
    def test_empty_query(self) -> None:
        exc = EmptyQueryError()
        assert exc.http_status == 400
        assert exc.message == ErrorMessages.QUERY_REQUIRED

    def test_not_ready(self) -> None:
        exc = NotReadyError("INDEXING")
        assert exc.http_status == 503
        assert exc.message == ErrorMessages.NOT_READY
        assert exc.context == {"state": "INDEXING"}

    def test_embedding_unavailable(self) -> None:
        exc = EmbeddingUnavailableError("timed out", context={"timeout_s": 5.0})
        assert exc.error_code == ErrorCode.EMBEDDING_UNAVAILABLE.value
        assert exc.http_status == 503


class TestInvariantErrors:
    def test_dimension_mismatch(self) -> None:
        exc = DimensionMismatchError(expected=512, actual=3)
        assert exc.error_code == ErrorCode.DIMENSION_MISMATCH.value
        assert exc.http_status == 500
        assert exc.context["expected"] == 512
        assert exc.context["actual"] == 3

    def test_invalid_transition(self) -> None:
        exc = InvalidStateTransition("READY", "INDEXING")
        assert exc.error_code == ErrorCode.INVALID_STATE_TRANSITION.value
        assert "READY" in exc.message


# ---------------------------------------------------------------------------
# log_exception / handle_error
# ---------------------------------------------------------------------------


class TestLogException:
    def test_app_exception_uses_error_level(self) -> None:
        mock_logger = MagicMock()
        log_exception(NotReadyError("INDEXING"), logger=mock_logger)
        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args.kwargs["error_code"] == ErrorCode.NOT_READY.value

    def test_generic_exception_uses_error_level(self) -> None:
        mock_logger = MagicMock()
        log_exception(RuntimeError("boom"), logger=mock_logger)
        mock_logger.error.assert_called_once()

    def test_default_logger_does_not_raise(self) -> None:
        log_exception(ValidationError("x"))
        log_exception(RuntimeError("y"))


class TestHandleError:
    def test_app_exception_returns_to_dict(self) -> None:
        result = handle_error(SourceNotFoundError("videos"))
        assert result["error"]["code"] == ErrorCode.SOURCE_NOT_FOUND.value
        assert result["error"]["context"]["source_id"] == "videos"

    def test_generic_exception_returns_structured_dict(self) -> None:
        err = handle_error(RuntimeError("unexpected"))["error"]
        assert err["code"] == ErrorCode.EXTERNAL_SERVICE_ERROR.value
        assert "unexpected" in err["message"]
        assert err["context"]["error_type"] == "RuntimeError"

    def test_custom_default_error_code(self) -> None:
        result = handle_error(ValueError("bad"), default_error_code=ErrorCode.INVALID_INPUT.value)
        assert result["error"]["code"] == ErrorCode.INVALID_INPUT.value
