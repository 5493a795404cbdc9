"""
FastAPI backend for the portfolio site.

Endpoints:
    GET  /health                — Health check + search readiness
    GET  /api                   — List content sources
    GET  /api/search?q=<text>   — Semantic search over blog posts and portfolio items
    GET  /api/{source_id}       — Page payload of one content source (?cat= for portfolio)
    POST /api/{source_id}       — Form submission (contact)
"""

from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, Request, status
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
import uvicorn

from ports.content_source import SubmissionSourcePort
from shared_utils.config_loader import get_settings
from shared_utils.constants import APIEndpoints, ErrorMessages, LogScope
from shared_utils.di_container import SearchContainer
from shared_utils.error_handler import (
    AppException,
    EmbeddingUnavailableError,
    EmptyQueryError,
    NotReadyError,
    SubmissionNotSupportedError,
    ValidationError,
    handle_error,
)
from shared_utils.logging_utils import ContextualLogger, configure_logging
from shared_utils.validation import InputValidator


logger = ContextualLogger(scope=LogScope.API)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _unexpected(exc: Exception) -> JSONResponse:
    error_response = handle_error(exc, scope=LogScope.API)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, error_response["error"]["message"])


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------

def create_app(
    container: Optional[SearchContainer] = None,
    *,
    start_indexing: bool = True,
) -> FastAPI:
    """Build the API around one SearchContainer.

    Args:
        container: Runtime to serve. Built from settings when omitted.
        start_indexing: Launch the background ingestion pass on startup.
    """
    container = container or SearchContainer()
    settings = container.settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.environment, settings.log_level)
        if start_indexing:
            container.start_indexing()
        logger.info(
            "api_started",
            environment=settings.environment,
            embed_provider=settings.embed_provider,
        )
        yield
        container.shutdown()
        logger.info("api_stopped")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=settings.app_description,
        lifespan=lifespan,
    )
    app.state.container = container

    limiter = Limiter(key_func=get_remote_address)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # -----------------------------------------------------------------------
    # Health
    # -----------------------------------------------------------------------

    @app.get(APIEndpoints.HEALTH)
    def health_check() -> dict:
        """Health check endpoint. Healthy as soon as the process serves requests."""
        logger.debug("health_check_requested")
        return {
            "status": "healthy",
            "environment": settings.environment,
            "embed_provider": settings.embed_provider,
            "search_state": container.readiness.state.value,
            "indexed_records": len(container.index),
        }

    # -----------------------------------------------------------------------
    # Search
    # -----------------------------------------------------------------------

    @app.get(APIEndpoints.SEARCH)
    @limiter.limit(settings.search_rate_limit)
    def search(request: Request, q: Optional[str] = None) -> JSONResponse:
        """Semantic search. Returns up to ``search_top_k`` hits, best first."""
        try:
            results = container.get_query_service().search(q or "")
            return JSONResponse(content=[r.to_response() for r in results])

        except EmptyQueryError:
            return _error(status.HTTP_400_BAD_REQUEST, ErrorMessages.QUERY_REQUIRED)
        except NotReadyError:
            return _error(status.HTTP_503_SERVICE_UNAVAILABLE, ErrorMessages.NOT_READY)
        except EmbeddingUnavailableError as e:
            logger.warning("search_embedding_unavailable", error=e.message)
            return _error(status.HTTP_503_SERVICE_UNAVAILABLE, ErrorMessages.EMBEDDING_UNAVAILABLE)
        except Exception as e:
            return _unexpected(e)

    # -----------------------------------------------------------------------
    # Content sources
    # -----------------------------------------------------------------------

    @app.get(APIEndpoints.ADAPTERS)
    def list_sources() -> dict:
        """Quick index of the mounted content sources."""
        return {"adapters": [s.source_id for s in container.get_sources()]}

    @app.get(APIEndpoints.CONTENT)
    def get_content(source_id: str, cat: Optional[str] = None) -> JSONResponse:
        """Page payload for one site section."""
        try:
            InputValidator.validate_source_id(source_id)
            source = container.get_source(source_id)
            params = {"cat": cat} if cat else {}
            return JSONResponse(content=source.page(**params))

        except AppException as e:
            logger.warning("content_error", source_id=source_id, error_code=e.error_code)
            return _error(e.http_status, e.message)
        except Exception as e:
            return _unexpected(e)

    @app.post(APIEndpoints.CONTENT)
    def post_content(
        source_id: str, payload: Optional[Dict[str, Any]] = Body(default=None)
    ) -> JSONResponse:
        """Form submission for sections that accept one (the contact form).

        Missing form fields answer 400 ``{"ok": false, "error": ...}``.
        """
        try:
            InputValidator.validate_source_id(source_id)
            source = container.get_source(source_id)
            if not isinstance(source, SubmissionSourcePort):
                raise SubmissionNotSupportedError(source_id)
        except AppException as e:
            logger.warning("submission_error", source_id=source_id, error_code=e.error_code)
            return _error(e.http_status, e.message)

        try:
            return JSONResponse(content=source.post(payload or {}))

        except ValidationError as e:
            logger.info("submission_rejected", source_id=source_id, missing=e.context.get("missing"))
            return JSONResponse(status_code=e.http_status, content={"ok": False, "error": e.message})
        except AppException as e:
            logger.warning("submission_error", source_id=source_id, error_code=e.error_code)
            return _error(e.http_status, e.message)
        except Exception as e:
            return _unexpected(e)

    return app


app = create_app()


if __name__ == "__main__":
    _settings = get_settings()
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=_settings.api_port,
        log_level="info"
    )
