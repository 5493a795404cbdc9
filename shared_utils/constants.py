"""
Constants management.
Centralized configuration for all magic values, model IDs, and defaults.
"""

from enum import Enum
from typing import Final


class Environment(str, Enum):
    """Application environment."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class EmbeddingProvider(str, Enum):
    """Supported embedding providers."""
    LOCAL = "local"
    HASHING = "hashing"
    OPENAI = "openai"
    BEDROCK = "bedrock"


# Model IDs
class ModelIDs:
    """Centralized model identifiers."""
    # OpenAI Embeddings
    OPENAI_EMBED_MODEL: Final[str] = "text-embedding-3-small"
    OPENAI_EMBEDDING_LARGE: Final[str] = "text-embedding-3-large"
    OPENAI_EMBEDDING_ADA: Final[str] = "text-embedding-ada-002"

    # Bedrock Embeddings
    BEDROCK_TITAN_EMBED_V2: Final[str] = "amazon.titan-embed-text-v2:0"

    # Local sentence-transformers model (384 dimensions)
    LOCAL_EMBED_MODEL: Final[str] = "sentence-transformers/all-MiniLM-L6-v2"


# Default values
class Defaults:
    """Defaults shared by settings, services and the UI."""
    EMBEDDING_DIMENSION: Final[int] = 1536  # OpenAI small dimension
    HASHING_DIMENSION: Final[int] = 512
    SEARCH_TOP_K: Final[int] = 10
    INGEST_MAX_WORKERS: Final[int] = 4
    INGEST_EMBED_TIMEOUT_S: Final[float] = 10.0
    QUERY_EMBED_TIMEOUT_S: Final[float] = 5.0
    SEARCH_DEBOUNCE_MS: Final[int] = 160
    MIN_SEARCH_DEBOUNCE_MS: Final[int] = 100
    SEARCH_RATE_LIMIT: Final[str] = "60/minute"
    REQUEST_TIMEOUT: Final[float] = 10.0
    CONTENT_DIR: Final[str] = "data"
    AWS_REGION: Final[str] = "eu-west-2"


# Content source identifiers
class SourceID:
    """Identifiers of the built-in content sources (also their /api/<id> path)."""
    ABOUT = "about"
    RESUME = "resume"
    PORTFOLIO = "portfolio"
    BLOG = "blog"
    CONTACT = "contact"


# Logging scopes
class LogScope:
    """Standardized logging scope names."""
    CONFIG = "config_loader"
    API = "api"
    UI = "ui"
    VALIDATION = "validation"
    ERROR_HANDLER = "error_handler"
    PROVIDER = "provider"
    INGESTION = "ingestion"
    QUERY_SERVICE = "query_service"
    READINESS = "readiness"
    ADAPTER = "adapter"


# API endpoints and paths
class APIEndpoints:
    """API route definitions."""
    HEALTH = "/health"
    ADAPTERS = "/api"
    SEARCH = "/api/search"
    CONTENT = "/api/{source_id}"


# Public error messages returned by the search gateway
class ErrorMessages:
    """User-facing error strings (kept stable for the client)."""
    QUERY_REQUIRED: Final[str] = 'Query parameter "q" is required.'
    NOT_READY: Final[str] = "Search is not ready yet."
    EMBEDDING_UNAVAILABLE: Final[str] = "Search is temporarily unavailable."


# Error codes
class ErrorCode(str, Enum):
    """Standardized error codes for consistency."""
    INVALID_INPUT = "INVALID_INPUT"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    SOURCE_UNAVAILABLE = "SOURCE_UNAVAILABLE"
    SOURCE_NOT_FOUND = "SOURCE_NOT_FOUND"
    SUBMISSION_NOT_SUPPORTED = "SUBMISSION_NOT_SUPPORTED"
    EMBEDDING_FAILED = "EMBEDDING_FAILED"
    EMBEDDING_UNAVAILABLE = "EMBEDDING_UNAVAILABLE"
    EMPTY_QUERY = "EMPTY_QUERY"
    NOT_READY = "NOT_READY"
    DIMENSION_MISMATCH = "DIMENSION_MISMATCH"
    INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"
