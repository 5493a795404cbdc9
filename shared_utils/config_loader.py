from pydantic_settings import BaseSettings
from pydantic import ConfigDict, field_validator
from functools import lru_cache
from typing import Optional

import os
import json

import boto3

from shared_utils.constants import Defaults, EmbeddingProvider, Environment, LogScope, ModelIDs
from shared_utils.logging_utils import get_scoped_logger

logger = get_scoped_logger(LogScope.CONFIG)


def get_secret_from_aws(secret_name: str, region: str = Defaults.AWS_REGION) -> str:
    """Fetch the OpenAI API key from AWS Secrets Manager.

    Args:
        secret_name: Name of the secret in Secrets Manager
        region: AWS region

    Returns:
        Secret value or empty string if fetch fails
    """
    try:
        client = boto3.client("secretsmanager", region_name=region)
        response = client.get_secret_value(SecretId=secret_name)
        if "SecretString" in response:
            secret = json.loads(response["SecretString"])
            return secret.get("openai_api_key", "")
        return ""
    except Exception as e:
        logger.warning("secret_fetch_failed", secret_name=secret_name, error=str(e))
        return ""


class Settings(BaseSettings):
    """Application configuration with environment variable precedence.

    Precedence: 1) Environment Variables > 2) .env file > 3) Class defaults

    Everything has a default so the site runs locally with the bundled
    ``data/`` directory and a local sentence-transformers model.
    """
    # Application metadata
    app_name: str = "Portfolio Search"  # Configurable via APP_NAME env var
    app_version: str = "1.0.0"
    app_description: str = "Portfolio content API with semantic search"

    # API Base URL Configuration
    api_host: str = "localhost"  # Host for API (localhost, 0.0.0.0, or domain)
    api_port: int = 4267  # Port for API service
    api_protocol: str = "http"  # "http" or "https"

    # Environment
    environment: str = Environment.DEVELOPMENT.value
    log_level: str = "INFO"

    # Content
    content_dir: str = Defaults.CONTENT_DIR

    # Embedding Configuration (local sentence-transformers, hashing, OpenAI or Bedrock)
    embed_provider: str = EmbeddingProvider.LOCAL.value
    local_embed_model_id: str = ModelIDs.LOCAL_EMBED_MODEL
    local_model_cache_dir: Optional[str] = None
    hashing_dimension: int = Defaults.HASHING_DIMENSION
    openai_api_key: Optional[str] = None
    openai_secret_name: Optional[str] = None
    openai_embed_model_id: str = ModelIDs.OPENAI_EMBED_MODEL
    bedrock_region: str = Defaults.AWS_REGION
    bedrock_embed_model_id: Optional[str] = ModelIDs.BEDROCK_TITAN_EMBED_V2

    # Search
    search_top_k: int = Defaults.SEARCH_TOP_K
    ingest_max_workers: int = Defaults.INGEST_MAX_WORKERS
    ingest_embed_timeout_s: float = Defaults.INGEST_EMBED_TIMEOUT_S
    query_embed_timeout_s: float = Defaults.QUERY_EMBED_TIMEOUT_S
    search_rate_limit: str = Defaults.SEARCH_RATE_LIMIT
    search_debounce_ms: int = Defaults.SEARCH_DEBOUNCE_MS

    model_config = ConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    @field_validator('embed_provider')
    @classmethod
    def validate_embed_provider(cls, v: str) -> str:
        """Validate embedding provider is supported."""
        valid_providers = {p.value for p in EmbeddingProvider}
        if v.lower() not in valid_providers:
            raise ValueError(f"embed_provider must be one of {valid_providers}, got {v}")
        return v.lower()

    @field_validator('environment')
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is recognized."""
        valid_envs = {e.value for e in Environment}
        if v.lower() not in valid_envs:
            raise ValueError(f"environment must be one of {valid_envs}, got {v}")
        return v.lower()

    @field_validator('search_top_k', 'ingest_max_workers', 'hashing_dimension')
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"must be >= 1, got {v}")
        return v

    @field_validator('ingest_embed_timeout_s', 'query_embed_timeout_s')
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"timeout must be > 0, got {v}")
        return v

    @field_validator('search_debounce_ms')
    @classmethod
    def validate_debounce(cls, v: int) -> int:
        """The palette must wait at least 100ms after the last keystroke."""
        if v < Defaults.MIN_SEARCH_DEBOUNCE_MS:
            raise ValueError(
                f"search_debounce_ms must be >= {Defaults.MIN_SEARCH_DEBOUNCE_MS}, got {v}"
            )
        return v

    def get_api_base_url(self) -> str:
        """Get full API base URL constructed from host, port and protocol.

        Returns:
            Full API base URL (e.g., "http://localhost:4267")
        """
        # Don't add port if it's standard (80 for http, 443 for https)
        port_str = "" if (
            (self.api_protocol == "http" and self.api_port == 80) or
            (self.api_protocol == "https" and self.api_port == 443)
        ) else f":{self.api_port}"

        return f"{self.api_protocol}://{self.api_host}{port_str}"


@lru_cache()
def get_settings() -> Settings:
    """Load and cache application settings.

    Returns:
        Validated Settings instance

    Raises:
        ValueError: If settings are invalid
    """
    settings = Settings()

    # Fetch OpenAI key from Secrets Manager if needed
    if (
        settings.embed_provider == EmbeddingProvider.OPENAI.value
        and not settings.openai_api_key
        and settings.openai_secret_name
    ):
        secret_key = get_secret_from_aws(settings.openai_secret_name, settings.bedrock_region)
        if secret_key:
            settings.openai_api_key = secret_key
            os.environ.setdefault("OPENAI_API_KEY", secret_key)
            logger.debug("fetched_openai_key_from_secrets_manager")

    # Log loaded configuration (secrets omitted)
    logger.info(
        "configuration_loaded",
        environment=settings.environment,
        embed_provider=settings.embed_provider,
        content_dir=settings.content_dir,
        search_top_k=settings.search_top_k,
    )

    return settings
