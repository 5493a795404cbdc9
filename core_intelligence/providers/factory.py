"""
Factory for creating configured provider instances.
Handles provider instantiation with dependency injection.
"""

from typing import Optional
import logging

from core_intelligence.providers import EmbeddingProviderBase
from shared_utils.config_loader import Settings, get_settings
from shared_utils.constants import EmbeddingProvider, LogScope


logger = logging.getLogger(__name__)


class EmbeddingProviderFactory:
    """Factory for creating embedding providers."""

    @staticmethod
    def create(
        provider_type: Optional[str] = None,
        settings: Optional[Settings] = None,
    ) -> EmbeddingProviderBase:
        """Create configured embedding provider.

        Args:
            provider_type: Optional override. If None, uses config value.
            settings: Optional settings. If None, uses get_settings().

        Returns:
            Initialized embedding provider.

        Raises:
            ValueError: If provider type is unknown or config is invalid.
        """
        settings = settings or get_settings()
        embed_provider = provider_type or settings.embed_provider

        logger.info(
            "Creating embedding provider",
            extra={"scope": LogScope.CONFIG, "provider": embed_provider}
        )

        try:
            if embed_provider == EmbeddingProvider.LOCAL.value:
                from core_intelligence.providers.local_embedding import LocalEmbeddingProvider

                provider = LocalEmbeddingProvider(
                    model_name=settings.local_embed_model_id,
                    cache_folder=settings.local_model_cache_dir,
                )

            elif embed_provider == EmbeddingProvider.HASHING.value:
                from core_intelligence.providers.hashing_embedding import HashingEmbeddingProvider

                provider = HashingEmbeddingProvider(dimension=settings.hashing_dimension)

            elif embed_provider == EmbeddingProvider.OPENAI.value:
                if not settings.openai_api_key:
                    raise ValueError("OPENAI_API_KEY not configured")
                from core_intelligence.providers.openai_embedding import OpenAIEmbeddingProvider

                provider = OpenAIEmbeddingProvider(
                    api_key=settings.openai_api_key,
                    model=settings.openai_embed_model_id,
                )

            elif embed_provider == EmbeddingProvider.BEDROCK.value:
                if not settings.bedrock_region or not settings.bedrock_embed_model_id:
                    raise ValueError("BEDROCK_REGION or BEDROCK_EMBED_MODEL_ID not configured")
                from core_intelligence.providers.bedrock_embedding import BedrockEmbeddingProvider

                provider = BedrockEmbeddingProvider(
                    model_id=settings.bedrock_embed_model_id,
                    region=settings.bedrock_region
                )

            else:
                raise ValueError(f"Unknown embedding provider: {embed_provider}")

            provider.initialize()
            return provider

        except Exception as e:
            logger.error(
                "Failed to create embedding provider",
                extra={"scope": LogScope.CONFIG, "provider": embed_provider, "error": str(e)}
            )
            raise
