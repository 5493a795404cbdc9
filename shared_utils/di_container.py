"""
Dependency container for the search runtime.
Centralizes provider creation and lifecycle management.

One SearchContainer is built per process (by the API's app factory) and
handed to whoever needs it; there is no module-level instance.
"""

from typing import List, Optional, Sequence
import logging
import threading

from adapters.in_memory_vector_store import VectorIndex
from core_intelligence.providers.factory import EmbeddingProviderFactory
from ports.content_source import ContentSourcePort
from ports.embedding_provider import EmbeddingProviderPort
from services.ingestion_service import IngestionService
from services.query_service import QueryService
from services.readiness import ReadinessGate
from shared_utils.config_loader import Settings, get_settings
from shared_utils.constants import LogScope
from shared_utils.error_handler import SourceNotFoundError


logger = logging.getLogger(__name__)


class SearchContainer:
    """Owns the vector index, the readiness gate and the services around them."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        sources: Optional[Sequence[ContentSourcePort]] = None,
        embedding_provider: Optional[EmbeddingProviderPort] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._sources = list(sources) if sources is not None else None
        self._embedding_provider = embedding_provider
        self._ingestion_service: Optional[IngestionService] = None
        self._query_service: Optional[QueryService] = None
        # Guards the lazy getters; request threads may call them concurrently.
        self._lock = threading.RLock()

        self.index = VectorIndex()
        self.readiness = ReadinessGate()

    def get_sources(self) -> List[ContentSourcePort]:
        """Get or create the content sources (lazy)."""
        with self._lock:
            if self._sources is None:
                from adapters.json_content_source import build_default_sources

                self._sources = build_default_sources(self.settings.content_dir)
                logger.info(
                    "Initialized content sources",
                    extra={"scope": LogScope.CONFIG, "content_dir": self.settings.content_dir}
                )
            return self._sources

    def get_source(self, source_id: str) -> ContentSourcePort:
        for source in self.get_sources():
            if source.source_id == source_id:
                return source
        raise SourceNotFoundError(source_id)

    def get_embedding_provider(self) -> EmbeddingProviderPort:
        """Get or create embedding provider (lazy).

        Raises:
            RuntimeError: If provider initialization fails.
        """
        with self._lock:
            if self._embedding_provider is None:
                logger.info(
                    "Initializing embedding provider",
                    extra={"scope": LogScope.CONFIG}
                )
                try:
                    self._embedding_provider = EmbeddingProviderFactory.create(settings=self.settings)
                except Exception as e:
                    logger.error(
                        "Failed to initialize embedding provider",
                        extra={"scope": LogScope.CONFIG, "error": str(e)}
                    )
                    raise RuntimeError(f"Embedding provider initialization failed: {e}") from e

            return self._embedding_provider

    def get_ingestion_service(self) -> IngestionService:
        """Get or create IngestionService (lazy)."""
        with self._lock:
            if self._ingestion_service is None:
                self._ingestion_service = IngestionService(
                    sources=self.get_sources(),
                    embedding_provider=self.get_embedding_provider(),
                    index=self.index,
                    readiness=self.readiness,
                    max_workers=self.settings.ingest_max_workers,
                    embed_timeout_s=self.settings.ingest_embed_timeout_s,
                )
                logger.info("Initialized IngestionService")
            return self._ingestion_service

    def get_query_service(self) -> QueryService:
        """Get or create QueryService (lazy). Exactly one per container."""
        with self._lock:
            if self._query_service is None:
                self._query_service = QueryService(
                    index=self.index,
                    embedding_provider=self.get_embedding_provider(),
                    readiness=self.readiness,
                    default_top_k=self.settings.search_top_k,
                    embed_timeout_s=self.settings.query_embed_timeout_s,
                )
                logger.info("Initialized QueryService")
            return self._query_service

    def start_indexing(self):
        """Kick off the one ingestion pass in the background."""
        return self.get_ingestion_service().start_background()

    def shutdown(self) -> None:
        with self._lock:
            if self._query_service is not None:
                self._query_service.close()
