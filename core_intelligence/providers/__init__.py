"""
Abstract base classes for swappable embedding providers.

Records and queries are embedded through separate calls: retrieval models
such as OpenAI's, Titan's or BGE's treat the two sides differently, while
the hashing provider maps both to the same vector.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional
import logging

from shared_utils.constants import LogScope


class BaseProvider(ABC):
    """Base class for all providers."""

    def __init__(self, name: str):
        self.name = name
        self.logger = logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")

    @abstractmethod
    def initialize(self) -> None:
        """Initialize provider. Called after instantiation."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if provider is available and credentials are valid."""
        pass


class EmbeddingProviderBase(BaseProvider):
    """Abstract base for embedding providers."""

    @abstractmethod
    def embed_text(self, text: str) -> List[float]:
        """Embed a searchable record's text."""
        pass

    def embed_query(self, text: str) -> List[float]:
        """Embed a search query. Symmetric providers reuse embed_text."""
        return self.embed_text(text)

    @abstractmethod
    def get_embedding_dimension(self) -> int:
        """Return dimensionality of embeddings."""
        pass


class LlamaIndexEmbeddingProvider(EmbeddingProviderBase):
    """Adapts a llama-index ``BaseEmbedding`` to the embedding port.

    Subclasses build the concrete model in ``_build_model()``; records go
    through ``get_text_embedding`` and queries through ``get_query_embedding``.
    """

    def __init__(self, name: str):
        super().__init__(name=name)
        self._embedding: Optional[Any] = None

    @abstractmethod
    def _build_model(self) -> Any:
        """Return the configured llama-index embedding model."""

    def _describe(self) -> dict:
        """Extra log fields for the initialisation event."""
        return {}

    def initialize(self) -> None:
        try:
            self._embedding = self._build_model()
            self.logger.info(
                f"Initialized {self.name}",
                extra={
                    "scope": LogScope.PROVIDER,
                    "dimension": self.get_embedding_dimension(),
                    **self._describe(),
                },
            )
        except Exception as e:
            self._embedding = None
            self.logger.error(
                f"Failed to initialize {self.name}",
                extra={"scope": LogScope.PROVIDER, "error": str(e)},
            )
            raise

    def is_available(self) -> bool:
        return self._embedding is not None

    def embed_text(self, text: str) -> List[float]:
        return self._call("get_text_embedding", text)

    def embed_query(self, text: str) -> List[float]:
        return self._call("get_query_embedding", text)

    def _call(self, method: str, text: str) -> List[float]:
        if not self.is_available():
            raise RuntimeError(f"{self.name} not initialized")
        try:
            return getattr(self._embedding, method)(text)
        except Exception as e:
            self.logger.error(
                "Embedding generation failed",
                extra={"scope": LogScope.PROVIDER, "provider": self.name, "call": method, "error": str(e)},
            )
            raise
