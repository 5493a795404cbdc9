"""
Port interface for embedding operations.

The concrete providers live in core_intelligence/providers/.
This port formalises the contract so services depend on the interface, not the impl.
"""

from __future__ import annotations

from typing import List, Protocol, runtime_checkable


@runtime_checkable
class EmbeddingProviderPort(Protocol):
    """Abstract interface for text embedding.

    Treated as a pure but possibly slow and fallible function.
    """

    def embed_text(self, text: str) -> List[float]:
        """Embed a searchable record (title plus secondary text).

        Args:
            text: Input text.

        Returns:
            Embedding vector of ``get_embedding_dimension()`` floats.
        """
        ...

    def embed_query(self, text: str) -> List[float]:
        """Embed a user's search query into the same vector space."""
        ...

    def get_embedding_dimension(self) -> int:
        """Return the dimensionality of produced embeddings.

        Ingestion rejects vectors of any other length.
        """
        ...
