"""
Port interface for the vector index.

Implementations: VectorIndex (adapters/in_memory_vector_store.py)
"""

from __future__ import annotations

from typing import List, Optional, Protocol, Sequence, runtime_checkable

from domain.models import ScoredRecord, SearchableRecord


@runtime_checkable
class VectorStorePort(Protocol):
    """Append-only store with exact similarity scoring."""

    @property
    def dimension(self) -> Optional[int]:
        """Embedding dimensionality, or None while the store is empty."""
        ...

    def add(self, record: SearchableRecord) -> None:
        """Append a record whose embedding is already populated.

        Raises:
            DimensionMismatchError: If the embedding length differs from
                the records already stored.
        """
        ...

    def add_many(self, records: Sequence[SearchableRecord]) -> None:
        """Append records in the given order."""
        ...

    def score_all(self, query_vector: List[float]) -> List[ScoredRecord]:
        """Score every stored record against ``query_vector``.

        Returns:
            One ScoredRecord per stored record, in insertion order.
        """
        ...

    def __len__(self) -> int:
        ...
