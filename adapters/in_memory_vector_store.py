"""
In-memory vector index.

Implements VectorStorePort using a plain Python list + brute-force cosine
similarity. The corpus is a personal site's worth of posts and projects,
so an exact linear scan is all the search needs.

No persistence across restarts; the index is rebuilt at every start.
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple

from domain.models import ScoredRecord, SearchableRecord
from shared_utils.constants import LogScope
from shared_utils.error_handler import DimensionMismatchError
from shared_utils.logging_utils import get_scoped_logger


logger = get_scoped_logger(LogScope.ADAPTER)


class VectorIndex:
    """Append-only, insertion-ordered implementation of VectorStorePort.

    Single writer (the ingestion pass); after readiness the contents never
    change, so concurrent readers need no locking.
    """

    def __init__(self) -> None:
        self._records: List[SearchableRecord] = []
        self._dimension: Optional[int] = None

    # ------------------------------------------------------------------
    # VectorStorePort implementation
    # ------------------------------------------------------------------

    @property
    def dimension(self) -> Optional[int]:
        return self._dimension

    def add(self, record: SearchableRecord) -> None:
        """Append one record, enforcing a single dimensionality."""
        size = len(record.embedding)
        if size == 0 or (self._dimension is not None and size != self._dimension):
            raise DimensionMismatchError(
                expected=self._dimension,
                actual=size,
                context={"source_id": record.source_id, "title": record.title},
            )
        if self._dimension is None:
            self._dimension = size
        self._records.append(record)

    def add_many(self, records: Sequence[SearchableRecord]) -> None:
        """Append records in the given order."""
        for record in records:
            self.add(record)
        logger.info("vector_index_records_added", count=len(records), total=len(self._records))

    def score_all(self, query_vector: List[float]) -> List[ScoredRecord]:
        """Cosine similarity of ``query_vector`` against every record."""
        if not self._records:
            return []
        if len(query_vector) != self._dimension:
            raise DimensionMismatchError(
                expected=self._dimension,
                actual=len(query_vector),
                context={"operation": "score_all"},
            )

        query_norm = _norm(query_vector)
        return [
            ScoredRecord(
                record=r,
                score=_cosine(query_vector, query_norm, r.embedding),
            )
            for r in self._records
        ]

    def records(self) -> Tuple[SearchableRecord, ...]:
        """Snapshot of the stored records in insertion order."""
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _norm(v: Sequence[float]) -> float:
    return math.sqrt(sum(x * x for x in v))


def _cosine(a: Sequence[float], norm_a: float, b: Sequence[float]) -> float:
    """Cosine similarity; embeddings are expected unit-norm but are not trusted to be."""
    norm_b = _norm(b)
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    dot = sum(x * y for x, y in zip(a, b))
    return dot / (norm_a * norm_b)

