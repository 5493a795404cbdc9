"""
QueryService — free-text query to ranked search results.

Orchestrates:
    1. Reject blank queries and queries issued before the index is READY.
    2. Embed the query via EmbeddingProviderPort.embed_query (bounded by a timeout).
    3. Score every record in the VectorStorePort (exact scan).
    4. Stable sort by descending score and truncate to top_k.

No framework / vendor imports — depends only on ports & domain models.
"""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import List, Optional

from domain.models import ReadinessState, ScoredRecord
from ports.embedding_provider import EmbeddingProviderPort
from ports.vector_store import VectorStorePort
from services.readiness import ReadinessGate
from shared_utils.constants import Defaults, LogScope
from shared_utils.error_handler import (
    EmbeddingUnavailableError,
    EmptyQueryError,
    NotReadyError,
)
from shared_utils.logging_utils import ContextualLogger


logger = ContextualLogger(scope=LogScope.QUERY_SERVICE)


class QueryService:
    """Read-only ranking service; safe to call from many request threads."""

    def __init__(
        self,
        *,
        index: VectorStorePort,
        embedding_provider: EmbeddingProviderPort,
        readiness: ReadinessGate,
        default_top_k: int = Defaults.SEARCH_TOP_K,
        embed_timeout_s: float = Defaults.QUERY_EMBED_TIMEOUT_S,
        max_concurrent_embeds: int = 8,
    ) -> None:
        self._index = index
        self._embedder = embedding_provider
        self._readiness = readiness
        self._default_top_k = default_top_k
        self._embed_timeout_s = embed_timeout_s
        self._executor = ThreadPoolExecutor(
            max_workers=max_concurrent_embeds, thread_name_prefix="query-embed"
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def search(self, query: str, top_k: Optional[int] = None) -> List[ScoredRecord]:
        """Rank every indexed record against ``query``.

        Args:
            query: Free-text query; surrounding whitespace is ignored.
            top_k: Result cap, clamped to [1, index size]. Defaults to the
                service's ``default_top_k``.

        Returns:
            Up to ``top_k`` ScoredRecords, highest score first. Ties keep
            ingestion order. An empty index yields an empty list.

        Raises:
            EmptyQueryError: If the trimmed query is empty.
            NotReadyError: If ingestion has not completed.
            EmbeddingUnavailableError: If embedding the query fails or times out.
        """
        text = (query or "").strip()
        if not text:
            raise EmptyQueryError()

        state = self._readiness.state
        if state is not ReadinessState.READY:
            logger.info("search_rejected_not_ready", state=state.value)
            raise NotReadyError(state.value)

        started = time.time()
        query_vector = self._embed_query(text)

        scored = self._index.score_all(query_vector)
        if not scored:
            logger.info("search_completed", results=0, index_size=0)
            return []

        limit = _clamp(top_k if top_k is not None else self._default_top_k, 1, len(scored))
        # sorted() is stable: equal scores keep ingestion order.
        ranked = sorted(scored, key=lambda s: s.score, reverse=True)[:limit]

        logger.info(
            "search_completed",
            query_len=len(text),
            results=len(ranked),
            index_size=len(scored),
            top_score=round(ranked[0].score, 4),
            latency_ms=round(_elapsed_ms(started), 1),
        )
        return ranked

    def close(self) -> None:
        """Release the embedding worker threads."""
        self._executor.shutdown(wait=False, cancel_futures=True)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _embed_query(self, text: str) -> List[float]:
        future = self._executor.submit(self._embedder.embed_query, text)
        try:
            vector = future.result(timeout=self._embed_timeout_s)
        except FutureTimeoutError as exc:
            future.cancel()
            logger.error("query_embedding_timeout", timeout_s=self._embed_timeout_s)
            raise EmbeddingUnavailableError(
                f"Query embedding timed out after {self._embed_timeout_s}s",
                context={"timeout_s": self._embed_timeout_s},
            ) from exc
        except Exception as exc:
            error_msg = f"{type(exc).__name__}: {exc}"
            logger.error("query_embedding_failed", error=error_msg)
            raise EmbeddingUnavailableError(
                f"Query embedding failed: {error_msg}"
            ) from exc

        if not vector:
            raise EmbeddingUnavailableError("Query embedding was empty")
        return list(vector)


# ------------------------------------------------------------------
# Module-level helpers
# ------------------------------------------------------------------

def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def _elapsed_ms(started: float) -> float:
    """Return milliseconds elapsed since *started*."""
    return (time.time() - started) * 1000
