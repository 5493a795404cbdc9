"""
Ingestion service — builds the search index once at process start.

Flow:  content sources → map to records → embed (bounded pool) → vector index → READY.

Depends only on ports (protocol interfaces) — never on concrete adapters.
"""

from __future__ import annotations

import threading
import time
from collections import deque
from concurrent.futures import FIRST_COMPLETED, Future, wait
from datetime import datetime, timezone
from typing import Any, Callable, Deque, Dict, List, Optional, Sequence, Tuple

from domain.models import (
    IngestionReport,
    ItemsBatch,
    PostsBatch,
    SearchableRecord,
    build_embedding_input,
)
from ports.content_source import ContentSourcePort
from ports.embedding_provider import EmbeddingProviderPort
from ports.vector_store import VectorStorePort
from services.readiness import ReadinessGate
from shared_utils.constants import Defaults, LogScope
from shared_utils.error_handler import (
    DimensionMismatchError,
    EmbeddingFailedError,
    SourceUnavailableError,
)
from shared_utils.logging_utils import get_scoped_logger

logger = get_scoped_logger(LogScope.INGESTION)

POST_DISPLAY_FIELDS = ("excerpt", "date", "link", "thumbnail", "category", "slug")
ITEM_DISPLAY_FIELDS = ("description", "category", "link", "thumbnail", "period")


# ---------------------------------------------------------------------------
# Record mapping helpers (pure functions, no external deps)
# ---------------------------------------------------------------------------

def _text(entry: Dict[str, Any], key: str) -> str:
    value = entry.get(key)
    return str(value).strip() if value is not None else ""


def _display_fields(entry: Dict[str, Any], keys: Sequence[str]) -> Dict[str, Any]:
    return {k: entry[k] for k in keys if entry.get(k) not in (None, "")}


def _map_post(source_id: str, post: Dict[str, Any]) -> Dict[str, Any]:
    """Blog posts are searched on title + excerpt."""
    return {
        "source_id": source_id,
        "title": _text(post, "title"),
        "secondary_text": _text(post, "excerpt"),
        "metadata": _display_fields(post, POST_DISPLAY_FIELDS),
    }


def _map_item(source_id: str, item: Dict[str, Any]) -> Dict[str, Any]:
    """Portfolio items are searched on title + description + category."""
    return {
        "source_id": source_id,
        "title": _text(item, "title"),
        "secondary_text": build_embedding_input(
            _text(item, "description"), _text(item, "category")
        ),
        "metadata": _display_fields(item, ITEM_DISPLAY_FIELDS),
    }


def map_batch(source_id: str, batch) -> List[Dict[str, Any]]:
    """Resolve a PostsBatch / ItemsBatch into pending (un-embedded) records."""
    if isinstance(batch, PostsBatch):
        return [_map_post(source_id, p) for p in batch.posts]
    if isinstance(batch, ItemsBatch):
        return [_map_item(source_id, i) for i in batch.items]
    raise TypeError(f"Unsupported content batch: {type(batch).__name__}")


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _start_call(fn: Callable[[str], List[float]], text: str) -> Future:
    """Run ``fn(text)`` on its own daemon thread and return its future.

    The thread is never joined: an abandoned call that never returns
    cannot hold up the caller or interpreter exit.
    """
    future: Future = Future()

    def _target() -> None:
        future.set_running_or_notify_cancel()
        try:
            future.set_result(fn(text))
        except Exception as exc:
            future.set_exception(exc)

    threading.Thread(target=_target, daemon=True, name="ingest-embed").start()
    return future


# ---------------------------------------------------------------------------
# IngestionService
# ---------------------------------------------------------------------------

class IngestionService:
    """Runs the single ingestion pass and owns the INDEXING → READY transition.

    This is the only writer of the vector index.
    """

    def __init__(
        self,
        sources: Sequence[ContentSourcePort],
        embedding_provider: EmbeddingProviderPort,
        index: VectorStorePort,
        readiness: ReadinessGate,
        max_workers: int = Defaults.INGEST_MAX_WORKERS,
        embed_timeout_s: float = Defaults.INGEST_EMBED_TIMEOUT_S,
    ) -> None:
        self._sources = list(sources)
        self._embedder = embedding_provider
        self._index = index
        self._readiness = readiness
        self._max_workers = max(1, max_workers)
        self._embed_timeout_s = embed_timeout_s
        self.last_report: Optional[IngestionReport] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self) -> IngestionReport:
        """Pull every source, embed every record, fill the index, mark READY.

        Steps:
            1. NOT_STARTED → INDEXING (raises if ingestion already ran).
            2. Fetch each source; a failing source is skipped.
            3. Map entries to pending records; untitled entries are skipped.
            4. Embed with bounded parallelism; failed/timed-out records are
               dropped. Vectors must match the provider's declared dimension.
            5. Append successes to the index in original source-record order.
            6. INDEXING → READY, even when nothing was indexed.

        Raises:
            InvalidStateTransition: If called more than once.
            DimensionMismatchError: If the provider returns vectors whose
                length differs from ``get_embedding_dimension()`` or from
                each other. Readiness then stays INDEXING.
        """
        started = time.time()
        started_at = _utc_now()
        self._readiness.begin_indexing()
        logger.info("ingestion_started", sources=[s.source_id for s in self._sources])

        pending: List[Dict[str, Any]] = []
        failed_sources: List[str] = []
        records_seen = 0
        records_skipped = 0

        for source in self._sources:
            try:
                batch = self._fetch(source)
            except SourceUnavailableError as exc:
                failed_sources.append(source.source_id)
                logger.warning(
                    "source_unavailable",
                    source_id=source.source_id,
                    error=exc.message,
                )
                continue

            if batch is None:
                logger.debug("source_not_searchable", source_id=source.source_id)
                continue

            mapped = map_batch(source.source_id, batch)
            records_seen += len(mapped)
            for entry in mapped:
                if entry["title"]:
                    pending.append(entry)
                else:
                    records_skipped += 1
                    logger.warning("record_missing_title", source_id=source.source_id)

        records = self._embed_all(pending)
        self._check_dimension(records)
        self._index.add_many(records)
        self._readiness.mark_ready()

        duration_ms = (time.time() - started) * 1000
        report = IngestionReport(
            state=self._readiness.state,
            sources_total=len(self._sources),
            sources_failed=failed_sources,
            records_seen=records_seen,
            records_indexed=len(records),
            records_skipped=records_skipped,
            records_failed=len(pending) - len(records),
            started_at=started_at,
            completed_at=_utc_now(),
            duration_ms=duration_ms,
        )
        self.last_report = report
        logger.info(
            "ingestion_completed",
            records_indexed=report.records_indexed,
            records_failed=report.records_failed,
            sources_failed=failed_sources,
            duration_ms=round(duration_ms, 1),
        )
        return report

    def start_background(self) -> threading.Thread:
        """Run ingestion on a daemon thread so the server can accept requests now."""

        def _run() -> None:
            try:
                self.run()
            except Exception as exc:
                logger.error(
                    "ingestion_aborted",
                    error=f"{type(exc).__name__}: {exc}",
                    state=self._readiness.state.value,
                )

        thread = threading.Thread(target=_run, daemon=True, name="search-ingestion")
        thread.start()
        return thread

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _fetch(source: ContentSourcePort):
        """Call ``source.get()``, normalising any failure to SourceUnavailableError."""
        try:
            return source.get()
        except SourceUnavailableError:
            raise
        except Exception as exc:
            raise SourceUnavailableError(
                source.source_id, f"{type(exc).__name__}: {exc}"
            ) from exc

    def _embed_one(self, text: str) -> List[float]:
        vector = self._embedder.embed_text(text)
        if not vector:
            raise ValueError("provider returned an empty embedding")
        return list(vector)

    def _embed_all(self, pending: List[Dict[str, Any]]) -> List[SearchableRecord]:
        """Embed pending records with at most ``max_workers`` live calls.

        A record's timeout starts when its call starts, not while it waits
        for a free slot. A call that overruns is abandoned and its slot goes
        to the next queued record, so one hung call costs one record.
        Results land in slots indexed by original position, so the output
        order never depends on completion order.
        """
        if not pending:
            return []

        slots: List[Optional[SearchableRecord]] = [None] * len(pending)
        queue: Deque[int] = deque(range(len(pending)))
        in_flight: Dict[Future, Tuple[int, float]] = {}

        while queue or in_flight:
            while queue and len(in_flight) < self._max_workers:
                position = queue.popleft()
                entry = pending[position]
                text = build_embedding_input(entry["title"], entry["secondary_text"])
                in_flight[_start_call(self._embed_one, text)] = (position, time.monotonic())

            oldest = min(started for _, started in in_flight.values())
            remaining = oldest + self._embed_timeout_s - time.monotonic()
            done, _ = wait(list(in_flight), timeout=max(0.0, remaining), return_when=FIRST_COMPLETED)

            for future in done:
                position, _ = in_flight.pop(future)
                try:
                    vector = future.result()
                except Exception as exc:
                    self._report_failure(pending[position], f"{type(exc).__name__}: {exc}")
                    continue
                slots[position] = SearchableRecord(embedding=vector, **pending[position])

            now = time.monotonic()
            for future, (position, started) in list(in_flight.items()):
                if not future.done() and now - started >= self._embed_timeout_s:
                    del in_flight[future]
                    self._report_failure(
                        pending[position], f"timed out after {self._embed_timeout_s}s"
                    )

        return [r for r in slots if r is not None]

    def _check_dimension(self, records: List[SearchableRecord]) -> None:
        """Every vector must have the length the provider declares."""
        expected = self._embedder.get_embedding_dimension()
        for record in records:
            if len(record.embedding) != expected:
                raise DimensionMismatchError(expected=expected, actual=len(record.embedding))

    @staticmethod
    def _report_failure(entry: Dict[str, Any], reason: str) -> None:
        err = EmbeddingFailedError(entry["source_id"], entry["title"], reason)
        logger.warning(
            "record_embedding_failed",
            error_code=err.error_code,
            source_id=entry["source_id"],
            title=entry["title"],
            error=reason,
        )
