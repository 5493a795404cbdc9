"""
Pure domain models for the portfolio search service.

These models contain NO framework or vendor dependencies beyond pydantic.
They represent the core concepts that flow through ports and services.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Readiness
# ---------------------------------------------------------------------------


class ReadinessState(str, Enum):
    """Search readiness. Transitions only move forward, once each."""

    NOT_STARTED = "NOT_STARTED"
    INDEXING = "INDEXING"
    READY = "READY"


# ---------------------------------------------------------------------------
# Content source output
# ---------------------------------------------------------------------------


class PostsBatch(BaseModel):
    """Blog-style source output: a list of posts."""

    kind: Literal["posts"] = "posts"
    posts: List[Dict[str, Any]] = []


class ItemsBatch(BaseModel):
    """Portfolio-style source output: a list of items."""

    kind: Literal["items"] = "items"
    items: List[Dict[str, Any]] = []


ContentBatch = Annotated[Union[PostsBatch, ItemsBatch], Field(discriminator="kind")]


# ---------------------------------------------------------------------------
# Index records
# ---------------------------------------------------------------------------


class SearchableRecord(BaseModel):
    """One unit of searchable content with its embedding.

    Created once during ingestion and never mutated afterwards: the
    embedding is a tuple and ``metadata`` is a private copy of the input.
    """

    model_config = ConfigDict(frozen=True)

    source_id: str
    title: str
    secondary_text: str = ""
    metadata: Dict[str, Any] = {}
    embedding: Tuple[float, ...]

    @field_validator("title")
    @classmethod
    def _title_required(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("title must be non-empty")
        return v

    @field_validator("metadata")
    @classmethod
    def _copy_metadata(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        return dict(v)

    @field_validator("embedding")
    @classmethod
    def _embedding_required(cls, v: Tuple[float, ...]) -> Tuple[float, ...]:
        if not v:
            raise ValueError("embedding must be non-empty")
        return v

    @property
    def doc_id(self) -> str:
        """Stable identifier the client uses to jump to the record in-page."""
        return self.title

    @property
    def embedding_input(self) -> str:
        return build_embedding_input(self.title, self.secondary_text)


class ScoredRecord(BaseModel):
    """A record paired with its cosine similarity to a query."""

    model_config = ConfigDict(frozen=True)

    record: SearchableRecord
    score: float

    def to_response(self) -> Dict[str, Any]:
        """Wire shape for /api/search: display fields plus ``similarity``."""
        body: Dict[str, Any] = {
            "type": self.record.source_id,
            "id": self.record.doc_id,
            "title": self.record.title,
        }
        body.update(
            {k: v for k, v in self.record.metadata.items() if v not in (None, "")}
        )
        body["similarity"] = self.score
        return body


def build_embedding_input(*parts: str) -> str:
    """Space-join the non-empty parts into the text sent to the embedder."""
    return " ".join(p.strip() for p in parts if p and p.strip())


# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------


class IngestionReport(BaseModel):
    """Summary produced when the ingestion pass completes."""

    state: ReadinessState
    sources_total: int = 0
    sources_failed: List[str] = []
    records_seen: int = 0
    records_indexed: int = 0
    records_skipped: int = 0
    records_failed: int = 0
    started_at: str = ""  # ISO 8601
    completed_at: str = ""  # ISO 8601
    duration_ms: float = 0.0
