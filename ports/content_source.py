"""
Port interface for content sources.

Implementations: JsonContentSource and its subclasses (adapters/);
ContactSource also implements SubmissionSourcePort.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, runtime_checkable

from domain.models import ContentBatch


@runtime_checkable
class ContentSourcePort(Protocol):
    """A site section that can render a page and, optionally, feed search."""

    source_id: str

    def page(self, **params: Any) -> Dict[str, Any]:
        """Return the JSON payload served at ``/api/<source_id>``."""
        ...

    def get(self) -> Optional[ContentBatch]:
        """Return the searchable records of this source.

        Returns:
            PostsBatch or ItemsBatch, or None for sources that are not searchable.

        Raises:
            SourceUnavailableError: If the underlying content cannot be read.
        """
        ...


@runtime_checkable
class SubmissionSourcePort(Protocol):
    """A site section that also accepts form posts (``POST /api/<source_id>``)."""

    source_id: str

    def post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Validate and store one submission.

        Returns:
            ``{"ok": True}`` once stored.

        Raises:
            ValidationError: If required fields are missing.
            SourceUnavailableError: If the submission cannot be stored.
        """
        ...
