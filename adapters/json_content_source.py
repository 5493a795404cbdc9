"""
JSON-file adapters for ContentSourcePort.

Each site section reads its data file(s) from ``content_dir`` on every
request, so editing a file changes the rendered page straight away. The
search index only sees content as it was at process start.
"""

from __future__ import annotations

import json
import os
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from domain.models import ContentBatch, ItemsBatch, PostsBatch
from shared_utils.constants import LogScope, SourceID
from shared_utils.error_handler import SourceUnavailableError, ValidationError
from shared_utils.logging_utils import ContextualLogger, log_execution


logger = ContextualLogger(scope=LogScope.ADAPTER)

PROFILE_FILE = "profile.json"
MESSAGES_FILE = "messages.json"

CONTACT_FIELDS = ("name", "email", "message")


class JsonContentSource:
    """Base class: reads ``<content_dir>/<name>.json`` files for one section."""

    source_id: str = ""

    def __init__(self, content_dir: str) -> None:
        self._content_dir = content_dir

    # ------------------------------------------------------------------
    # ContentSourcePort implementation
    # ------------------------------------------------------------------

    def page(self, **params: Any) -> Dict[str, Any]:
        return {"profile": self._load(PROFILE_FILE)}

    def get(self) -> Optional[ContentBatch]:
        """Page-only sections contribute nothing to search."""
        return None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @log_execution(scope=LogScope.ADAPTER, level="DEBUG")
    def _load(self, filename: str) -> Any:
        path = os.path.join(self._content_dir, filename)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning(
                "content_file_unreadable",
                source_id=self.source_id,
                path=path,
                error=str(exc),
            )
            raise SourceUnavailableError(
                self.source_id,
                f"{type(exc).__name__}: {exc}",
                context={"path": path},
            ) from exc

    def _load_list(self, filename: str, key: str) -> List[Dict[str, Any]]:
        data = self._load(filename)
        entries = data.get(key) if isinstance(data, dict) else None
        if not isinstance(entries, list):
            raise SourceUnavailableError(
                self.source_id,
                f"'{key}' missing from {filename}",
                context={"path": os.path.join(self._content_dir, filename)},
            )
        return [e for e in entries if isinstance(e, dict)]


class AboutSource(JsonContentSource):
    """About page: profile aside plus paragraphs and "what I'm doing" cards."""

    source_id = SourceID.ABOUT

    def page(self, **params: Any) -> Dict[str, Any]:
        return {"profile": self._load(PROFILE_FILE), "about": self._load("about.json")}


class ResumeSource(JsonContentSource):
    source_id = SourceID.RESUME

    def page(self, **params: Any) -> Dict[str, Any]:
        return {"profile": self._load(PROFILE_FILE), "resume": self._load("resume.json")}


class PortfolioSource(JsonContentSource):
    """Portfolio projects. The page can be filtered by category (``?cat=``)."""

    source_id = SourceID.PORTFOLIO

    def page(self, **params: Any) -> Dict[str, Any]:
        portfolio = self._load("portfolio.json")
        items = portfolio.get("items", [])
        cat = (params.get("cat") or "All").lower()
        if cat != "all":
            items = [i for i in items if str(i.get("category", "")).lower() == cat]
        return {
            "profile": self._load(PROFILE_FILE),
            "categories": portfolio.get("categories", []),
            "items": items,
        }

    def get(self) -> ContentBatch:
        return ItemsBatch(items=self._load_list("portfolio.json", "items"))


class BlogSource(JsonContentSource):
    source_id = SourceID.BLOG

    def page(self, **params: Any) -> Dict[str, Any]:
        return {
            "profile": self._load(PROFILE_FILE),
            "posts": self._load("blog.json").get("posts", []),
        }

    def get(self) -> ContentBatch:
        return PostsBatch(posts=self._load_list("blog.json", "posts"))


class ContactSource(JsonContentSource):
    """Contact page cards plus the contact form.

    Posted messages are appended to ``<content_dir>/messages.json``.
    """

    source_id = SourceID.CONTACT

    def __init__(self, content_dir: str) -> None:
        super().__init__(content_dir)
        self._lock = threading.Lock()

    def page(self, **params: Any) -> Dict[str, Any]:
        profile = self._load(PROFILE_FILE)
        contact = profile.get("contact") or {}
        return {
            "profile": profile,
            "contact": {k: contact.get(k) for k in ("email", "phone", "location")},
        }

    def post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        fields = {k: str(payload.get(k) or "").strip() for k in CONTACT_FIELDS}
        missing = [k for k, v in fields.items() if not v]
        if missing:
            raise ValidationError(
                "name, email and message are required", context={"missing": missing}
            )

        message = {**fields, "ts": datetime.now(timezone.utc).isoformat()}
        with self._lock:
            messages = self._read_messages()
            messages.append(message)
            self._write_messages(messages)
        logger.info("contact_message_saved", total_messages=len(messages))
        return {"ok": True}

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @property
    def _messages_path(self) -> str:
        return os.path.join(self._content_dir, MESSAGES_FILE)

    def _read_messages(self) -> List[Dict[str, Any]]:
        if not os.path.exists(self._messages_path):
            return []
        messages = self._load(MESSAGES_FILE)
        if not isinstance(messages, list):
            raise SourceUnavailableError(
                self.source_id,
                f"{MESSAGES_FILE} is not a list",
                context={"path": self._messages_path},
            )
        return messages

    def _write_messages(self, messages: List[Dict[str, Any]]) -> None:
        try:
            with open(self._messages_path, "w", encoding="utf-8") as f:
                json.dump(messages, f, indent=2)
        except OSError as exc:
            raise SourceUnavailableError(
                self.source_id,
                f"{type(exc).__name__}: {exc}",
                context={"path": self._messages_path},
            ) from exc


def build_default_sources(content_dir: str) -> List[JsonContentSource]:
    """The site's sections in navigation order."""
    return [
        AboutSource(content_dir),
        ResumeSource(content_dir),
        PortfolioSource(content_dir),
        BlogSource(content_dir),
        ContactSource(content_dir),
    ]
