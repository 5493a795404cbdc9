"""
Root conftest.py — shared fixtures for the entire test suite.

Guidelines:
    • No __init__.py in test sub-directories (avoids shadowing root packages).
    • pytest.ini_options lives in pyproject.toml with pythonpath=["."].
    • Markers: integration.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from adapters.in_memory_vector_store import VectorIndex
from core_intelligence.providers.hashing_embedding import HashingEmbeddingProvider
from domain.models import ItemsBatch, PostsBatch, SearchableRecord
from services.readiness import ReadinessGate


# ---------------------------------------------------------------------------
# Marker registration
# ---------------------------------------------------------------------------

def pytest_configure(config):
    config.addinivalue_line("markers", "integration: mark test as integration test")


# ---------------------------------------------------------------------------
# Sample content
# ---------------------------------------------------------------------------

SAMPLE_POSTS: List[Dict[str, Any]] = [
    {
        "title": "Distributed Caches",
        "excerpt": "notes on eviction",
        "date": "2024-03-02",
        "link": "/blog/distributed-caches",
    },
    {
        "title": "Zephyr Essay",
        "excerpt": "about cooking",
        "date": "2023-11-18",
    },
]

SAMPLE_ITEMS: List[Dict[str, Any]] = [
    {
        "title": "Weather App",
        "description": "a simple UI project",
        "category": "Applications",
        "period": "2021",
    },
    {
        "title": "Alpha Project",
        "description": "search demo",
        "category": "",
        "period": "2023",
    },
]


def make_source(
    source_id: str,
    batch: Optional[Any] = None,
    error: Optional[Exception] = None,
) -> MagicMock:
    """ContentSourcePort mock returning ``batch`` (or raising ``error``) from get()."""
    source = MagicMock()
    source.source_id = source_id
    if error is not None:
        source.get.side_effect = error
    else:
        source.get.return_value = batch
    return source


def make_record(
    title: str,
    embedding: List[float],
    source_id: str = "blog",
    secondary_text: str = "",
    metadata: Optional[Dict[str, Any]] = None,
) -> SearchableRecord:
    return SearchableRecord(
        source_id=source_id,
        title=title,
        secondary_text=secondary_text,
        metadata=metadata or {},
        embedding=embedding,
    )


def ready_gate() -> ReadinessGate:
    gate = ReadinessGate()
    gate.begin_indexing()
    gate.mark_ready()
    return gate


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def hashing_embedder() -> HashingEmbeddingProvider:
    """Deterministic, network-free embedding provider."""
    provider = HashingEmbeddingProvider(dimension=4096)
    provider.initialize()
    return provider


@pytest.fixture()
def blog_source() -> MagicMock:
    return make_source("blog", PostsBatch(posts=SAMPLE_POSTS))


@pytest.fixture()
def portfolio_source() -> MagicMock:
    return make_source("portfolio", ItemsBatch(items=SAMPLE_ITEMS))


@pytest.fixture()
def empty_index() -> VectorIndex:
    return VectorIndex()


@pytest.fixture()
def content_dir(tmp_path: Path) -> Path:
    """A content directory with every JSON file the site sections read."""
    files = {
        "profile.json": {"name": "Alex Rivera", "role": "Engineer", "contact": {"email": "a@example.com"}},
        "about.json": {"paragraphs": ["Hello."]},
        "resume.json": {"experience": [{"title": "Engineer", "period": "2020 — Present"}]},
        "portfolio.json": {
            "categories": ["All", "Applications", "Web development"],
            "items": SAMPLE_ITEMS,
        },
        "blog.json": {"posts": SAMPLE_POSTS},
    }
    for name, payload in files.items():
        (tmp_path / name).write_text(json.dumps(payload), encoding="utf-8")
    return tmp_path
