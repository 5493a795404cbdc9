"""
Deterministic local embedding provider.

Hashes word tokens and character trigrams into a fixed number of buckets
and L2-normalises the counts. No model, no network: good enough to rank a
small corpus by lexical overlap, and fully reproducible across runs, which
is what local development and the test suite need.
"""

import hashlib
import math
import re
from typing import List

from core_intelligence.providers import EmbeddingProviderBase
from shared_utils.constants import Defaults, LogScope


_TOKEN_RE = re.compile(r"[a-z0-9]+")

# Whole words weigh more than their trigrams.
WORD_WEIGHT = 2.0
TRIGRAM_WEIGHT = 1.0


class HashingEmbeddingProvider(EmbeddingProviderBase):
    """Feature-hashing embedder over words and character trigrams."""

    def __init__(self, dimension: int = Defaults.HASHING_DIMENSION):
        super().__init__(name=f"HashingEmbedding({dimension})")
        if dimension < 1:
            raise ValueError(f"dimension must be >= 1, got {dimension}")
        self.dimension = dimension
        self._initialized = False

    def initialize(self) -> None:
        self._initialized = True
        self.logger.info(
            "Initialized hashing embedding provider",
            extra={"scope": LogScope.PROVIDER, "dimension": self.dimension},
        )

    def is_available(self) -> bool:
        return self._initialized

    def embed_text(self, text: str) -> List[float]:
        """Return a unit-norm vector (all zeros for text with no tokens)."""
        if not self.is_available():
            raise RuntimeError("Hashing embedding provider not initialized")

        vector = [0.0] * self.dimension
        for token in _TOKEN_RE.findall(text.lower()):
            vector[self._bucket("w:" + token)] += WORD_WEIGHT
            padded = f"#{token}#"
            for i in range(len(padded) - 2):
                vector[self._bucket("t:" + padded[i:i + 3])] += TRIGRAM_WEIGHT

        norm = math.sqrt(sum(x * x for x in vector))
        if norm == 0.0:
            return vector
        return [x / norm for x in vector]

    def get_embedding_dimension(self) -> int:
        return self.dimension

    def _bucket(self, feature: str) -> int:
        digest = hashlib.sha256(feature.encode("utf-8")).digest()
        return int.from_bytes(digest[:8], "big") % self.dimension
