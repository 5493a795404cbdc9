"""
Local sentence-transformers embeddings via llama-index.

Runs on the API host: the model is downloaded from the Hugging Face hub
on first use and cached, after which no network access is needed.
"""

from typing import Optional

from llama_index.embeddings.huggingface import HuggingFaceEmbedding

from core_intelligence.providers import LlamaIndexEmbeddingProvider
from shared_utils.constants import ModelIDs

_SAMPLE_TEXT = "dimension check"


class LocalEmbeddingProvider(LlamaIndexEmbeddingProvider):
    """Sentence-transformers model loaded in-process."""

    def __init__(
        self,
        model_name: str = ModelIDs.LOCAL_EMBED_MODEL,
        cache_folder: Optional[str] = None,
    ):
        super().__init__(name=f"LocalEmbedding({model_name})")
        self.model_name = model_name
        self.cache_folder = cache_folder
        self._dimension: Optional[int] = None

    def _build_model(self) -> HuggingFaceEmbedding:
        return HuggingFaceEmbedding(model_name=self.model_name, cache_folder=self.cache_folder)

    def _describe(self) -> dict:
        return {"model": self.model_name}

    def get_embedding_dimension(self) -> int:
        """Measured once from the loaded model's output."""
        if self._dimension is None:
            self._dimension = len(self.embed_text(_SAMPLE_TEXT))
        return self._dimension
