"""
OpenAI embeddings via llama-index.
"""

from llama_index.embeddings.openai import OpenAIEmbedding

from core_intelligence.providers import LlamaIndexEmbeddingProvider
from shared_utils.constants import Defaults, ModelIDs

# Output sizes; other models are assumed to match text-embedding-3-small
_DIMENSIONS = {
    ModelIDs.OPENAI_EMBEDDING_ADA: 1536,
    ModelIDs.OPENAI_EMBED_MODEL: 1536,
    ModelIDs.OPENAI_EMBEDDING_LARGE: 3072,
}


class OpenAIEmbeddingProvider(LlamaIndexEmbeddingProvider):
    """Hosted OpenAI embeddings; needs OPENAI_API_KEY (or the Secrets Manager entry)."""

    def __init__(self, api_key: str, model: str = ModelIDs.OPENAI_EMBED_MODEL):
        super().__init__(name=f"OpenAIEmbedding({model})")
        self.api_key = api_key
        self.model = model

    def _build_model(self) -> OpenAIEmbedding:
        return OpenAIEmbedding(api_key=self.api_key, model=self.model)

    def _describe(self) -> dict:
        return {"model": self.model}

    def get_embedding_dimension(self) -> int:
        return _DIMENSIONS.get(self.model, Defaults.EMBEDDING_DIMENSION)
