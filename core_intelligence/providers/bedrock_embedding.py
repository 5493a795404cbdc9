"""
Amazon Bedrock (Titan) embeddings via llama-index.
"""

from llama_index.embeddings.bedrock import BedrockEmbedding

from core_intelligence.providers import LlamaIndexEmbeddingProvider
from shared_utils.constants import Defaults, ModelIDs

# Titan text v2 default output size
TITAN_V2_DIMENSION = 1024


class BedrockEmbeddingProvider(LlamaIndexEmbeddingProvider):
    """Titan text embeddings through the Bedrock runtime; uses the ambient AWS credentials."""

    def __init__(self, model_id: str = ModelIDs.BEDROCK_TITAN_EMBED_V2, region: str = Defaults.AWS_REGION):
        super().__init__(name=f"BedrockEmbedding({model_id})")
        self.model_id = model_id
        self.region = region

    def _build_model(self) -> BedrockEmbedding:
        return BedrockEmbedding(model_name=self.model_id, region_name=self.region)

    def _describe(self) -> dict:
        return {"model_id": self.model_id, "region": self.region}

    def get_embedding_dimension(self) -> int:
        return TITAN_V2_DIMENSION
