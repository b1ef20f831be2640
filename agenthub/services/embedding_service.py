"""Embedding service for generating vector embeddings"""

import logging
from typing import List, Optional
from functools import lru_cache

from agenthub.config import settings
from agenthub.errors import EmbeddingDimensionError

logger = logging.getLogger(__name__)


class EmbeddingService:
    """Service for generating text embeddings with the OpenAI embeddings API"""

    _instance: Optional["EmbeddingService"] = None
    _openai_client = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def dimension(self) -> int:
        return settings.embedding_dimension

    @property
    def openai_client(self):
        if self._openai_client is None:
            from openai import OpenAI
            self._openai_client = OpenAI(api_key=settings.openai_api_key)
            logger.info(f"OpenAI client initialized for model: {settings.embedding_model}")
        return self._openai_client

    def check_dimension(self, embedding: List[float]) -> List[float]:
        if len(embedding) != self.dimension:
            raise EmbeddingDimensionError(self.dimension, len(embedding))
        return embedding

    def embed(self, text: str) -> List[float]:
        """Generate embedding for a single text"""
        response = self.openai_client.embeddings.create(
            model=settings.embedding_model,
            input=text,
        )
        return self.check_dimension(response.data[0].embedding)

    def embed_batch(self, texts: List[str]) -> List[List[float]]:
        """Generate embeddings for multiple texts"""
        if not texts:
            return []

        response = self.openai_client.embeddings.create(
            model=settings.embedding_model,
            input=texts,
        )
        # Sort by index to maintain order
        sorted_data = sorted(response.data, key=lambda x: x.index)
        return [self.check_dimension(item.embedding) for item in sorted_data]


@lru_cache()
def get_embedding_service() -> EmbeddingService:
    """Get the singleton embedding service"""
    return EmbeddingService()
