# claim_validator/embedding_service.py

import threading
from typing import Any, List, Optional, Sequence

from sentence_transformers import SentenceTransformer

from .config import settings
from .logger import get_logger

logger = get_logger(__name__)


class EmbeddingService:
    """
    A service to turn claim and policy text into sentence embeddings.

    The model is loaded on first use. Embedding never raises: empty text or
    any encoder failure yields the zero vector, which scores 0 in every
    cosine comparison.
    """

    def __init__(self, model_name: Optional[str] = None, dimension: Optional[int] = None):
        self.model_name = model_name or settings.EMBEDDING_MODEL_NAME
        self.dimension = dimension or settings.EMBEDDING_DIMENSION
        self._model = None
        self._load_lock = threading.Lock()

    @property
    def model(self) -> SentenceTransformer:
        # Analyses embed from worker threads; load the model only once.
        with self._load_lock:
            if self._model is None:
                logger.info(f"Loading sentence transformer model: {self.model_name}...")
                self._model = SentenceTransformer(self.model_name)
                logger.info("Embedding model loaded successfully.")
        return self._model

    def zero_vector(self) -> List[float]:
        return [0.0] * self.dimension

    def embed(self, text: Any) -> List[float]:
        """
        Encodes one piece of text.

        Args:
            text: The text to embed. Non-strings are treated as empty.

        Returns:
            A list of `dimension` floats.
        """
        if not isinstance(text, str) or not text.strip():
            return self.zero_vector()
        try:
            vector = self.model.encode([text], convert_to_numpy=True)[0]
        except Exception as e:
            logger.error(f"Embedding failed, using zero vector: {e}", exc_info=True)
            return self.zero_vector()
        return [float(value) for value in vector]

    def embed_many(self, texts: Sequence[Any]) -> List[List[float]]:
        """Encodes several texts in one batch. Blank entries and failures give zero vectors."""
        vectors = [self.zero_vector() for _ in texts]
        positions = [i for i, text in enumerate(texts) if isinstance(text, str) and text.strip()]
        if not positions:
            return vectors
        try:
            encoded = self.model.encode([texts[i] for i in positions], convert_to_numpy=True)
        except Exception as e:
            logger.error(f"Batch embedding failed, using zero vectors: {e}", exc_info=True)
            return vectors
        for i, vector in zip(positions, encoded):
            vectors[i] = [float(value) for value in vector]
        return vectors


_embedding_service: Optional[EmbeddingService] = None


def get_embedding_service() -> EmbeddingService:
    """Shared service instance for the API."""
    global _embedding_service
    if _embedding_service is None:
        _embedding_service = EmbeddingService()
    return _embedding_service
