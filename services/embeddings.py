"""
OpenAI embedding adapter: one text in, one vector out.
"""

import logging
from typing import List

import numpy as np
from openai import OpenAI, OpenAIError, RateLimitError

from models.config_models import AppSettings
from services.errors import EmbeddingError

logger = logging.getLogger(__name__)

class EmbeddingClient:
    """
    Wraps an OpenAI client with a single-text embedding call.

    Failures are raised as EmbeddingError and never retried here.
    """

    def __init__(self, client: OpenAI, model: str = "text-embedding-3-small",
                 max_input_chars: int = 8000):
        self.client = client
        self.model = model
        self.max_input_chars = max_input_chars

    def embed(self, text: str) -> List[float]:
        """
        Gets the vector representation of the text.
        """
        if len(text) > self.max_input_chars:
            logger.debug("Truncating embedding input from %d to %d characters",
                         len(text), self.max_input_chars)
            text = text[:self.max_input_chars]
        try:
            response = self.client.embeddings.create(
                model=self.model,
                input=text,
                encoding_format="float"
            )
        except RateLimitError as exc:
            raise EmbeddingError(str(exc), error_kind="rate_limit") from exc
        except OpenAIError as exc:
            raise EmbeddingError(str(exc)) from exc
        if not response.data:
            raise EmbeddingError("Embedding provider returned no data")
        return np.array(response.data[0].embedding, dtype=np.float32).tolist()

def build_embedding_client(settings: AppSettings) -> EmbeddingClient:
    """
    Creates the embedding adapter from settings.

    Raises:
        ValueError: If OPENAI_API_KEY is not configured.
    """
    if not settings.openai_api_key:
        raise ValueError("OPENAI_API_KEY environment variable is not set")
    client = OpenAI(api_key=settings.openai_api_key)
    logger.info("Initialized OpenAI client with API key: %s...", settings.openai_api_key[:5])
    return EmbeddingClient(
        client,
        model=settings.embedding_model,
        max_input_chars=settings.max_embedding_chars
    )
