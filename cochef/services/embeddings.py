import logging
from typing import Optional

from openai import OpenAI

from cochef.core.config import config
from cochef.core.errors import EmbeddingError
from cochef.services.providers import get_openai_client

logger = logging.getLogger(__name__)


def generate_embedding(text: str, client: Optional[OpenAI] = None) -> list[float]:
    """
    Turns text into an embedding vector with the text-only provider.

    Raises:
        EmbeddingError: the provider call failed or returned an empty vector.
    """
    try:
        client = client or get_openai_client()
        response = client.embeddings.create(model=config.EMBEDDING_MODEL, input=text)
        embedding = list(response.data[0].embedding)
    except Exception as e:
        logger.error(f"Error generating embedding: {e}")
        raise EmbeddingError("Failed to generate embedding") from e

    if not embedding:
        raise EmbeddingError("Embedding provider returned an empty vector")

    logger.debug(f"Generated embedding dimensions: {len(embedding)}")
    return embedding
