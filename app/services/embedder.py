# =============================================================================
# Embedding Service — Case & Template Vectors (OpenAI-compatible)
# =============================================================================
#
# Turns text into fixed-length vectors for relevance ranking. Two callers:
#   - template ingestion embeds every template letter once (embed_batch)
#   - each appeal request embeds the seller's case summary (embed_text)
#
# The client is synchronous; async callers run it in asyncio.to_thread().
# Inputs are truncated to embedding_max_input_tokens first because whole
# template letters can exceed the model's context.
#
# Retries are left to the OpenAI SDK defaults.
# =============================================================================

from __future__ import annotations

import logging
from collections.abc import Sequence

from openai import OpenAI

from app.config import settings
from app.services.tokens import truncate_to_tokens

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Embedding Client — Lazy Singleton
# ---------------------------------------------------------------------------
# API key resolution order:
#   1. OPENAI_API_KEY
#   2. LLM_API_KEY (shared key for completions + embeddings)
# ---------------------------------------------------------------------------

_client: OpenAI | None = None


def _get_client() -> OpenAI:
    """Lazily initialize and cache the embedding client."""
    global _client
    if _client is None:
        resolved_key = settings.openai_api_key or settings.llm_api_key
        if not resolved_key:
            raise ValueError(
                "No API key configured for embeddings. "
                "Set OPENAI_API_KEY or LLM_API_KEY in .env"
            )

        client_kwargs: dict = {"api_key": resolved_key}
        if settings.embedding_base_url:
            client_kwargs["base_url"] = settings.embedding_base_url

        _client = OpenAI(**client_kwargs)

        logger.info(
            "Initialized embedding client (model=%s, base_url=%s)",
            settings.embedding_model,
            settings.embedding_base_url or "https://api.openai.com/v1",
        )
    return _client


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def embed_batch(
    texts: Sequence[str],
    batch_size: int | None = None,
) -> list[list[float]]:
    """
    Embed texts in sequential sub-batches.

    Output order equals input order. An empty input returns an empty list
    without touching the API.

    Raises:
        ValueError: If no API key is configured.
        openai.APIError: If the embeddings call fails.
    """
    if not texts:
        return []

    client = _get_client()
    _batch_size = batch_size or settings.embedding_batch_size

    all_embeddings: list[list[float]] = [[] for _ in texts]

    for i in range(0, len(texts), _batch_size):
        batch = [
            truncate_to_tokens(t, settings.embedding_max_input_tokens)
            for t in texts[i : i + _batch_size]
        ]
        logger.info(
            "Embedding batch %d-%d of %d texts (model=%s)",
            i + 1,
            min(i + _batch_size, len(texts)),
            len(texts),
            settings.embedding_model,
        )

        create_kwargs: dict = {
            "model": settings.embedding_model,
            "input": batch,
        }
        if settings.embedding_dimensions:
            create_kwargs["dimensions"] = settings.embedding_dimensions

        response = client.embeddings.create(**create_kwargs)

        # Items carry their batch index; place by index, not arrival order.
        for item in response.data:
            all_embeddings[i + item.index] = item.embedding

        logger.debug(
            "Batch complete: %d embeddings, %d prompt tokens",
            len(batch),
            response.usage.prompt_tokens if response.usage else 0,
        )

    return all_embeddings


def embed_text(text: str) -> list[float]:
    """Embed a single text (the seller's case summary at request time)."""
    return embed_batch([text], batch_size=1)[0]
