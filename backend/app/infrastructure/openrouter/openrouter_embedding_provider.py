"""OpenRouter-based embedding provider — calls the OpenAI-compatible /embeddings endpoint.

Default model: openai/text-embedding-3-small (1536 dimensions).
Error responses, malformed bodies and timeouts are raised as
``EmbeddingProviderError``; timeouts, transport failures, 408/429 and 5xx
responses are marked retryable. Nothing is retried here.
"""

import logging
from typing import Any

import httpx

from app.application.interfaces.embedding_provider import EmbeddingProvider
from app.domain.exceptions import EmbeddingProviderError

logger = logging.getLogger(__name__)

_PROVIDER_NAME = "openrouter"
_RETRYABLE_STATUS = frozenset({408, 429})
_ERROR_BODY_LIMIT = 500


class OpenRouterEmbeddingProvider(EmbeddingProvider):
    """Infrastructure adapter — embeds chunk batches via the OpenRouter /embeddings API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://openrouter.ai/api/v1",
        app_name: str = "Listing Chunker",
        model: str = "openai/text-embedding-3-small",
        model_dimensions: int = 1536,
        timeout_seconds: float = 60.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._api_key = api_key
        self._endpoint = f"{base_url.rstrip('/')}/embeddings"
        self._app_name = app_name
        self._model = model
        self._dimensions = model_dimensions
        self._timeout = timeout_seconds
        self._http_client = http_client

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def _get_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "X-Title": self._app_name,
        }

    async def generate_embeddings(self, texts: list[str]) -> list[list[float]]:
        """Embed one batch; vectors are returned in the order of ``texts``."""
        if not texts:
            return []

        payload: dict[str, Any] = {
            "model": self._model,
            "input": texts,
            "dimensions": self._dimensions,
        }
        if self._http_client is not None:
            response = await self._post(self._http_client, payload)
        else:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await self._post(client, payload)

        vectors = self._parse_vectors(response)
        logger.info("Embedded %d texts (model=%s, dims=%d)", len(vectors), self._model, self._dimensions)
        return vectors

    async def _post(self, client: httpx.AsyncClient, payload: dict[str, Any]) -> httpx.Response:
        try:
            response = await client.post(self._endpoint, headers=self._get_headers(), json=payload)
        except httpx.TimeoutException as exc:
            logger.error("Embedding API timed out after %.0fs", self._timeout)
            raise EmbeddingProviderError(_PROVIDER_NAME, None, f"timeout: {exc}", retryable=True) from exc
        except httpx.TransportError as exc:
            logger.error("Embedding API transport error: %s", exc)
            raise EmbeddingProviderError(_PROVIDER_NAME, None, str(exc), retryable=True) from exc

        if response.status_code != 200:
            error_text = response.text[:_ERROR_BODY_LIMIT]
            logger.error("Embedding API error %d: %s", response.status_code, error_text)
            retryable = response.status_code >= 500 or response.status_code in _RETRYABLE_STATUS
            raise EmbeddingProviderError(_PROVIDER_NAME, response.status_code, error_text, retryable=retryable)
        return response

    @staticmethod
    def _parse_vectors(response: httpx.Response) -> list[list[float]]:
        """Pull ``data[*].embedding`` out of the body, ordered by each item's ``index``."""
        try:
            items = response.json()["data"]
            ordered = sorted(items, key=lambda item: item.get("index", 0))
            return [item["embedding"] for item in ordered]
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise EmbeddingProviderError(
                _PROVIDER_NAME, response.status_code, f"malformed embeddings response: {exc!r}"
            ) from exc
