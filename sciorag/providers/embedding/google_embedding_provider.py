"""Google Generative Language embedding provider adapter.

Calls the ``models/<model>:embedContent`` REST endpoint directly with
``httpx`` -- one request per text, since the endpoint embeds a single
content part.  Authenticates with ``GOOGLE_API_KEY`` sent in the
``x-goog-api-key`` header, which keeps the key out of URLs and error text.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from sciorag.config.settings import Settings
from sciorag.interfaces.embedding_provider import IEmbeddingProvider
from sciorag.utils.errors import EmbeddingError, ProviderUnavailableError

logger = structlog.get_logger(logger_name=__name__)

_MODEL_DIMENSIONS: dict[str, int] = {
    "text-embedding-004": 768,
    "embedding-001": 768,
}


class GoogleEmbeddingProvider(IEmbeddingProvider):
    """Embedding provider backed by Google's Generative Language API.

    Parameters
    ----------
    settings:
        Supplies the API key, base URL and model name.
    http_client:
        Optional shared ``httpx.AsyncClient``.  When omitted a client is
        created per request.
    """

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = settings.google_api_key
        self._base_url = settings.google_api_base_url.rstrip("/")
        self._model = settings.google_embedding_model or "text-embedding-004"
        self._dimension = _MODEL_DIMENSIONS.get(self._model, 768)
        self._timeout = settings.http_timeout
        self._http_client = http_client

    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Embed each text with its own ``embedContent`` call."""
        if not texts:
            return []
        if not self._api_key:
            raise ProviderUnavailableError(
                message="GOOGLE_API_KEY is not configured",
                provider_name=self.get_provider_name(),
            )

        if self._http_client is not None:
            return [await self._embed_one(self._http_client, t) for t in texts]
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return [await self._embed_one(client, t) for t in texts]

    async def embed_single(self, text: str) -> list[float]:
        result = await self.embed([text])
        return result[0]

    def get_dimension(self) -> int:
        return self._dimension

    def get_provider_name(self) -> str:
        return "google"

    def is_available(self) -> bool:
        """Return ``True`` if an API key is configured."""
        return bool(self._api_key)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _embed_one(self, client: httpx.AsyncClient, text: str) -> list[float]:
        url = f"{self._base_url}/models/{self._model}:embedContent"
        body = {
            "model": f"models/{self._model}",
            "content": {"parts": [{"text": text}]},
        }
        try:
            response = await client.post(url, headers={"x-goog-api-key": self._api_key}, json=body)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise EmbeddingError(
                message=f"Google embedding request failed with HTTP {exc.response.status_code}",
                provider_name=self.get_provider_name(),
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise EmbeddingError(
                message=f"Google embedding request failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        vector = self._parse_vector(payload)
        if not vector:
            raise EmbeddingError(
                message="Google embedding response had no vector",
                provider_name=self.get_provider_name(),
            )
        logger.debug("google_embedding", model=self._model, dimension=len(vector))
        return vector

    @staticmethod
    def _parse_vector(payload: Any) -> list[float]:
        """Pull the vector out of an ``embedContent`` response.

        Current responses look like ``{"embedding": {"values": [...]}}``; the
        older PaLM ``embedText`` shape ``{"embedding": {"value": [...]}}`` and
        the batch shape ``{"embeddings": [{"values": [...]}]}`` are accepted
        too.
        """
        if not isinstance(payload, dict):
            return []
        embedding = payload.get("embedding")
        if embedding is None:
            batch = payload.get("embeddings") or []
            embedding = batch[0] if batch else None
        if isinstance(embedding, dict):
            values = embedding.get("values") or embedding.get("value") or []
        elif isinstance(embedding, list):
            values = embedding
        else:
            values = []
        return [float(v) for v in values]
