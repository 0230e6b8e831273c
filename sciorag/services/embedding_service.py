"""Provider-keyed embedding computation.

:class:`EmbeddingService` owns one adapter per embedding-capable provider id
and answers ``compute_embedding(text, provider_id)`` with a vector or
``None``.  ``None`` covers every way an embedding can be unavailable: an
unknown or generation-only provider, a missing credential, a transport or
parse failure.  Callers treat all of them the same way (store without a
vector, or fall back to keyword ranking), so the service never raises.
"""

from __future__ import annotations

from typing import Iterable

import structlog

from sciorag.interfaces.embedding_provider import IEmbeddingProvider
from sciorag.utils.errors import SciRagError

logger = structlog.get_logger(logger_name=__name__)


class EmbeddingService:
    """Routes embedding requests to the adapter registered for a provider id.

    Parameters
    ----------
    providers:
        Adapters to register, keyed by their ``get_provider_name()``.
    """

    def __init__(self, providers: Iterable[IEmbeddingProvider]) -> None:
        self._providers: dict[str, IEmbeddingProvider] = {
            p.get_provider_name(): p for p in providers
        }

    @property
    def provider_ids(self) -> list[str]:
        return list(self._providers)

    def get_provider(self, provider_id: str | None) -> IEmbeddingProvider | None:
        """Return the adapter for *provider_id* if it is registered and configured."""
        if not provider_id:
            return None
        provider = self._providers.get(provider_id)
        if provider is None or not provider.is_available():
            return None
        return provider

    def is_available(self, provider_id: str | None) -> bool:
        return self.get_provider(provider_id) is not None

    async def compute_embedding(self, text: str, provider_id: str | None) -> list[float] | None:
        """Embed *text* with *provider_id*; ``None`` when unavailable."""
        provider = self.get_provider(provider_id)
        if provider is None:
            logger.debug("embedding_unavailable", provider=provider_id)
            return None

        try:
            vector = await provider.embed_single(text)
        except SciRagError as exc:
            logger.warning("embedding_failed", provider=provider_id, error=str(exc))
            return None
        except Exception as exc:  # noqa: BLE001 -- any SDK surprise degrades the same way
            logger.warning(
                "embedding_failed_unexpected",
                provider=provider_id,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return None

        if not vector:
            logger.warning("embedding_empty", provider=provider_id)
            return None
        return [float(v) for v in vector]
