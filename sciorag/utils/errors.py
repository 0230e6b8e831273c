"""Custom exception hierarchy for sciorag.

All application exceptions inherit from :class:`SciRagError`, which carries
an optional ``provider_name`` so error handlers can identify which external
service (e.g. "openai", "s3", "sqlite") caused the failure.

The hierarchy is organized by ingestion/retrieval stage:

    SciRagError  (base -- catch-all for any sciorag error)
    +-- ConfigurationError       (malformed configuration file)
    +-- ExtractionError          (turning raw bytes into text)
    +-- EmbeddingError           (embedding API call or response parsing)
    +-- StoreError               (document/provider-config persistence)
    +-- SourceError              (listing or fetching a source item)
    +-- ProviderUnavailableError (credential missing for an external service)

Adapters raise these; the services decide whether a failure degrades
(embedding omitted, item skipped) or surfaces as an ``ok=False`` result.
"""


class SciRagError(Exception):
    """Base exception for all sciorag errors.

    The ``__str__`` method prefixes the provider name in brackets for
    structured log output, e.g. ``[openai] embedding request failed``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


class ConfigurationError(SciRagError):
    """Raised when configuration is invalid or missing."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Ingestion errors
# ---------------------------------------------------------------------------

class ExtractionError(SciRagError):
    """Raised when a raw byte buffer cannot be turned into text."""

    def __init__(
        self,
        message: str = "Text extraction failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class SourceError(SciRagError):
    """Raised when a source backend cannot list or fetch an item."""

    def __init__(
        self,
        message: str = "Source backend operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# External service / provider errors
# ---------------------------------------------------------------------------

class EmbeddingError(SciRagError):
    """Raised when an embedding API call fails or returns an unusable payload."""

    def __init__(
        self,
        message: str = "Embedding request failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ProviderUnavailableError(SciRagError):
    """Raised when an external service has no credential or is unreachable."""

    def __init__(
        self,
        message: str = "External service is unavailable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Persistence errors
# ---------------------------------------------------------------------------

class StoreError(SciRagError):
    """Raised when the document store cannot read or write a record."""

    def __init__(
        self,
        message: str = "Document store operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
