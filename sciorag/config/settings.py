"""Application settings loaded from environment variables via pydantic-settings.

Settings are read from two sources, in priority order:

  1. **Environment variables** -- e.g. ``OPENAI_API_KEY=sk-abc123``
  2. **.env file** -- key=value lines in the working directory

Field ``openai_api_key`` maps to env var ``OPENAI_API_KEY`` and so on.
An empty string means "not configured": providers whose credential is empty
report themselves unavailable and the engine degrades instead of failing.

One :class:`Settings` instance is built at process start and passed into
every component; nothing else reads the environment.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

# Closed allow-list of provider identifiers, in default-selection order.
ALLOWED_PROVIDERS: tuple[str, ...] = ("openai", "google", "bedrock")


class Settings(BaseSettings):
    """sciorag settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Embedding / LLM providers ===
    openai_api_key: str = ""
    openai_base_url: str = ""  # OpenAI-compatible gateway, empty = api.openai.com
    openai_embedding_model: str = "text-embedding-3-small"
    google_api_key: str = ""
    google_api_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    google_embedding_model: str = "text-embedding-004"
    http_timeout: float = 30.0

    # === Source backends ===
    local_docs_dir: str = "./local_docs"
    s3_bucket: str = ""  # empty = remote backend disabled
    s3_prefix: str = "local_docs/"
    aws_region: str = "us-east-1"

    # === Persistence ===
    db_path: str = "data/documents.db"

    # === Snippets & retrieval ===
    generic_snippet_chars: int = 4000
    tabular_snippet_chars: int = 24000
    query_embedding_chars: int = 1000
    retrieval_top_k: int = 3
    sync_concurrency: int = 1

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"

    def get_available_providers(self) -> list[str]:
        """Return provider ids whose credential is configured, in priority order.

        ``bedrock`` authenticates through the ambient AWS credential chain and
        is always listed last.
        """
        providers: list[str] = []
        if self.openai_api_key:
            providers.append("openai")
        if self.google_api_key:
            providers.append("google")
        providers.append("bedrock")
        return providers

    def default_provider(self) -> str:
        """Provider used when no ProviderConfig record has been saved."""
        return self.get_available_providers()[0]
