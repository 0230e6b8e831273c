"""Unit tests for EmbeddingService routing and degradation."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from sciorag.interfaces.embedding_provider import IEmbeddingProvider
from sciorag.services.embedding_service import EmbeddingService
from tests.conftest import FakeEmbeddingProvider


class TestRouting:
    def test_provider_ids(self) -> None:
        service = EmbeddingService([FakeEmbeddingProvider("openai"), FakeEmbeddingProvider("google")])
        assert service.provider_ids == ["openai", "google"]

    def test_unconfigured_provider_unavailable(self) -> None:
        service = EmbeddingService([FakeEmbeddingProvider("openai", available=False)])
        assert service.is_available("openai") is False

    def test_bedrock_never_available(self) -> None:
        service = EmbeddingService([FakeEmbeddingProvider("openai")])
        assert service.is_available("bedrock") is False
        assert service.get_provider("bedrock") is None

    @pytest.mark.asyncio
    async def test_routes_to_matching_provider(self) -> None:
        openai_p = FakeEmbeddingProvider("openai", default=[1.0, 0.0])
        google_p = FakeEmbeddingProvider("google", default=[0.0, 1.0])
        service = EmbeddingService([openai_p, google_p])

        assert await service.compute_embedding("x", "google") == [0.0, 1.0]
        assert google_p.calls == ["x"]
        assert openai_p.calls == []


class TestDegradation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("provider_id", [None, "", "bedrock", "unknown"])
    async def test_unavailable_returns_none(self, provider_id) -> None:
        fake = FakeEmbeddingProvider("openai")
        service = EmbeddingService([fake])
        assert await service.compute_embedding("text", provider_id) is None
        assert fake.calls == []

    @pytest.mark.asyncio
    async def test_missing_credential_returns_none(self) -> None:
        fake = FakeEmbeddingProvider("google", available=False)
        assert await EmbeddingService([fake]).compute_embedding("text", "google") is None
        assert fake.calls == []

    @pytest.mark.asyncio
    async def test_embedding_error_returns_none(self) -> None:
        fake = FakeEmbeddingProvider("openai")
        fake.fail = True
        assert await EmbeddingService([fake]).compute_embedding("text", "openai") is None

    @pytest.mark.asyncio
    async def test_unexpected_exception_returns_none(self) -> None:
        mock = MagicMock(spec=IEmbeddingProvider)
        mock.get_provider_name.return_value = "openai"
        mock.is_available.return_value = True
        mock.embed_single = AsyncMock(side_effect=RuntimeError("socket closed"))
        assert await EmbeddingService([mock]).compute_embedding("text", "openai") is None

    @pytest.mark.asyncio
    async def test_empty_vector_returns_none(self) -> None:
        fake = FakeEmbeddingProvider("openai", vectors={"text": []})
        assert await EmbeddingService([fake]).compute_embedding("text", "openai") is None
