"""Unit tests for batched embedding generation."""

import asyncio

import pytest

from app.application.interfaces.embedding_provider import EmbeddingProvider
from app.application.services import EmbeddingService
from app.application.services import embedding_service as embedding_module
from app.domain.entities import ChunkKind, DocumentChunk
from app.domain.exceptions import EmbeddingBatchError, EmbeddingProviderError, IngestionCancelledError


# ── Helpers ──


class FakeEmbeddingProvider(EmbeddingProvider):
    """Returns one 3-d vector per text, optionally misbehaving on a given batch."""

    def __init__(self, *, short_on_batch: int | None = None, fail_on_batch: int | None = None):
        self.calls: list[list[str]] = []
        self._short_on_batch = short_on_batch
        self._fail_on_batch = fail_on_batch

    async def generate_embeddings(self, texts: list[str]) -> list[list[float]]:
        batch_index = len(self.calls)
        self.calls.append(list(texts))
        if batch_index == self._fail_on_batch:
            raise EmbeddingProviderError("fake", 429, "rate limited", retryable=True)
        vectors = [[float(len(t)), float(batch_index), 1.0] for t in texts]
        if batch_index == self._short_on_batch:
            return vectors[:-1]
        return vectors

    @property
    def dimensions(self) -> int:
        return 3


def _chunks(count: int) -> list[DocumentChunk]:
    return [
        DocumentChunk(content=f"Chunk number {i}", kind=ChunkKind.SEMANTIC, community_name="Elm")
        for i in range(count)
    ]


@pytest.fixture
def sleeps(monkeypatch) -> list[float]:
    recorded: list[float] = []

    async def fake_sleep(delay: float) -> None:
        recorded.append(delay)

    monkeypatch.setattr(embedding_module.asyncio, "sleep", fake_sleep)
    return recorded


# ── Tests ──


@pytest.mark.asyncio
async def test_batches_of_fifty_with_delay_between(sleeps: list[float]):
    provider = FakeEmbeddingProvider()
    service = EmbeddingService(provider)

    vectors = await service.embed_chunks(_chunks(120))

    assert [len(batch) for batch in provider.calls] == [50, 50, 20]
    assert sleeps == [0.1, 0.1]
    assert len(vectors) == 120
    assert vectors[0][1] == 0.0 and vectors[119][1] == 2.0


@pytest.mark.asyncio
async def test_vectors_follow_chunk_order(sleeps: list[float]):
    provider = FakeEmbeddingProvider()
    service = EmbeddingService(provider, batch_size=2)
    chunks = _chunks(5)

    vectors = await service.embed_chunks(chunks)

    assert [v[0] for v in vectors] == [float(c.char_count) for c in chunks]
    assert provider.calls[2] == ["Chunk number 4"]


@pytest.mark.asyncio
async def test_length_mismatch_is_fatal(sleeps: list[float]):
    provider = FakeEmbeddingProvider(short_on_batch=1)
    service = EmbeddingService(provider)

    with pytest.raises(EmbeddingBatchError) as exc_info:
        await service.embed_chunks(_chunks(120))

    assert exc_info.value.batch_index == 1
    assert exc_info.value.completed_batches == 1
    assert "sent 50 texts, received 49 vectors" in exc_info.value.message
    assert len(provider.calls) == 2


@pytest.mark.asyncio
async def test_provider_error_is_wrapped_with_retry_hint(sleeps: list[float]):
    provider = FakeEmbeddingProvider(fail_on_batch=0)
    service = EmbeddingService(provider)

    with pytest.raises(EmbeddingBatchError) as exc_info:
        await service.embed_chunks(_chunks(10))

    assert exc_info.value.phase == "embedding"
    assert exc_info.value.retryable is True
    assert isinstance(exc_info.value.__cause__, EmbeddingProviderError)


@pytest.mark.asyncio
async def test_cancellation_between_batches(sleeps: list[float]):
    cancel = asyncio.Event()

    class CancellingProvider(FakeEmbeddingProvider):
        async def generate_embeddings(self, texts: list[str]) -> list[list[float]]:
            cancel.set()
            return await super().generate_embeddings(texts)

    provider = CancellingProvider()
    service = EmbeddingService(provider)

    with pytest.raises(IngestionCancelledError) as exc_info:
        await service.embed_chunks(_chunks(120), cancel_event=cancel)

    assert exc_info.value.completed_batches == 1
    assert exc_info.value.stored_count == 0
    assert len(provider.calls) == 1


@pytest.mark.asyncio
async def test_no_chunks_no_calls(sleeps: list[float]):
    provider = FakeEmbeddingProvider()

    assert await EmbeddingService(provider).embed_chunks([]) == []
    assert provider.calls == []
    assert sleeps == []
