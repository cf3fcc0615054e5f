import json

import httpx
import pytest

from bebe_ai.core.embedder import EmbeddedChunk, Embedder, EmbeddingError
from bebe_ai.ingestion.base import Chunk
from bebe_ai.ingestion.models import MieuxVivreMetadata


def _embedder(handler):
    embedder = Embedder(api_key="test-key", http=httpx.Client(transport=httpx.MockTransport(handler)))
    embedder.sleeps = []
    embedder._sleep_with_jitter = embedder.sleeps.append
    return embedder


def _batch_handler(calls):
    def handler(request):
        payload = json.loads(request.content)
        calls.append((request.url.path, request.url.params["key"], payload))
        return httpx.Response(200, json={
            "embeddings": [{"values": [float(len(r["content"]["parts"][0]["text"])), 1.0]}
                           for r in payload["requests"]],
        })
    return handler


def test_missing_api_key_raises(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    with pytest.raises(RuntimeError, match="GEMINI_API_KEY"):
        Embedder()


def test_embed_documents_batches_requests():
    calls = []
    embedder = _embedder(_batch_handler(calls))
    embedder.batch_size = 2

    vectors = embedder.embed_documents(["a", "bb", "ccc"])

    assert vectors == [[1.0, 1.0], [2.0, 1.0], [3.0, 1.0]]
    assert [len(payload["requests"]) for _, _, payload in calls] == [2, 1]
    path, key, payload = calls[0]
    assert path.endswith("text-embedding-004:batchEmbedContents")
    assert key == "test-key"
    assert payload["requests"][0]["model"] == "models/text-embedding-004"


def test_embed_chunks_pairs_vectors_with_chunks():
    meta = MieuxVivreMetadata("t", "s", "ss", None, "u")
    chunks = [Chunk("un", meta), Chunk("deux", meta)]
    embedder = _embedder(_batch_handler([]))

    embedded = embedder.embed_chunks(chunks)

    assert embedded == [EmbeddedChunk([2.0, 1.0], chunks[0]), EmbeddedChunk([4.0, 1.0], chunks[1])]


def test_embed_query_uses_single_endpoint():
    def handler(request):
        assert request.url.path.endswith(":embedContent")
        return httpx.Response(200, json={"embedding": {"values": [0.5, 0.25]}})

    assert _embedder(handler).embed_query("sommeil") == [0.5, 0.25]


def test_rate_limited_request_is_retried_after_delay():
    responses = [
        httpx.Response(429, headers={"retry-after": "3"}),
        httpx.Response(200, json={"embedding": {"values": [1.0]}}),
    ]
    embedder = _embedder(lambda request: responses.pop(0))

    assert embedder.embed_query("q") == [1.0]
    assert embedder.sleeps == [3.0]


def test_gives_up_after_max_retries():
    embedder = _embedder(lambda request: httpx.Response(429))
    embedder.max_retries = 3

    with pytest.raises(EmbeddingError, match="3 attempts"):
        embedder.embed_query("q")
    assert embedder.sleeps == [2.0, 4.0, 8.0]


def test_count_mismatch_is_an_error():
    embedder = _embedder(lambda request: httpx.Response(200, json={"embeddings": []}))
    with pytest.raises(EmbeddingError):
        embedder.embed_documents(["a"])


def test_server_error_propagates():
    embedder = _embedder(lambda request: httpx.Response(500))
    with pytest.raises(httpx.HTTPStatusError):
        embedder.embed_query("q")
