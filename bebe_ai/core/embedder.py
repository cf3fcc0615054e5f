import logging
import os
import time
from dataclasses import dataclass
from typing import Generic, List, Optional, Sequence, TypeVar

import httpx

from bebe_ai.config import EMBEDDING
from bebe_ai.ingestion.base import Chunk

logger = logging.getLogger(__name__)

M = TypeVar("M")


@dataclass(frozen=True)
class EmbeddedChunk(Generic[M]):
    embedding: List[float]
    chunk: Chunk[M]


class EmbeddingError(RuntimeError):
    pass


class Embedder:
    def __init__(self, api_key: Optional[str] = None, http: Optional[httpx.Client] = None):
        self._api_key = api_key or os.getenv("GEMINI_API_KEY")
        if not self._api_key:
            raise RuntimeError("Missing GEMINI_API_KEY environment variable")

        self._endpoint = EMBEDDING["endpoint"]
        self._http = http or httpx.Client(timeout=httpx.Timeout(60.0, connect=20.0))
        self.model = EMBEDDING["model"]
        self.batch_size = EMBEDDING["batch_size"]
        self.max_retries = EMBEDDING["max_retries"]

        self._rpm_limit = EMBEDDING["rpm_limit"]
        self._window_seconds = 60
        self._window_start = time.time()
        self._window_requests = 0

    def _sleep_with_jitter(self, seconds: float):
        if seconds <= 0:
            return
        time.sleep(seconds + 0.05)

    def _get_retry_after_seconds(self, resp: httpx.Response) -> Optional[float]:
        retry_after = resp.headers.get("retry-after")
        if not retry_after:
            return None
        try:
            return float(retry_after)
        except ValueError:
            return None

    def _wait_for_budget(self):
        now = time.time()
        if now - self._window_start >= self._window_seconds:
            self._window_start = now
            self._window_requests = 0

        if self._window_requests + 1 <= self._rpm_limit:
            self._window_requests += 1
            return

        sleep_for = (self._window_start + self._window_seconds) - now
        logger.info("Embedding request budget reached. Sleeping %.2fs", sleep_for)
        self._sleep_with_jitter(sleep_for)
        self._window_start = time.time()
        self._window_requests = 1

    def _post(self, method: str, payload: dict) -> dict:
        url = f"{self._endpoint}:{method}"
        for attempt in range(1, self.max_retries + 1):
            self._wait_for_budget()
            resp = self._http.post(url, params={"key": self._api_key}, json=payload)

            if resp.status_code == 429:
                retry_after_s = self._get_retry_after_seconds(resp)
                backoff = retry_after_s if retry_after_s is not None else min(60.0, 2.0 ** min(attempt, 5))
                logger.warning("Embedding API 429. Sleeping %.2fs before retry %d", backoff, attempt)
                self._sleep_with_jitter(backoff)
                continue

            resp.raise_for_status()
            return resp.json()

        raise EmbeddingError(f"Embedding API still rate limited after {self.max_retries} attempts")

    @staticmethod
    def _values(item: dict) -> List[float]:
        values = item.get("values") if isinstance(item, dict) else None
        if not isinstance(values, list):
            raise EmbeddingError("Unexpected embeddings response format")
        return values

    def _request(self, text: str) -> dict:
        return {"model": self.model, "content": {"parts": [{"text": text}]}}

    def embed_documents(self, texts: Sequence[str]) -> List[List[float]]:
        """Embed a list of documents in batches."""
        all_embeddings: List[List[float]] = []
        for i in range(0, len(texts), self.batch_size):
            batch = texts[i:i + self.batch_size]
            logger.info("Embedding chunks %d-%d of %d", i + 1, i + len(batch), len(texts))
            body = self._post("batchEmbedContents", {"requests": [self._request(t) for t in batch]})
            embeddings = [self._values(item) for item in body.get("embeddings", [])]
            if len(embeddings) != len(batch):
                raise EmbeddingError(
                    f"Expected {len(batch)} embeddings, got {len(embeddings)}"
                )
            all_embeddings.extend(embeddings)
        return all_embeddings

    def embed_query(self, query: str) -> List[float]:
        body = self._post("embedContent", self._request(query))
        return self._values(body.get("embedding"))

    def embed_chunks(self, chunks: Sequence[Chunk[M]]) -> List[EmbeddedChunk[M]]:
        vectors = self.embed_documents([chunk.text for chunk in chunks])
        return [EmbeddedChunk(embedding=vec, chunk=chunk) for vec, chunk in zip(vectors, chunks)]
