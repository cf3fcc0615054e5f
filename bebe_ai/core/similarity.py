import math
from typing import List, Sequence

from bebe_ai.core.embedder import EmbeddedChunk


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    if len(a) != len(b):
        raise ValueError(f"Dimension mismatch: {len(a)} != {len(b)}")
    dot_product = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot_product / (norm_a * norm_b)


def find_k_similar(
    embedding: Sequence[float], embedded: Sequence[EmbeddedChunk], k: int
) -> List[EmbeddedChunk]:
    """Naive nearest-neighbour scan, most similar first."""
    if k <= 0:
        return []
    scored = [(cosine_similarity(item.embedding, embedding), item) for item in embedded]
    # sort() is stable, ties keep their stored order
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [item for _, item in scored[:k]]
