from bebe_ai.core.embedder import EmbeddedChunk, Embedder, EmbeddingError
from bebe_ai.core.similarity import cosine_similarity, find_k_similar

__all__ = ["EmbeddedChunk", "Embedder", "EmbeddingError", "cosine_similarity", "find_k_similar"]
