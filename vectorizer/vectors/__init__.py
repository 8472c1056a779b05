"""Vector types and pure vector math.

Exports the functions the service and any other caller use to compare
embeddings. Nothing here loads a model.
"""

from .ops import (
    cosine_similarity,
    euclidean_distance,
    find_similar,
    interpret_similarity,
    normalize_vector,
)
from .types import EmbeddingOptions, PoolingMode, Result, SimilarityResult, Vector

__all__ = [
    "EmbeddingOptions",
    "PoolingMode",
    "Result",
    "SimilarityResult",
    "Vector",
    "cosine_similarity",
    "euclidean_distance",
    "find_similar",
    "interpret_similarity",
    "normalize_vector",
]
