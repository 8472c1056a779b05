"""Vector math over plain float sequences.

All functions are pure: they never mutate their inputs and touch no shared
state, so they are safe to call from any number of concurrent requests.
Functions that can fail on dimension mismatch or non-finite input return a
``Result`` rather than raising; ``normalize_vector`` has no failure path and
returns the vector directly.

Zero-norm inputs are not errors:
- ``cosine_similarity`` returns ``0.0`` when either vector has zero norm
- ``normalize_vector`` returns the zero vector unchanged

Vectors are scaled by their largest component before the norm is taken, so
very large or very small magnitudes do not overflow or underflow.
"""

import math
from typing import List, Optional, Sequence

import numpy as np

from ..common.errors import DimensionMismatchError, NonFiniteVectorError
from .types import Result, SimilarityResult, Vector, VectorLike

SIMILARITY_LABELS = (
    (0.8, "Very similar"),
    (0.6, "Similar"),
    (0.4, "Somewhat similar"),
)
NOT_SIMILAR = "Not similar"


def _as_array(vector: VectorLike) -> np.ndarray:
    return np.asarray(vector, dtype=np.float64)


def _unit(v: np.ndarray) -> Optional[np.ndarray]:
    """Unit vector along ``v``, or ``None`` for a zero vector.

    NaN or infinite components propagate as NaN.
    """
    if len(v) == 0:
        return None
    scale = float(np.max(np.abs(v)))
    if scale == 0.0:
        return None
    scaled = v / scale
    return scaled / np.linalg.norm(scaled)


def _cosine(a: np.ndarray, b: np.ndarray) -> float:
    unit_a = _unit(a)
    unit_b = _unit(b)
    if unit_a is None or unit_b is None:
        return 0.0

    similarity = float(np.dot(unit_a, unit_b))
    if not math.isfinite(similarity):
        return similarity
    # Rounding can push parallel vectors a hair past +/-1.
    return max(-1.0, min(1.0, similarity))


def cosine_similarity(vector_a: VectorLike, vector_b: VectorLike) -> Result[float]:
    """Cosine of the angle between two equal-length vectors, in [-1, 1]."""
    a = _as_array(vector_a)
    b = _as_array(vector_b)
    if len(a) != len(b):
        return Result.failure(DimensionMismatchError(len(a), len(b)))
    similarity = _cosine(a, b)
    if not math.isfinite(similarity):
        return Result.failure(NonFiniteVectorError())
    return Result.success(similarity)


def euclidean_distance(vector_a: VectorLike, vector_b: VectorLike) -> Result[float]:
    """Straight-line distance between two equal-length vectors (never negative)."""
    a = _as_array(vector_a)
    b = _as_array(vector_b)
    if len(a) != len(b):
        return Result.failure(DimensionMismatchError(len(a), len(b)))
    return Result.success(float(np.linalg.norm(a - b)))


def normalize_vector(vector: VectorLike) -> Vector:
    """Return a unit-length copy of ``vector``.

    A zero vector has no direction and comes back unchanged (as a new list).
    """
    v = _as_array(vector)
    unit = _unit(v)
    if unit is None:
        return v.tolist()
    return unit.tolist()


def find_similar(
    query_vector: VectorLike,
    vectors: Sequence[VectorLike],
    top_k: int = 5
) -> Result[List[SimilarityResult]]:
    """Rank ``vectors`` by cosine similarity to ``query_vector``.

    Parameters
    - query_vector: The vector to compare against
    - vectors: Candidate vectors; results refer to positions in this sequence
    - top_k: Maximum number of results; clamped to ``len(vectors)``

    Returns
    - ``Result`` holding at most ``top_k`` ``SimilarityResult`` entries, best
      first. Equal similarities keep candidate order. Any candidate whose
      length differs from the query, or that yields a non-finite similarity,
      fails the whole call, whatever ``top_k`` is. Otherwise ``top_k <= 0``
      yields an empty list.
    """
    query = _as_array(query_vector)
    similarities = []
    for index, vector in enumerate(vectors):
        candidate = _as_array(vector)
        if len(candidate) != len(query):
            return Result.failure(
                DimensionMismatchError(len(query), len(candidate), index=index)
            )
        similarity = _cosine(query, candidate)
        if not math.isfinite(similarity):
            return Result.failure(NonFiniteVectorError(index=index))
        similarities.append(similarity)

    if top_k <= 0 or not similarities:
        return Result.success([])

    order = np.argsort(-np.asarray(similarities), kind="stable")[:top_k]
    return Result.success([
        SimilarityResult(index=int(i), similarity=similarities[i])
        for i in order
    ])


def interpret_similarity(similarity: float) -> str:
    """Map a similarity score to a human-readable label.

    Thresholds are strict: exactly 0.8 is "Similar", exactly 0.4 is
    "Not similar".
    """
    for threshold, label in SIMILARITY_LABELS:
        if similarity > threshold:
            return label
    return NOT_SIMILAR
