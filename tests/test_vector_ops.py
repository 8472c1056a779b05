"""Tests for vector math."""

import math
import random

import numpy as np
import pytest

from vectorizer.common.errors import DimensionMismatchError, NonFiniteVectorError
from vectorizer.vectors.ops import (
    cosine_similarity,
    euclidean_distance,
    find_similar,
    interpret_similarity,
    normalize_vector,
)
from vectorizer.vectors.types import EmbeddingOptions, PoolingMode, Result, SimilarityResult


def random_vector(dim, rng):
    return [rng.uniform(-1.0, 1.0) for _ in range(dim)]


def test_cosine_similarity_known_values():
    """Test cosine similarity on orthogonal and identical vectors."""
    assert cosine_similarity([1, 0], [0, 1]).unwrap() == 0
    assert cosine_similarity([1, 0], [1, 0]).unwrap() == 1
    assert cosine_similarity([1, 0], [-1, 0]).unwrap() == -1


def test_cosine_similarity_properties():
    """Test symmetry, self-similarity and range on random vectors."""
    rng = random.Random(7)
    for dim in (2, 3, 384):
        a = random_vector(dim, rng)
        b = random_vector(dim, rng)
        ab = cosine_similarity(a, b).unwrap()
        assert ab == cosine_similarity(b, a).unwrap()
        assert -1.0 <= ab <= 1.0
        assert cosine_similarity(a, a).unwrap() == pytest.approx(1.0)


def test_cosine_similarity_zero_vector_is_zero():
    """Test the zero-norm fallback instead of a division error."""
    assert cosine_similarity([0, 0, 0], [1, 2, 3]).unwrap() == 0
    assert cosine_similarity([1, 2, 3], [0, 0, 0]).unwrap() == 0
    assert cosine_similarity([0, 0], [0, 0]).unwrap() == 0


def test_cosine_similarity_huge_magnitudes():
    """Test components near the float limit do not overflow into a wrong score."""
    assert cosine_similarity([1e200, 1e200], [1e200, -1e200]).unwrap() == pytest.approx(0.0, abs=1e-12)
    assert cosine_similarity([1e200, 1e200], [3e200, 3e200]).unwrap() == pytest.approx(1.0)
    assert cosine_similarity([1e-200, 0], [0, 1e-200]).unwrap() == pytest.approx(0.0, abs=1e-12)
    assert cosine_similarity([1e-200, 1e-200], [1e-200, 1e-200]).unwrap() == pytest.approx(1.0)


@pytest.mark.filterwarnings("ignore::RuntimeWarning")
def test_cosine_similarity_non_finite_input_fails():
    """Test NaN or infinite components produce an error result, not a clamped score."""
    for vector in ([math.nan, 1.0], [math.inf, 1.0]):
        result = cosine_similarity(vector, [1.0, 1.0])
        assert not result.ok
        assert isinstance(result.error, NonFiniteVectorError)


def test_length_mismatch_is_an_error_result():
    """Test unequal lengths produce a dimension-mismatch result."""
    for operation in (cosine_similarity, euclidean_distance):
        result = operation([1, 2, 3], [1, 2])
        assert isinstance(result, Result)
        assert not result.ok
        assert result.value is None
        assert isinstance(result.error, DimensionMismatchError)
        with pytest.raises(DimensionMismatchError):
            result.unwrap()


def test_euclidean_distance():
    """Test distance values, symmetry and non-negativity."""
    assert euclidean_distance([0, 0], [3, 4]).unwrap() == 5
    assert euclidean_distance([1.5, -2.0], [1.5, -2.0]).unwrap() == 0

    rng = random.Random(11)
    for _ in range(20):
        a = random_vector(8, rng)
        b = random_vector(8, rng)
        distance = euclidean_distance(a, b).unwrap()
        assert distance >= 0
        assert distance == pytest.approx(euclidean_distance(b, a).unwrap())


def test_normalize_vector():
    """Test normalization yields unit norm and leaves the input alone."""
    vector = [3.0, 4.0]
    normalized = normalize_vector(vector)
    assert normalized == pytest.approx([0.6, 0.8])
    assert math.sqrt(sum(x * x for x in normalized)) == pytest.approx(1.0)
    assert vector == [3.0, 4.0]


def test_normalize_zero_vector_unchanged():
    """Test the zero vector comes back as-is."""
    assert normalize_vector([0.0, 0.0, 0.0]) == [0.0, 0.0, 0.0]


def test_normalize_huge_vector():
    """Test normalization stays unit length when the squared norm would overflow."""
    normalized = normalize_vector([3e200, 4e200])
    assert normalized == pytest.approx([0.6, 0.8])


def test_normalize_accepts_numpy():
    normalized = normalize_vector(np.array([0.0, 2.0], dtype=np.float32))
    assert isinstance(normalized, list)
    assert normalized == pytest.approx([0.0, 1.0])


def test_find_similar_orders_best_first():
    """Test the documented top-2 scenario."""
    results = find_similar([1, 0], [[1, 0], [0, 1], [0.9, 0.1]], 2).unwrap()
    assert [r.index for r in results] == [0, 2]
    assert results[0] == SimilarityResult(index=0, similarity=1.0)


def test_find_similar_result_length_and_ordering():
    """Test result length is min(k, n) and similarities never increase."""
    rng = random.Random(3)
    query = random_vector(16, rng)
    candidates = [random_vector(16, rng) for _ in range(10)]
    for k in (1, 5, 10, 25):
        results = find_similar(query, candidates, k).unwrap()
        assert len(results) == min(k, len(candidates))
        scores = [r.similarity for r in results]
        assert scores == sorted(scores, reverse=True)


def test_find_similar_default_top_k():
    candidates = [[float(i), 1.0] for i in range(8)]
    assert len(find_similar([1.0, 1.0], candidates).unwrap()) == 5


def test_find_similar_non_positive_k():
    """Test k <= 0 yields an empty result."""
    assert find_similar([1, 0], [[1, 0]], 0).unwrap() == []
    assert find_similar([1, 0], [[1, 0]], -3).unwrap() == []


def test_find_similar_non_positive_k_still_checks_dimensions():
    """Test a mismatched candidate fails even when no results are requested."""
    result = find_similar([1, 0], [[1, 0, 0]], 0)
    assert not result.ok
    assert isinstance(result.error, DimensionMismatchError)
    assert result.error.index == 0


def test_find_similar_empty_candidates():
    assert find_similar([1, 0], [], 3).unwrap() == []


def test_find_similar_ties_keep_candidate_order():
    """Test equal similarities are returned in candidate order."""
    candidates = [[0, 1], [2, 0], [0, 3], [1, 0], [5, 0]]
    results = find_similar([1, 0], candidates, 5).unwrap()
    assert [r.index for r in results] == [1, 3, 4, 0, 2]


def test_find_similar_mismatched_candidate_fails():
    """Test one bad candidate fails the whole call and names its position."""
    result = find_similar([1, 0], [[1, 0], [1, 0, 0]], 2)
    assert not result.ok
    assert result.error.index == 1


@pytest.mark.filterwarnings("ignore::RuntimeWarning")
def test_find_similar_non_finite_candidate_fails():
    result = find_similar([1, 0], [[1, 0], [math.nan, 0]], 1)
    assert not result.ok
    assert isinstance(result.error, NonFiniteVectorError)
    assert result.error.index == 1


@pytest.mark.parametrize(
    "score,label",
    [
        (0.95, "Very similar"),
        (0.8000001, "Very similar"),
        (0.8, "Similar"),
        (0.7, "Similar"),
        (0.6, "Somewhat similar"),
        (0.5, "Somewhat similar"),
        (0.4, "Not similar"),
        (0.0, "Not similar"),
        (-1.0, "Not similar"),
    ],
)
def test_interpret_similarity_boundaries(score, label):
    """Test thresholds are strict, so boundaries fall into the lower label."""
    assert interpret_similarity(score) == label


def test_embedding_options_defaults_and_aliases():
    """Test option defaults and the camelCase JSON name."""
    options = EmbeddingOptions()
    assert options.model_name is None
    assert options.pooling == PoolingMode.MEAN
    assert options.normalize is True

    parsed = EmbeddingOptions.model_validate({"modelName": "m", "pooling": "cls", "normalize": False})
    assert parsed.model_name == "m"
    assert parsed.pooling == PoolingMode.CLS
    assert parsed.normalize is False
    assert EmbeddingOptions(model_name="m").model_name == "m"
