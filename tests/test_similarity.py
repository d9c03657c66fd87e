import math

import pytest

from integral_rag.embeddings.embedder import Embedder
from integral_rag.retrieval.similarity import DimensionMismatchError, cosine_similarity


def test_identical_unit_vectors_score_one():
    v = Embedder().embed("systems engineer")
    assert cosine_similarity(v, v) == pytest.approx(1.0)


def test_orthogonal_vectors_score_zero():
    assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == 0.0


@pytest.mark.parametrize(
    "vector",
    [[1.0, 2.0, 3.0], [0.0, 0.0, 0.0], [-0.5, 0.25, 4.0]],
)
def test_zero_vector_scores_zero(vector):
    zero = [0.0] * len(vector)
    assert cosine_similarity(vector, zero) == 0.0
    assert cosine_similarity(zero, vector) == 0.0


def test_empty_vectors_score_zero():
    assert cosine_similarity([], []) == 0.0


def test_symmetric():
    embedder = Embedder()
    a = embedder.embed("rag system")
    b = embedder.embed("integral RAG")
    assert cosine_similarity(a, b) == cosine_similarity(b, a)

    assert cosine_similarity([1.0, 2.0], [3.0, -4.0]) == cosine_similarity([3.0, -4.0], [1.0, 2.0])


@pytest.mark.parametrize(
    "a, b",
    [([1.0], [1.0, 2.0]), ([], [0.0]), ([1.0, 2.0, 3.0], [1.0, 2.0])],
)
def test_dimension_mismatch_raises(a, b):
    with pytest.raises(DimensionMismatchError) as excinfo:
        cosine_similarity(a, b)
    assert excinfo.value.left == len(a)
    assert excinfo.value.right == len(b)


def test_dimension_mismatch_is_value_error():
    with pytest.raises(ValueError, match="don't match: 2 vs 3"):
        cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0])


def test_divides_by_squared_magnitudes():
    """
    The score uses |a|^2 * |b|^2 as the denominator, so non-unit vectors do
    not score like textbook cosine similarity.
    """
    a = [2.0, 0.0]
    b = [2.0, 0.0]
    # dot = 4, |a|^2 = 4, |b|^2 = 4
    assert cosine_similarity(a, b) == pytest.approx(0.25)

    textbook = 4.0 / (math.sqrt(4.0) * math.sqrt(4.0))
    assert textbook == pytest.approx(1.0)


def test_unit_vectors_match_dot_product():
    embedder = Embedder()
    a = embedder.embed("hello world")
    b = embedder.embed("world hello")
    dot = sum(x * y for x, y in zip(a, b))
    assert cosine_similarity(a, b) == pytest.approx(dot)
