"""
Similarity Scoring

Relevance score between a query vector and a stored vector.

The score divides the dot product by the product of the *squared* magnitudes
(no square root). For the unit vectors produced by the embedder this is the
dot product and equals true cosine similarity; for other inputs it is not
bounded to [-1, 1]. Callers are expected to pass unit-normalized vectors.
Rankings already served by the system depend on this formula, so it is kept
as is.
"""

from __future__ import annotations

from typing import Sequence


class DimensionMismatchError(ValueError):
    """Raised when two compared vectors differ in length."""

    def __init__(self, left: int, right: int) -> None:
        super().__init__(f"Vector dimensions don't match: {left} vs {right}")
        self.left = left
        self.right = right


def cosine_similarity(vector_a: Sequence[float], vector_b: Sequence[float]) -> float:
    """
    Score two equal-length vectors.

    Returns 0.0 when either vector has zero magnitude.

    Raises
    ------
    DimensionMismatchError
        If the vectors have different lengths.
    """
    if len(vector_a) != len(vector_b):
        raise DimensionMismatchError(len(vector_a), len(vector_b))

    dot_product = 0.0
    magnitude_a = 0.0
    magnitude_b = 0.0

    for a, b in zip(vector_a, vector_b):
        dot_product += a * b
        magnitude_a += a * a
        magnitude_b += b * b

    if magnitude_a == 0 or magnitude_b == 0:
        return 0.0

    return dot_product / (magnitude_a * magnitude_b)
