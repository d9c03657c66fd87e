"""
Deterministic Text Embedder

This module implements the character-signal embedding used both when records
are ingested and when a query is answered. It is not a semantic model: each
character contributes `sin(code * 0.1) * 0.5` to the position `i mod D`, and
the accumulated vector is scaled to unit length.

Stored vectors were produced by this exact function, so any change to the
arithmetic below invalidates every embedding already in the database.

The class is stateless and safe to reuse across requests.
"""

from __future__ import annotations

import math
import struct
from typing import Iterator, List, Optional, Sequence

from ..config import settings

# Trimmed from both ends before embedding: ASCII whitespace, Unicode space
# separators, line/paragraph separators and the BOM. Unlike str.strip(),
# \x1c-\x1f and \x85 are kept.
_TRIM_CHARS = (
    " \t\n\v\f\r\xa0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000\ufeff"
)


def _code_units(text: str) -> Iterator[int]:
    """
    Yield the UTF-16 code units of `text`.

    Characters outside the Basic Multilingual Plane yield a surrogate pair,
    so they occupy two positions, matching how existing vectors were built.
    """
    encoded = text.encode("utf-16-le", "surrogatepass")
    for (unit,) in struct.iter_unpack("<H", encoded):
        yield unit


def compute_embedding(text: str, dimensions: int) -> List[float]:
    """
    Compute the embedding of `text` with `dimensions` positions.

    Parameters
    ----------
    text : str
        Any string, including the empty string.

    dimensions : int
        Vector length D. Must be positive.

    Returns
    -------
    List[float]
        A vector of length D. Unit length unless every position is zero, in
        which case the zero vector is returned unchanged.
    """
    vector = [0.0] * dimensions
    normalized = text.lower().strip(_TRIM_CHARS)

    for i, code in enumerate(_code_units(normalized)):
        vector[i % dimensions] += math.sin(code * 0.1) * 0.5

    magnitude = math.sqrt(sum(value * value for value in vector))
    divisor = magnitude or 1
    return [value / divisor for value in vector]


class Embedder:
    """
    Embedding generator bound to a fixed dimensionality.
    """

    def __init__(self, dimensions: Optional[int] = None) -> None:
        """
        Parameters
        ----------
        dimensions : Optional[int]
            Optional override for the vector length.
            Defaults to settings.embedding_dimensions.
        """
        self.dimensions = dimensions or settings.embedding_dimensions

    def embed(self, text: str) -> List[float]:
        """Embed a single text."""
        return compute_embedding(text, self.dimensions)

    def embed_many(self, texts: Sequence[str]) -> List[List[float]]:
        """Embed each text in order."""
        return [self.embed(text) for text in texts]
