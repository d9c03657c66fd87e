"""
Retrieval Package

Similarity scoring, per-type ranking and cross-type retrieval over a
`ContentStore`.
"""

from .models import PostResult, ProfileResult, RankedResult, ScoredItem
from .ranker import TypeRanker, post_ranker, profile_ranker, rank_candidates
from .service import Retriever
from .similarity import DimensionMismatchError, cosine_similarity
from .store import ContentStore

__all__ = [
    "PostResult",
    "ProfileResult",
    "RankedResult",
    "ScoredItem",
    "TypeRanker",
    "post_ranker",
    "profile_ranker",
    "rank_candidates",
    "Retriever",
    "DimensionMismatchError",
    "cosine_similarity",
    "ContentStore",
]
