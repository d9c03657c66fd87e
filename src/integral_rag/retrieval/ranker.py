"""
Per-Type Ranking

A `TypeRanker` ranks one kind of record (posts or profiles) against a query
vector: fetch the network's embedded candidates from the store, score each,
sort by descending score, and keep the first `limit`.

Storage errors and `DimensionMismatchError` propagate to the caller.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Generic, List, Optional, Sequence

from ..records import Post, Profile
from .models import ScoredItem, T
from .similarity import cosine_similarity
from .store import ContentStore

logger = logging.getLogger("rag.retrieval")


def rank_candidates(
    query_vector: Sequence[float],
    candidates: Sequence[T],
    vector_of: Callable[[T], Optional[Sequence[float]]],
    limit: int,
) -> List[ScoredItem[T]]:
    """
    Score, sort and truncate an in-memory candidate list.

    Candidates whose vector is missing or empty are skipped. The sort is
    stable, so equal scores keep their fetch order.
    """
    scored: List[ScoredItem[T]] = []
    for candidate in candidates:
        vector = vector_of(candidate)
        if vector is None or len(vector) == 0:
            continue
        scored.append(ScoredItem(candidate, cosine_similarity(query_vector, vector)))

    scored.sort(key=lambda entry: entry.score, reverse=True)
    return scored[:limit]


class TypeRanker(Generic[T]):
    """
    Ranks the records of one type within a network.

    Parameters
    ----------
    kind : str
        Label used in log messages ("post" or "profile").

    fetch : Callable[[int], Awaitable[List[T]]]
        Returns the embedded candidates of a network.

    vector_of : Callable[[T], Optional[Sequence[float]]]
        Extracts the stored embedding from a candidate.
    """

    def __init__(
        self,
        kind: str,
        fetch: Callable[[int], Awaitable[List[T]]],
        vector_of: Callable[[T], Optional[Sequence[float]]],
    ) -> None:
        self.kind = kind
        self._fetch = fetch
        self._vector_of = vector_of

    async def rank(
        self,
        query_vector: Sequence[float],
        network_id: int,
        limit: int,
    ) -> List[ScoredItem[T]]:
        candidates = await self._fetch(network_id)
        if not candidates:
            logger.info("No %ss found in network %d with embeddings", self.kind, network_id)
            return []

        return rank_candidates(query_vector, candidates, self._vector_of, limit)


def post_ranker(store: ContentStore) -> TypeRanker[Post]:
    return TypeRanker(
        "post",
        store.fetch_posts_with_embeddings,
        lambda post: post.content_embedding,
    )


def profile_ranker(store: ContentStore) -> TypeRanker[Profile]:
    return TypeRanker(
        "profile",
        store.fetch_profiles_with_embeddings,
        lambda profile: profile.bio_embedding,
    )
