"""
Retrieval Service

Answers a free-text prompt with the most relevant posts and profiles of a
network.

Workflow
--------
1. Embed the prompt with the same embedder used at ingestion time.
2. Rank posts and profiles independently, each capped at `limit`.
3. Tag both lists, merge, and re-sort globally by score.
4. Cap the merged list at `limit`.

The two rankings have no data dependency on each other. They are awaited one
after the other because both typically read through the same database
session, which does not allow concurrent use.
"""

from __future__ import annotations

import logging
from typing import List

from ..embeddings.embedder import Embedder
from .models import PostResult, ProfileResult, RankedResult
from .ranker import post_ranker, profile_ranker
from .store import ContentStore

logger = logging.getLogger("rag.retrieval")


class Retriever:
    """
    Cross-type retriever bound to a content store and an embedder.

    Holds no state between calls; a new instance per request is cheap.
    """

    def __init__(self, store: ContentStore, embedder: Embedder) -> None:
        self._embedder = embedder
        self._posts = post_ranker(store)
        self._profiles = profile_ranker(store)

    async def retrieve_relevant_content(
        self,
        prompt: str,
        network_id: int,
        limit: int,
    ) -> List[RankedResult]:
        """
        Return up to `limit` posts and profiles ranked by descending score.

        Parameters
        ----------
        prompt : str
            Non-empty query text. Not re-validated here.

        network_id : int
            Network scope. Existence is the caller's responsibility.

        limit : int
            Positive cap applied per type and to the merged list.

        Raises
        ------
        DimensionMismatchError
            If stored vectors do not have the embedder's dimensionality.
        """
        query_vector = self._embedder.embed(prompt)

        similar_posts = await self._posts.rank(query_vector, network_id, limit)
        similar_profiles = await self._profiles.rank(query_vector, network_id, limit)

        results: List[RankedResult] = [
            PostResult(item=post, score=score) for post, score in similar_posts
        ]
        results.extend(
            ProfileResult(item=profile, score=score) for profile, score in similar_profiles
        )

        results.sort(key=lambda result: result.score, reverse=True)

        logger.debug(
            "Ranked %d posts and %d profiles for network %d",
            len(similar_posts),
            len(similar_profiles),
            network_id,
        )
        return results[:limit]
