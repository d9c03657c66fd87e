from __future__ import annotations

from typing import List, Protocol

from ..records import Post, Profile


class ContentStore(Protocol):
    """
    Read side of the storage layer consumed by the rankers.

    Implementations return only records of the given network whose embedding
    is present and non-empty.
    """

    async def fetch_posts_with_embeddings(self, network_id: int) -> List[Post]:
        ...

    async def fetch_profiles_with_embeddings(self, network_id: int) -> List[Profile]:
        ...
