"""
Content Repository

PostgreSQL-backed storage for networks, profiles, members and posts.

This class is the concrete `ContentStore` used by the retrieval core, and also
carries the write operations used by ingestion. All methods return plain
`integral_rag.records` objects, never ORM instances.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator, List, Optional, Sequence, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from . import models
from ..config import settings
from ..records import Member, Network, Post, Profile

logger = logging.getLogger("rag.store")


# ---------------------------------------------------------------------
# Row <-> record conversion
# ---------------------------------------------------------------------

def _to_column(embedding: Optional[Sequence[float]]) -> Optional[List[float]]:
    """Empty embeddings are stored as NULL."""
    if embedding is None or len(embedding) == 0:
        return None
    return [float(value) for value in embedding]


def _from_column(value: Any) -> Optional[List[float]]:
    """pgvector returns numpy arrays; records hold plain float lists."""
    if value is None or len(value) == 0:
        return None
    return [float(x) for x in value]


def _post_record(row: models.Post) -> Post:
    return Post(
        id=row.id,
        network_id=row.network_id,
        author=row.author,
        content=row.content,
        content_embedding=_from_column(row.content_embedding),
    )


def _profile_record(row: models.Profile) -> Profile:
    return Profile(
        id=row.id,
        name=row.name,
        bio=row.bio,
        bio_embedding=_from_column(row.bio_embedding),
    )


def _post_values(post: Post) -> dict:
    return {
        "id": post.id,
        "network_id": post.network_id,
        "author": post.author,
        "content": post.content,
        "content_embedding": _to_column(post.content_embedding),
    }


def _batches(rows: Sequence[Any], size: int) -> Iterator[Sequence[Any]]:
    for start in range(0, len(rows), size):
        yield rows[start : start + size]


def _post_upsert(posts: Iterable[Post]):
    stmt = pg_insert(models.Post).values([_post_values(post) for post in posts])
    return stmt.on_conflict_do_update(
        index_elements=[models.Post.id],
        set_={
            "network_id": stmt.excluded.network_id,
            "author": stmt.excluded.author,
            "content": stmt.excluded.content,
            "content_embedding": stmt.excluded.content_embedding,
        },
    )


class ContentRepository:
    """
    Async repository over a single SQLAlchemy session.

    The caller owns the transaction: nothing here commits except `commit()`.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize with an async database session.

        Parameters
        ----------
        session : AsyncSession
            SQLAlchemy async session for database operations.
        """
        self._session = session

    async def commit(self) -> None:
        await self._session.commit()

    # ------------------------------------------------------------------
    # Networks
    # ------------------------------------------------------------------

    async def get_all_networks(self) -> List[Network]:
        result = await self._session.execute(
            select(models.Network).order_by(models.Network.id)
        )
        return [Network.model_validate(row) for row in result.scalars().all()]

    async def get_network_by_id(self, network_id: int) -> Optional[Network]:
        row = await self._session.get(models.Network, network_id)
        return Network.model_validate(row) if row is not None else None

    async def upsert_networks(
        self,
        networks: Sequence[Network],
        batch_size: Optional[int] = None,
    ) -> int:
        for batch in _batches(networks, batch_size or settings.upsert_batch_size):
            stmt = pg_insert(models.Network).values(
                [{"id": n.id, "name": n.name} for n in batch]
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[models.Network.id],
                set_={"name": stmt.excluded.name},
            )
            await self._session.execute(stmt)
        return len(networks)

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    async def get_all_profiles(self) -> List[Profile]:
        result = await self._session.execute(
            select(models.Profile).order_by(models.Profile.id)
        )
        return [_profile_record(row) for row in result.scalars().all()]

    async def get_profile_by_id(self, profile_id: int) -> Optional[Profile]:
        row = await self._session.get(models.Profile, profile_id)
        return _profile_record(row) if row is not None else None

    async def upsert_profile(self, profile: Profile) -> Profile:
        values = {
            "id": profile.id,
            "name": profile.name,
            "bio": profile.bio,
            "bio_embedding": _to_column(profile.bio_embedding),
        }
        stmt = pg_insert(models.Profile).values(values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[models.Profile.id],
            set_={
                "name": stmt.excluded.name,
                "bio": stmt.excluded.bio,
                "bio_embedding": stmt.excluded.bio_embedding,
            },
        )
        await self._session.execute(stmt)
        return profile

    async def update_profile_embedding(
        self,
        profile_id: int,
        embedding: Sequence[float],
    ) -> None:
        row = await self._session.get(models.Profile, profile_id)
        if row is None:
            raise LookupError(f"Profile {profile_id} not found")
        row.bio_embedding = _to_column(embedding)
        await self._session.flush()

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------

    async def get_all_members(self) -> List[Member]:
        result = await self._session.execute(
            select(models.Member).order_by(models.Member.id)
        )
        return [Member.model_validate(row) for row in result.scalars().all()]

    async def get_members_by_network_id(self, network_id: int) -> List[Member]:
        result = await self._session.execute(
            select(models.Member)
            .where(models.Member.network_id == network_id)
            .order_by(models.Member.id)
        )
        return [Member.model_validate(row) for row in result.scalars().all()]

    async def get_members_by_profile_id(self, profile_id: int) -> List[Member]:
        result = await self._session.execute(
            select(models.Member)
            .where(models.Member.profile_id == profile_id)
            .order_by(models.Member.id)
        )
        return [Member.model_validate(row) for row in result.scalars().all()]

    async def upsert_members(
        self,
        members: Sequence[Member],
        batch_size: Optional[int] = None,
    ) -> int:
        for batch in _batches(members, batch_size or settings.upsert_batch_size):
            stmt = pg_insert(models.Member).values(
                [
                    {"id": m.id, "profile_id": m.profile_id, "network_id": m.network_id}
                    for m in batch
                ]
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[models.Member.id],
                set_={
                    "profile_id": stmt.excluded.profile_id,
                    "network_id": stmt.excluded.network_id,
                },
            )
            await self._session.execute(stmt)
        return len(members)

    async def delete_member(self, member_id: int) -> bool:
        """
        Remove a membership.

        Returns False when no membership had that id.
        """
        result = await self._session.execute(
            delete(models.Member).where(models.Member.id == member_id)
        )
        return bool(result.rowcount)

    # ------------------------------------------------------------------
    # Posts
    # ------------------------------------------------------------------

    async def get_all_posts(self) -> List[Post]:
        result = await self._session.execute(
            select(models.Post).order_by(models.Post.id)
        )
        return [_post_record(row) for row in result.scalars().all()]

    async def get_post_by_id(self, post_id: int) -> Optional[Post]:
        row = await self._session.get(models.Post, post_id)
        return _post_record(row) if row is not None else None

    async def upsert_post(self, post: Post) -> Post:
        await self._session.execute(_post_upsert([post]))
        return post

    async def upsert_posts(
        self,
        posts: Sequence[Post],
        batch_size: Optional[int] = None,
    ) -> Tuple[int, int]:
        """
        Insert or update posts in batches.

        Each batch runs in a savepoint. When a batch fails it is rolled back
        and its posts are retried one at a time, so one bad row only loses
        itself.

        Returns
        -------
        Tuple[int, int]
            (succeeded, failed) post counts.
        """
        size = batch_size or settings.upsert_batch_size
        total_batches = (len(posts) + size - 1) // size
        succeeded = 0
        failed = 0

        logger.info("Inserting/updating %d posts...", len(posts))

        for batch_no, batch in enumerate(_batches(posts, size), start=1):
            try:
                async with self._session.begin_nested():
                    await self._session.execute(_post_upsert(batch))
                succeeded += len(batch)
                logger.info("Processed posts batch %d/%d", batch_no, total_batches)
                continue
            except SQLAlchemyError as exc:
                logger.error("Error in posts batch %d: %s", batch_no, exc)

            logger.info("Falling back to individual post processing...")
            for post in batch:
                try:
                    async with self._session.begin_nested():
                        await self._session.execute(_post_upsert([post]))
                    succeeded += 1
                except SQLAlchemyError as exc:
                    failed += 1
                    logger.error("Failed to upsert post ID %d: %s", post.id, exc)

        logger.info(
            "Post insertion complete: %d successful, %d failed", succeeded, failed
        )
        return succeeded, failed

    async def update_post_embedding(
        self,
        post_id: int,
        embedding: Sequence[float],
    ) -> None:
        row = await self._session.get(models.Post, post_id)
        if row is None:
            raise LookupError(f"Post {post_id} not found")
        row.content_embedding = _to_column(embedding)
        await self._session.flush()

    # ------------------------------------------------------------------
    # Retrieval reads (ContentStore)
    # ------------------------------------------------------------------

    async def fetch_posts_with_embeddings(self, network_id: int) -> List[Post]:
        result = await self._session.execute(
            select(models.Post)
            .where(
                models.Post.network_id == network_id,
                models.Post.content_embedding.is_not(None),
            )
            .order_by(models.Post.id)
        )
        posts = [_post_record(row) for row in result.scalars().all()]
        return [post for post in posts if post.content_embedding]

    async def fetch_profiles_with_embeddings(self, network_id: int) -> List[Profile]:
        """
        Profiles with a membership in the network and a stored bio embedding.
        """
        member_profiles = select(models.Member.profile_id).where(
            models.Member.network_id == network_id
        )
        result = await self._session.execute(
            select(models.Profile)
            .where(
                models.Profile.id.in_(member_profiles),
                models.Profile.bio_embedding.is_not(None),
            )
            .order_by(models.Profile.id)
        )
        profiles = [_profile_record(row) for row in result.scalars().all()]
        return [profile for profile in profiles if profile.bio_embedding]

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    async def get_stats(self) -> dict:
        """
        Return row counts per table.
        """
        counts = {}
        for key, model in (
            ("networks", models.Network),
            ("profiles", models.Profile),
            ("members", models.Member),
            ("posts", models.Post),
        ):
            result = await self._session.execute(
                select(func.count()).select_from(model)
            )
            counts[key] = result.scalar() or 0
        return counts
