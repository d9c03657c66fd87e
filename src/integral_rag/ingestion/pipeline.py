"""
Ingestion Pipeline

Loads every source file, embeds the free-text fields and stores the result.
Shared by the `/embed` route and the `init` CLI command.

Order matters for foreign keys: networks, then profiles, then members, then
posts.
"""

from __future__ import annotations

import logging
from typing import NamedTuple

from ..db.repository import ContentRepository
from ..embeddings.embedder import Embedder
from .csv_loader import CsvLoader

logger = logging.getLogger("rag.ingest")


class IngestStats(NamedTuple):
    """Number of records loaded from each source file."""
    networks: int
    profiles: int
    posts: int
    members: int


async def ingest_all(
    repository: ContentRepository,
    embedder: Embedder,
    loader: CsvLoader,
) -> IngestStats:
    """
    Load, embed and upsert all source records.

    The caller owns the transaction and commits on success.

    Raises
    ------
    CsvLoadError
        If a source file is missing or malformed. Nothing is written.
    """
    logger.info("Starting data embedding process...")

    networks = loader.load_networks()
    profiles = loader.load_profiles()
    posts = loader.load_posts()
    members = loader.load_members()

    stats = IngestStats(
        networks=len(networks),
        profiles=len(profiles),
        posts=len(posts),
        members=len(members),
    )
    logger.info(
        "Loaded data: %d networks, %d profiles, %d posts, %d members",
        *stats,
    )

    await repository.upsert_networks(networks)

    bio_embeddings = embedder.embed_many([profile.bio for profile in profiles])
    for profile, embedding in zip(profiles, bio_embeddings):
        await repository.upsert_profile(
            profile.model_copy(update={"bio_embedding": embedding})
        )

    await repository.upsert_members(members)

    content_embeddings = embedder.embed_many([post.content for post in posts])
    await repository.upsert_posts(
        [
            post.model_copy(update={"content_embedding": embedding})
            for post, embedding in zip(posts, content_embeddings)
        ]
    )

    logger.info("Finished embedding and storing all data")
    return stats
