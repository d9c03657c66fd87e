from unittest.mock import AsyncMock, MagicMock, call

import pytest

from integral_rag.db import ContentRepository
from integral_rag.embeddings.embedder import Embedder
from integral_rag.ingestion.csv_loader import CsvLoadError, CsvLoader
from integral_rag.ingestion.pipeline import IngestStats, ingest_all
from integral_rag.records import Member, Network, Post, Profile


@pytest.fixture
def loader():
    mock = MagicMock(spec=CsvLoader)
    mock.load_networks.return_value = [Network(id=1, name="Engineers")]
    mock.load_profiles.return_value = [
        Profile(id=1, name="Grace", bio="systems engineer"),
        Profile(id=2, name="Linus", bio="kernel"),
    ]
    mock.load_posts.return_value = [
        Post(id=1, network_id=1, author="ada", content="integral RAG"),
    ]
    mock.load_members.return_value = [Member(id=1, profile_id=1, network_id=1)]
    return mock


@pytest.fixture
def repository():
    mock = AsyncMock(spec=ContentRepository)
    mock.upsert_posts.return_value = (1, 0)
    return mock


@pytest.mark.asyncio
async def test_ingest_all_counts(loader, repository):
    stats = await ingest_all(repository, Embedder(dimensions=16), loader)
    assert stats == IngestStats(networks=1, profiles=2, posts=1, members=1)


@pytest.mark.asyncio
async def test_ingest_all_embeds_free_text(loader, repository):
    embedder = Embedder(dimensions=16)

    await ingest_all(repository, embedder, loader)

    stored_profiles = [c.args[0] for c in repository.upsert_profile.await_args_list]
    assert [p.bio_embedding for p in stored_profiles] == [
        embedder.embed("systems engineer"),
        embedder.embed("kernel"),
    ]

    (stored_posts,), _ = repository.upsert_posts.await_args
    assert stored_posts[0].content_embedding == embedder.embed("integral RAG")


@pytest.mark.asyncio
async def test_ingest_all_embeds_each_type_in_one_pass(loader, repository):
    embedder = MagicMock(wraps=Embedder(dimensions=8))

    await ingest_all(repository, embedder, loader)

    assert embedder.embed_many.call_args_list == [
        call(["systems engineer", "kernel"]),
        call(["integral RAG"]),
    ]


@pytest.mark.asyncio
async def test_ingest_all_respects_foreign_key_order(loader, repository):
    manager = MagicMock()
    manager.attach_mock(repository.upsert_networks, "networks")
    manager.attach_mock(repository.upsert_profile, "profile")
    manager.attach_mock(repository.upsert_members, "members")
    manager.attach_mock(repository.upsert_posts, "posts")

    await ingest_all(repository, Embedder(dimensions=4), loader)

    order = [name for name, _, _ in manager.mock_calls]
    assert order == ["networks", "profile", "profile", "members", "posts"]


@pytest.mark.asyncio
async def test_ingest_all_load_failure_writes_nothing(loader, repository):
    loader.load_members.side_effect = CsvLoadError("Source file not found: Members.csv")

    with pytest.raises(CsvLoadError):
        await ingest_all(repository, Embedder(dimensions=4), loader)

    repository.upsert_networks.assert_not_called()
    repository.upsert_posts.assert_not_called()
