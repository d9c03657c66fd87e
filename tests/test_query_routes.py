import contextlib
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from integral_rag.main import create_app
from integral_rag.api.dependencies import get_repository, get_retriever
from integral_rag.db import ContentRepository
from integral_rag.records import Network, Post, Profile
from integral_rag.retrieval.models import PostResult, ProfileResult
from integral_rag.retrieval.service import Retriever
from integral_rag.retrieval.similarity import DimensionMismatchError


@pytest.fixture
def mock_repository():
    mock = AsyncMock(spec=ContentRepository)
    mock.get_network_by_id.return_value = Network(id=1, name="Engineers")
    return mock


@pytest.fixture
def mock_retriever():
    mock = AsyncMock(spec=Retriever)
    mock.retrieve_relevant_content.return_value = [
        PostResult(
            item=Post(
                id=7,
                network_id=1,
                author="ada",
                content="integral RAG",
                content_embedding=[0.6, 0.8],
            ),
            score=0.91,
        ),
        ProfileResult(
            item=Profile(id=3, name="Grace", bio="systems engineer", bio_embedding=[1.0, 0.0]),
            score=0.42,
        ),
    ]
    return mock


@pytest.fixture
def app(mock_repository, mock_retriever):
    app = create_app()
    app.dependency_overrides[get_repository] = lambda: mock_repository
    app.dependency_overrides[get_retriever] = lambda: mock_retriever

    # Mock lifespan to avoid DB connection
    @contextlib.asynccontextmanager
    async def mock_lifespan(app):
        yield

    app.router.lifespan_context = mock_lifespan
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_query_returns_ranked_results(client, mock_retriever):
    resp = client.post("/query", json={"prompt": "rag system", "networkId": 1})

    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert data["network"] == "Engineers"
    assert data["prompt"] == "rag system"
    assert data["results"] == [
        {
            "type": "post",
            "item": {"id": 7, "networkId": 1, "author": "ada", "content": "integral RAG"},
            "score": 0.91,
        },
        {
            "type": "profile",
            "item": {"id": 3, "name": "Grace", "bio": "systems engineer"},
            "score": 0.42,
        },
    ]
    mock_retriever.retrieve_relevant_content.assert_awaited_once_with("rag system", 1, 5)


def test_query_custom_limit(client, mock_retriever):
    resp = client.post("/query", json={"prompt": "rag", "networkId": 1, "limit": 2})
    assert resp.status_code == 200
    mock_retriever.retrieve_relevant_content.assert_awaited_once_with("rag", 1, 2)


def test_query_embeddings_not_echoed(client):
    resp = client.post("/query", json={"prompt": "rag", "networkId": 1})
    for hit in resp.json()["results"]:
        assert "content_embedding" not in hit["item"]
        assert "bio_embedding" not in hit["item"]


@pytest.mark.parametrize("prompt", [None, "", "   "])
def test_query_requires_prompt(client, mock_retriever, prompt):
    payload = {"networkId": 1}
    if prompt is not None:
        payload["prompt"] = prompt

    resp = client.post("/query", json=payload)

    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Prompt is required"}
    mock_retriever.retrieve_relevant_content.assert_not_called()


@pytest.mark.parametrize("network_id", [None, 0, -3])
def test_query_requires_valid_network_id(client, network_id):
    payload = {"prompt": "rag"}
    if network_id is not None:
        payload["networkId"] = network_id

    resp = client.post("/query", json=payload)

    assert resp.status_code == 400
    assert resp.json()["message"] == "Valid networkId is required"


@pytest.mark.parametrize("network_id", ["1", 1.0, True, "abc"])
def test_query_rejects_non_integer_network_id(client, mock_retriever, network_id):
    resp = client.post("/query", json={"prompt": "rag", "networkId": network_id})

    assert resp.status_code == 422
    mock_retriever.retrieve_relevant_content.assert_not_called()


def test_query_unknown_network(client, mock_repository, mock_retriever):
    mock_repository.get_network_by_id.return_value = None

    resp = client.post("/query", json={"prompt": "rag", "networkId": 42})

    assert resp.status_code == 404
    assert resp.json()["message"] == "Network with ID 42 not found"
    mock_retriever.retrieve_relevant_content.assert_not_called()


def test_query_rejects_unknown_fields(client):
    resp = client.post("/query", json={"prompt": "rag", "networkId": 1, "extra": True})
    assert resp.status_code == 422


@pytest.mark.parametrize("limit", [0, -1, 10_000])
def test_query_limit_bounds(client, limit):
    resp = client.post("/query", json={"prompt": "rag", "networkId": 1, "limit": limit})
    assert resp.status_code == 422


def test_query_empty_results(client, mock_retriever):
    mock_retriever.retrieve_relevant_content.return_value = []

    resp = client.post("/query", json={"prompt": "rag", "networkId": 1})

    assert resp.status_code == 200
    assert resp.json()["results"] == []


@pytest.mark.parametrize(
    "error",
    [DimensionMismatchError(384, 128), ConnectionError("database unavailable")],
)
def test_query_failure_is_generic_500(app, mock_retriever, error):
    mock_retriever.retrieve_relevant_content.side_effect = error

    with TestClient(app, raise_server_exceptions=False) as c:
        resp = c.post("/query", json={"prompt": "rag", "networkId": 1})

    assert resp.status_code == 500
    data = resp.json()
    assert data["success"] is False
    assert data["message"] == "Failed to process query"
    assert "database unavailable" not in resp.text
