"""
Query Routes

Accepts a user prompt and a network id, retrieves the most relevant posts and
profiles of that network, and returns them ranked by similarity.
"""

from __future__ import annotations

import logging
from typing import Annotated, List, assert_never

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from .models import (
    ErrorResponse,
    PostHit,
    PostItem,
    ProfileHit,
    ProfileItem,
    QueryHit,
    QueryRequest,
    QueryResponse,
)
from .dependencies import get_repository, get_retriever
from ..db import ContentRepository
from ..retrieval.models import PostResult, ProfileResult, RankedResult
from ..retrieval.service import Retriever

logger = logging.getLogger("rag.api")

router = APIRouter(tags=["query"])


# ---------------------------------------------------------------------
# Helper Functions
# ---------------------------------------------------------------------

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(exclude_none=True),
    )


def to_hit(result: RankedResult) -> QueryHit:
    """
    Convert a ranked result into its wire shape, dropping the embedding.
    """
    match result:
        case PostResult(item=post, score=score):
            return PostHit(
                item=PostItem(
                    id=post.id,
                    network_id=post.network_id,
                    author=post.author,
                    content=post.content,
                ),
                score=score,
            )
        case ProfileResult(item=profile, score=score):
            return ProfileHit(
                item=ProfileItem(id=profile.id, name=profile.name, bio=profile.bio),
                score=score,
            )
        case _:
            assert_never(result)


# ---------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------

@router.post(
    "/query",
    response_model=QueryResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Rank posts and profiles of a network against a prompt",
    status_code=status.HTTP_200_OK,
)
async def query(
    req: QueryRequest,
    repository: Annotated[ContentRepository, Depends(get_repository)],
    retriever: Annotated[Retriever, Depends(get_retriever)],
):
    """
    Answer a free-text query.

    Workflow
    --------
    1. Validate prompt and network id.
    2. Check that the network exists.
    3. Retrieve and rank content.
    """
    if not req.prompt or not req.prompt.strip():
        return _error(status.HTTP_400_BAD_REQUEST, "Prompt is required")

    if req.network_id is None or req.network_id <= 0:
        return _error(status.HTTP_400_BAD_REQUEST, "Valid networkId is required")

    network = await repository.get_network_by_id(req.network_id)
    if network is None:
        return _error(
            status.HTTP_404_NOT_FOUND,
            f"Network with ID {req.network_id} not found",
        )

    logger.info(
        'Processing query for prompt: "%s" in network: %s (%d)',
        req.prompt,
        network.name,
        network.id,
    )

    # Failures (storage, dimension mismatch) reach the global exception handler
    results = await retriever.retrieve_relevant_content(req.prompt, network.id, req.limit)

    hits: List[QueryHit] = [to_hit(result) for result in results]
    return QueryResponse(network=network.name, prompt=req.prompt, results=hits)
