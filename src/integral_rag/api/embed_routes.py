"""
Embed Routes

This module exposes endpoints for:
- Loading every CSV source file, embedding it and storing it
- Querying row counts of the content tables
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from .models import EmbedResponse, ErrorResponse, IngestStatsModel, StoreStatsResponse
from .dependencies import get_csv_loader, get_embedder, get_repository
from ..db import ContentRepository
from ..embeddings.embedder import Embedder
from ..ingestion.csv_loader import CsvLoadError, CsvLoader
from ..ingestion.pipeline import ingest_all

logger = logging.getLogger("rag.api")

router = APIRouter(tags=["embed"])


@router.post(
    "/embed",
    response_model=EmbedResponse,
    responses={500: {"model": ErrorResponse}},
    summary="Load, embed and store all source data",
)
async def embed(
    repository: Annotated[ContentRepository, Depends(get_repository)],
    embedder: Annotated[Embedder, Depends(get_embedder)],
    loader: Annotated[CsvLoader, Depends(get_csv_loader)],
):
    """
    Run the ingestion pipeline over the configured data directory.

    A missing or malformed source file is reported as a 500 with the loader
    message; other failures reach the global exception handler.
    """
    try:
        stats = await ingest_all(repository, embedder, loader)
    except CsvLoadError as exc:
        logger.error("Error in embed handler: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(
                message="Failed to embed and store data",
                error=str(exc),
            ).model_dump(),
        )

    return EmbedResponse(
        message="Successfully embedded and stored all data",
        stats=IngestStatsModel(**stats._asdict()),
    )


@router.get(
    "/stats",
    response_model=StoreStatsResponse,
    summary="Get content table statistics",
)
async def get_store_stats(
    repository: Annotated[ContentRepository, Depends(get_repository)],
) -> StoreStatsResponse:
    return StoreStatsResponse(**await repository.get_stats())
