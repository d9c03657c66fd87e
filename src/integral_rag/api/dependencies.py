from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import ContentRepository, get_async_session
from ..embeddings.embedder import Embedder
from ..ingestion.csv_loader import CsvLoader
from ..retrieval.service import Retriever


@lru_cache
def get_embedder() -> Embedder:
    return Embedder()


def get_csv_loader() -> CsvLoader:
    return CsvLoader()


def get_repository(
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> ContentRepository:
    return ContentRepository(session)


def get_retriever(
    repository: Annotated[ContentRepository, Depends(get_repository)],
    embedder: Annotated[Embedder, Depends(get_embedder)],
) -> Retriever:
    return Retriever(repository, embedder)
