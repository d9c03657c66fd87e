"""
Retrieval Result Models

`ScoredItem` is the per-type ranking output. `RankedResult` is the merged,
type-tagged output of the retriever: a discriminated union on `kind`, so every
consumer can match on `PostResult` / `ProfileResult` exhaustively.
"""

from __future__ import annotations

from typing import Annotated, Generic, Literal, NamedTuple, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

from ..records import Post, Profile

T = TypeVar("T", Post, Profile)


class ScoredItem(NamedTuple, Generic[T]):
    """A candidate paired with its similarity to the query."""
    item: T
    score: float


class PostResult(BaseModel):
    kind: Literal["post"] = "post"
    item: Post
    score: float

    model_config = ConfigDict(frozen=True)


class ProfileResult(BaseModel):
    kind: Literal["profile"] = "profile"
    item: Profile
    score: float

    model_config = ConfigDict(frozen=True)


RankedResult = Annotated[Union[PostResult, ProfileResult], Field(discriminator="kind")]
