"""
API Models

Pydantic models used for request/response validation on the query, embed and
stats endpoints.

Wire field names follow the original client contract (`networkId`), while the
Python attributes stay snake_case.
"""

from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..config import settings


# ---------------------------------------------------------------------
# Query Models
# ---------------------------------------------------------------------

class QueryRequest(BaseModel):
    """
    Free-text query scoped to one network.

    Presence/emptiness of `prompt` and validity of `networkId` are checked in
    the route so the client gets the documented 400 messages. A `networkId`
    that is not a JSON integer ("1", 1.0, true) fails validation with 422.
    """
    prompt: Optional[str] = None
    network_id: Optional[int] = Field(default=None, alias="networkId", strict=True)
    limit: int = Field(
        default=settings.default_result_limit,
        ge=1,
        le=settings.max_result_limit,
    )

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class PostItem(BaseModel):
    id: int
    network_id: int = Field(..., alias="networkId")
    author: str
    content: str

    model_config = ConfigDict(populate_by_name=True)


class ProfileItem(BaseModel):
    id: int
    name: str
    bio: str


class PostHit(BaseModel):
    type: Literal["post"] = "post"
    item: PostItem
    score: float


class ProfileHit(BaseModel):
    type: Literal["profile"] = "profile"
    item: ProfileItem
    score: float


QueryHit = Annotated[Union[PostHit, ProfileHit], Field(discriminator="type")]


class QueryResponse(BaseModel):
    success: bool = True
    network: str
    prompt: str
    results: List[QueryHit] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: Optional[str] = None


# ---------------------------------------------------------------------
# Embed / Stats Models
# ---------------------------------------------------------------------

class IngestStatsModel(BaseModel):
    networks: int = Field(..., ge=0)
    profiles: int = Field(..., ge=0)
    posts: int = Field(..., ge=0)
    members: int = Field(..., ge=0)


class EmbedResponse(BaseModel):
    success: bool = True
    message: str
    stats: IngestStatsModel


class StoreStatsResponse(BaseModel):
    networks: int = Field(..., ge=0)
    profiles: int = Field(..., ge=0)
    members: int = Field(..., ge=0)
    posts: int = Field(..., ge=0)
