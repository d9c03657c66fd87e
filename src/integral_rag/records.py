"""
Content Records

Canonical, storage-independent representation of the four record kinds the
system works with. Repository methods return these, the CSV loader produces
them, and the retrieval core ranks them.

Embeddings are optional: `None` (or an empty list) means the record has not
been embedded and is never a ranking candidate.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Network(BaseModel):
    """A community that scopes posts and memberships."""

    id: int
    name: str

    model_config = ConfigDict(frozen=True, from_attributes=True)


class Profile(BaseModel):
    """A person, described by a free-text bio."""

    id: int
    name: str
    bio: str
    bio_embedding: Optional[List[float]] = Field(default=None, repr=False)

    model_config = ConfigDict(frozen=True)


class Member(BaseModel):
    """Membership of a profile in a network."""

    id: int
    profile_id: int
    network_id: int

    model_config = ConfigDict(frozen=True, from_attributes=True)


class Post(BaseModel):
    """A post published in a network."""

    id: int
    network_id: int
    author: str
    content: str
    content_embedding: Optional[List[float]] = Field(default=None, repr=False)

    model_config = ConfigDict(frozen=True)
