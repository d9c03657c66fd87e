"""
SQLAlchemy Models

Defines the database schema for:
- Networks
- Profiles (bio text + bio embedding)
- Members (profile <-> network membership)
- Posts (content text + content embedding)

Embedding columns are nullable pgvector columns; NULL means "not embedded".
"""

from __future__ import annotations

from typing import List

from sqlalchemy import Column, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from pgvector.sqlalchemy import Vector

from ..config import settings


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


# ---------------------------------------------------------------------
# Network Model
# ---------------------------------------------------------------------

class Network(Base):
    __tablename__ = "network"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    posts: Mapped[List["Post"]] = relationship("Post", back_populates="network")
    members: Mapped[List["Member"]] = relationship("Member", back_populates="network")


# ---------------------------------------------------------------------
# Profile Model
# ---------------------------------------------------------------------

class Profile(Base):
    """
    A person with a free-text bio.

    Profiles are not owned by a network; they join networks through Member.
    """
    __tablename__ = "profile"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    bio: Mapped[str] = mapped_column(Text, nullable=False, default="")

    bio_embedding = Column(Vector(settings.embedding_dimensions), nullable=True)

    memberships: Mapped[List["Member"]] = relationship("Member", back_populates="profile")


# ---------------------------------------------------------------------
# Member Model
# ---------------------------------------------------------------------

class Member(Base):
    __tablename__ = "member"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    profile_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("profile.id", ondelete="CASCADE"),
        nullable=False,
    )
    network_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("network.id", ondelete="CASCADE"),
        nullable=False,
    )

    profile: Mapped["Profile"] = relationship("Profile", back_populates="memberships")
    network: Mapped["Network"] = relationship("Network", back_populates="members")

    __table_args__ = (
        Index("idx_member_network", "network_id"),
        Index("idx_member_profile", "profile_id"),
    )


# ---------------------------------------------------------------------
# Post Model
# ---------------------------------------------------------------------

class Post(Base):
    __tablename__ = "post"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    network_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("network.id", ondelete="CASCADE"),
        nullable=False,
    )
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    content_embedding = Column(Vector(settings.embedding_dimensions), nullable=True)

    network: Mapped["Network"] = relationship("Network", back_populates="posts")

    __table_args__ = (
        Index("idx_post_network", "network_id"),
    )
