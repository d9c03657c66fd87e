"""
Database Package

Provides SQLAlchemy async session management and model definitions
for PostgreSQL with pgvector.
"""

from .session import get_async_session, async_engine, AsyncSessionLocal, init_models
from .models import Base, Network, Profile, Member, Post
from .repository import ContentRepository

__all__ = [
    "get_async_session",
    "async_engine",
    "AsyncSessionLocal",
    "init_models",
    "Base",
    "Network",
    "Profile",
    "Member",
    "Post",
    "ContentRepository",
]
