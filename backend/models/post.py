"""Post model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text, func
from sqlmodel import Field, SQLModel

MAX_POST_TITLE_LENGTH = 200
MAX_POST_BODY_LENGTH = 5000


class Post(SQLModel, table=True):
    """A titled text post owned by a single user."""

    __tablename__ = "posts"
    __table_args__ = (
        Index("ix_posts_created_at_id", "created_at", "id"),
        Index("ix_posts_author_id", "author_id"),
    )

    id: int | None = Field(default=None, primary_key=True)
    author_id: str = Field(
        sa_column=Column(
            String(36),
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        )
    )
    title: str = Field(
        sa_column=Column(String(MAX_POST_TITLE_LENGTH), nullable=False)
    )
    body: str = Field(sa_column=Column(Text, nullable=False))
    created_at: datetime = Field(
        sa_column=Column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )
    )
    updated_at: datetime = Field(
        sa_column=Column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )
    )
