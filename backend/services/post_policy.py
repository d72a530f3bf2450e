"""Post existence, creation and owner-only deletion."""

from __future__ import annotations

import logging
from typing import Any, cast

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from models import Like, Post

from .errors import InternalError, NotFound
from .identity import Identity, require_identity

logger = logging.getLogger(__name__)


def _eq(column: Any, value: Any) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column == value)


async def require_post_exists(
    session: AsyncSession,
    post_id: int,
) -> str:
    """Return the post author id or raise 404 when the post does not exist."""
    post_author_column = cast(ColumnElement[str], Post.author_id)
    result = await session.execute(
        select(post_author_column)
        .where(_eq(Post.id, post_id))
        .limit(1)
    )
    author_id = result.scalar_one_or_none()
    if author_id is None:
        raise NotFound()
    return author_id


async def create_post(
    session: AsyncSession,
    identity: Identity | None,
    *,
    title: str,
    body: str,
) -> Post:
    author = require_identity(identity)

    post = Post(author_id=author.user_id, title=title.strip(), body=body.strip())
    session.add(post)
    try:
        await session.commit()
    except Exception as exc:
        await session.rollback()
        logger.exception("Failed to create post for %s", author.user_id)
        raise InternalError("Failed to create post") from exc
    await session.refresh(post)
    return post


async def delete_owned_post(
    session: AsyncSession,
    identity: Identity | None,
    post_id: int,
) -> None:
    """Delete the caller's post together with its likes.

    A post owned by someone else is reported exactly like a missing one.
    """
    owner = require_identity(identity)

    post_entity = cast(Any, Post)
    result = await session.execute(
        select(post_entity)
        .where(_eq(Post.id, post_id))
        .limit(1)
    )
    post = result.scalar_one_or_none()
    if post is None or post.author_id != owner.user_id:
        raise NotFound()

    await session.execute(
        delete(Like).where(_eq(Like.post_id, post_id))
    )
    await session.delete(post)
    try:
        await session.commit()
    except Exception as exc:
        await session.rollback()
        logger.exception("Failed to delete post %s", post_id)
        raise InternalError("Failed to delete post") from exc

    logger.info("Post %s deleted by %s", post_id, owner.user_id)
