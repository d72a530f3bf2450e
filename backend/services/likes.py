"""Idempotent like, unlike and clear-all operations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, cast

from sqlalchemy import delete, insert
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from db.errors import is_foreign_key_violation, is_unique_violation
from models import Like

from .errors import InternalError, Unauthorized
from .identity import Identity, require_identity
from .post_policy import require_post_exists

logger = logging.getLogger(__name__)


def _eq(column: Any, value: Any) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column == value)


@dataclass(frozen=True)
class LikeResult:
    post_id: int
    created: bool


@dataclass(frozen=True)
class UnlikeResult:
    post_id: int
    removed: bool


async def like_post(
    session: AsyncSession,
    identity: Identity | None,
    post_id: int,
) -> LikeResult:
    """Create the like edge; an existing edge is reported with ``created=False``."""
    viewer = require_identity(identity)
    await require_post_exists(session, post_id)

    try:
        await session.execute(
            insert(Like).values(user_id=viewer.user_id, post_id=post_id)
        )
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        if is_unique_violation(exc):
            logger.debug("Post %s already liked by %s", post_id, viewer.user_id)
            return LikeResult(post_id=post_id, created=False)
        if is_foreign_key_violation(exc):
            # Either the post vanished or the token names a deleted user.
            await require_post_exists(session, post_id)
            logger.warning("Like rejected for unknown user %s", viewer.user_id)
            raise Unauthorized() from exc
        raise

    logger.debug("Post %s liked by %s", post_id, viewer.user_id)
    return LikeResult(post_id=post_id, created=True)


async def unlike_post(
    session: AsyncSession,
    identity: Identity | None,
    post_id: int,
) -> UnlikeResult:
    viewer = require_identity(identity)

    try:
        result = await session.execute(
            delete(Like).where(
                _eq(Like.user_id, viewer.user_id),
                _eq(Like.post_id, post_id),
            )
        )
        await session.commit()
    except Exception as exc:
        await session.rollback()
        logger.exception("Failed to unlike post %s", post_id)
        raise InternalError("Failed to unlike post") from exc

    removed = (cast(CursorResult[Any], result).rowcount or 0) > 0
    return UnlikeResult(post_id=post_id, removed=removed)


async def clear_likes(
    session: AsyncSession,
    identity: Identity | None,
) -> int:
    """Delete every like owned by the caller and return how many were removed."""
    viewer = require_identity(identity)

    try:
        result = await session.execute(
            delete(Like).where(_eq(Like.user_id, viewer.user_id))
        )
        await session.commit()
    except Exception as exc:
        await session.rollback()
        logger.exception("Failed to clear likes for %s", viewer.user_id)
        raise InternalError("Failed to clear likes") from exc

    deleted_count = cast(CursorResult[Any], result).rowcount or 0
    logger.info("Cleared %d likes for %s", deleted_count, viewer.user_id)
    return deleted_count
