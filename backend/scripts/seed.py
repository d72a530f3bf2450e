"""Seed the posts table for local development.

Usage:
    python scripts/seed.py

Posts are fetched from ``SEED_POSTS_URL`` (JSONPlaceholder by default) and
attributed to a single seed author. Nothing happens when posts already exist.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, cast
from uuid import uuid4

import httpx
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.append(str(ROOT_DIR))

from core import configure_logging, settings  # noqa: E402
from core.security import hash_password  # noqa: E402
from db.session import AsyncSessionMaker  # noqa: E402
from models import Post, User  # noqa: E402

logger = logging.getLogger("seed")

SEED_AUTHOR_EMAIL = "seed@postboard.local"
SEED_AUTHOR_NAME = "Seed Author"
REQUEST_TIMEOUT_SECONDS = 10.0


def _eq(column: Any, value: Any) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column == value)


async def _count_posts(session: AsyncSession) -> int:
    result = await session.execute(select(func.count(cast(Any, Post.id))))
    return int(result.scalar_one() or 0)


async def _get_or_create_seed_author(session: AsyncSession) -> User:
    result = await session.execute(
        select(User).where(_eq(User.email, SEED_AUTHOR_EMAIL)).limit(1)
    )
    author = result.scalar_one_or_none()
    if author is not None:
        return author

    # Random password: the seed author is not meant to log in.
    author = User(
        email=SEED_AUTHOR_EMAIL,
        name=SEED_AUTHOR_NAME,
        password_hash=hash_password(uuid4().hex),
    )
    session.add(author)
    await session.flush()
    return author


async def fetch_seed_posts(client: httpx.AsyncClient, url: str) -> list[dict[str, Any]]:
    response = await client.get(url)
    response.raise_for_status()
    data = response.json()
    if not isinstance(data, list):
        raise ValueError("Seed payload must be a JSON array")
    return [
        item
        for item in data
        if isinstance(item, dict)
        and str(item.get("title") or "").strip()
        and str(item.get("body") or "").strip()
    ]


async def seed_posts_if_empty(
    session: AsyncSession,
    client: httpx.AsyncClient,
    *,
    url: str | None = None,
) -> int:
    """Insert seed posts when the table is empty and return how many were added."""
    existing = await _count_posts(session)
    if existing > 0:
        logger.info("Posts already exist (%d), skipping", existing)
        return 0

    source_url = url or settings.seed_posts_url
    logger.info("Posts empty, fetching from %s", source_url)
    items = await fetch_seed_posts(client, source_url)

    author = await _get_or_create_seed_author(session)
    session.add_all(
        [
            Post(
                author_id=author.id,
                title=str(item["title"]).strip(),
                body=str(item["body"]).strip(),
            )
            for item in items
        ]
    )
    await session.commit()
    logger.info("Inserted %d posts", len(items))
    return len(items)


async def main() -> None:
    configure_logging(settings.log_level)
    async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT_SECONDS) as client:
        async with AsyncSessionMaker() as session:
            await seed_posts_if_empty(session, client)


if __name__ == "__main__":
    asyncio.run(main())
