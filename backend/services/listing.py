"""Paginated, searchable post listing with per-caller like annotation."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, cast

from sqlalchemy import String, func, literal, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from db.session import casefold
from models import Like, Post

from .identity import Identity

DEFAULT_PAGE = 1
MAX_PAGE = 1_000_000_000
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 1000
MAX_SEARCH_LENGTH = 200
LIKE_ESCAPE = "/"


def _eq(column: Any, value: Any) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column == value)


def _desc(column: Any) -> Any:
    return cast(Any, column).desc()


@dataclass(frozen=True)
class ListedPost:
    post: Post
    liked: bool


@dataclass(frozen=True)
class PostPage:
    items: list[ListedPost]
    page: int
    limit: int
    total: int
    search: str | None
    liked_enabled: bool

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev_page(self) -> bool:
        return self.page > 1


def normalize_page(page: int | None) -> int:
    if page is None or page < 1:
        return DEFAULT_PAGE
    return min(page, MAX_PAGE)


def normalize_limit(limit: int | None) -> int:
    if limit is None or limit < 1:
        return DEFAULT_PAGE_SIZE
    return min(limit, MAX_PAGE_SIZE)


def normalize_search(search: str | None) -> str | None:
    if search is None:
        return None
    normalized = search.strip()
    return normalized or None


def escape_like(term: str, escape: str = LIKE_ESCAPE) -> str:
    return (
        term.replace(escape, escape + escape)
        .replace("%", escape + "%")
        .replace("_", escape + "_")
    )


def build_title_filter(search: str) -> ColumnElement[bool]:
    """Case-insensitive literal substring match on the post title.

    Both sides go through ``casefold`` so non-ASCII titles fold the same way
    as the term, and LIKE wildcards in the term are escaped.
    """
    pattern = literal(f"%{escape_like(search)}%", String())
    return cast(
        ColumnElement[bool],
        casefold(Post.title).like(casefold(pattern), escape=LIKE_ESCAPE),
    )


async def collect_liked_post_ids(
    session: AsyncSession,
    post_ids: Sequence[int],
    user_id: str,
) -> set[int]:
    """Return the subset of ``post_ids`` the user currently likes, in one query."""
    if not post_ids:
        return set()

    post_id_column = cast(ColumnElement[int], Like.post_id)
    result = await session.execute(
        select(post_id_column).where(
            _eq(Like.user_id, user_id),
            post_id_column.in_(list(post_ids)),
        )
    )
    return {row[0] for row in result.all()}


async def list_posts(
    session: AsyncSession,
    *,
    page: int | None = None,
    limit: int | None = None,
    search: str | None = None,
    identity: Identity | None = None,
) -> PostPage:
    page = normalize_page(page)
    limit = normalize_limit(limit)
    search = normalize_search(search)

    filters: list[ColumnElement[bool]] = []
    if search is not None:
        filters.append(build_title_filter(search))

    count_column = cast(Any, func.count(cast(Any, Post.id)))
    total_result = await session.execute(select(count_column).where(*filters))
    total = int(total_result.scalar_one() or 0)

    offset = (page - 1) * limit
    posts: list[Post] = []
    if offset < total:
        post_entity = cast(Any, Post)
        result = await session.execute(
            select(post_entity)
            .where(*filters)
            .order_by(
                _desc(cast(Any, Post.created_at)),
                _desc(cast(Any, Post.id)),
            )
            .offset(offset)
            .limit(limit)
        )
        posts = list(result.scalars().all())

    liked_set: set[int] = set()
    if identity is not None:
        post_ids = [post.id for post in posts if post.id is not None]
        liked_set = await collect_liked_post_ids(session, post_ids, identity.user_id)

    return PostPage(
        items=[ListedPost(post=post, liked=post.id in liked_set) for post in posts],
        page=page,
        limit=limit,
        total=total,
        search=search,
        liked_enabled=identity is not None,
    )
