"""Tests for the development seed script."""

import httpx
import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models import Post, User
from scripts.seed import SEED_AUTHOR_EMAIL, seed_posts_if_empty

SEED_URL = "https://seed.example.test/posts"


def build_client(payload, calls: list[str]) -> httpx.AsyncClient:
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        return httpx.Response(200, json=payload)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_seed_inserts_posts_into_empty_store(db_session: AsyncSession):
    calls: list[str] = []
    payload = [
        {"userId": 1, "id": 1, "title": "first title", "body": "first body"},
        {"userId": 1, "id": 2, "title": "second title", "body": "second body"},
        {"userId": 1, "id": 3, "title": "", "body": "skipped"},
    ]
    async with build_client(payload, calls) as client:
        inserted = await seed_posts_if_empty(db_session, client, url=SEED_URL)

    assert inserted == 2
    assert calls == [SEED_URL]

    posts = (await db_session.execute(select(Post))).scalars().all()
    assert {post.title for post in posts} == {"first title", "second title"}

    authors = (await db_session.execute(select(User))).scalars().all()
    assert [author.email for author in authors] == [SEED_AUTHOR_EMAIL]
    assert {post.author_id for post in posts} == {authors[0].id}


@pytest.mark.asyncio
async def test_seed_skips_when_posts_exist(db_session: AsyncSession):
    calls: list[str] = []
    payload = [{"title": "only", "body": "once"}]
    async with build_client(payload, calls) as client:
        assert await seed_posts_if_empty(db_session, client, url=SEED_URL) == 1
        assert await seed_posts_if_empty(db_session, client, url=SEED_URL) == 0

    assert calls == [SEED_URL]


@pytest.mark.asyncio
async def test_seed_rejects_non_list_payload(db_session: AsyncSession):
    async with build_client({"unexpected": True}, []) as client:
        with pytest.raises(ValueError):
            await seed_posts_if_empty(db_session, client, url=SEED_URL)
