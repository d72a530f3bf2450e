"""End-to-end tests for authentication endpoints."""

import asyncio
from typing import Any, cast
from uuid import uuid4

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from core import decode_token, hash_password
from models import User
from services import accounts


def _eq(column: Any, value: Any) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column == value)


def build_payload() -> dict[str, str]:
    suffix = uuid4().hex[:8]
    return {
        "email": f"alice_{suffix}@example.com",
        "password": "Sup3rSecret!",
        "name": "Alice",
    }


@pytest.mark.asyncio
async def test_register_creates_user_and_returns_token(async_client, db_session: AsyncSession):
    payload = build_payload()
    response = await async_client.post("/api/v1/auth/register", json=payload)
    assert response.status_code == 201
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["user"]["email"] == payload["email"]
    assert data["user"]["name"] == "Alice"
    assert decode_token(data["access_token"])["sub"] == data["user"]["id"]

    result = await db_session.execute(
        select(User).where(_eq(User.email, payload["email"]))
    )
    user = result.scalar_one()
    assert user.password_hash != payload["password"]


@pytest.mark.asyncio
async def test_register_normalizes_email_to_lowercase(async_client):
    payload = build_payload()
    payload["email"] = "Mixed.Case+alias@Example.COM"
    response = await async_client.post("/api/v1/auth/register", json=payload)

    assert response.status_code == 201
    assert response.json()["user"]["email"] == "mixed.case+alias@example.com"


@pytest.mark.asyncio
async def test_register_conflict(async_client):
    payload = build_payload()
    await async_client.post("/api/v1/auth/register", json=payload)
    response = await async_client.post("/api/v1/auth/register", json=payload)
    assert response.status_code == 409
    assert response.json()["detail"] == "User already exists"


@pytest.mark.asyncio
async def test_register_conflict_for_case_variant_email(async_client):
    payload = build_payload()
    payload["email"] = "User.Mixed@Example.com"
    first = await async_client.post("/api/v1/auth/register", json=payload)
    assert first.status_code == 201

    second_payload = build_payload()
    second_payload["email"] = "user.mixed@example.com"
    second = await async_client.post("/api/v1/auth/register", json=second_payload)
    assert second.status_code == 409


@pytest.mark.asyncio
async def test_register_conflict_under_concurrency(async_client):
    payload = build_payload()

    first, second = await asyncio.gather(
        async_client.post("/api/v1/auth/register", json=payload),
        async_client.post("/api/v1/auth/register", json=payload),
    )
    statuses = sorted([first.status_code, second.status_code])
    assert statuses == [201, 409]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"email": "not-an-email"},
        {"password": "short"},
        {"name": "A"},
        {"name": "   "},
    ],
)
async def test_register_rejects_invalid_payload(async_client, overrides: dict[str, str]):
    payload = build_payload()
    payload.update(overrides)
    response = await async_client.post("/api/v1/auth/register", json=payload)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_login_returns_token_for_valid_credentials(async_client):
    payload = build_payload()
    registered = await async_client.post("/api/v1/auth/register", json=payload)

    response = await async_client.post(
        "/api/v1/auth/login",
        json={"email": payload["email"].upper(), "password": payload["password"]},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["user"]["id"] == registered.json()["user"]["id"]
    assert decode_token(data["access_token"])["sub"] == data["user"]["id"]


@pytest.mark.asyncio
async def test_login_rejects_wrong_password_and_unknown_email(async_client):
    payload = build_payload()
    await async_client.post("/api/v1/auth/register", json=payload)

    wrong_password = await async_client.post(
        "/api/v1/auth/login",
        json={"email": payload["email"], "password": "WrongPass123!"},
    )
    unknown_email = await async_client.post(
        "/api/v1/auth/login",
        json={"email": "nobody@example.com", "password": payload["password"]},
    )
    assert wrong_password.status_code == 401
    assert unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()


@pytest.mark.asyncio
async def test_login_rehashes_stale_password_hash(
    async_client,
    db_session: AsyncSession,
    monkeypatch: pytest.MonkeyPatch,
):
    user = User(
        email="stale@example.com",
        name="Stale",
        password_hash=hash_password("StalePass123!"),
    )
    db_session.add(user)
    await db_session.commit()
    original_hash = user.password_hash
    user_id = user.id

    monkeypatch.setattr(accounts, "needs_rehash", lambda password_hash: True)

    response = await async_client.post(
        "/api/v1/auth/login",
        json={"email": "stale@example.com", "password": "StalePass123!"},
    )
    assert response.status_code == 200

    db_session.expire_all()
    refreshed = await db_session.execute(select(User).where(_eq(User.id, user_id)))
    assert refreshed.scalar_one().password_hash != original_hash


@pytest.mark.asyncio
async def test_registered_token_authorizes_writes(async_client):
    registered = await async_client.post("/api/v1/auth/register", json=build_payload())
    token = registered.json()["access_token"]

    response = await async_client.post(
        "/api/v1/posts",
        json={"title": "Mine", "body": "Body"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 201
    assert response.json()["author_id"] == registered.json()["user"]["id"]
