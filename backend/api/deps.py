"""Shared FastAPI dependencies."""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from db.session import AsyncSessionMaker
from services.identity import Identity, require_identity, resolve_identity


async def get_db() -> AsyncIterator[AsyncSession]:
    async with AsyncSessionMaker() as session:
        yield session


async def get_optional_identity(
    authorization: str | None = Header(default=None),
) -> Identity | None:
    """Resolve the bearer credential; anything invalid is treated as anonymous."""
    return resolve_identity(authorization)


async def get_current_identity(
    identity: Identity | None = Depends(get_optional_identity),
) -> Identity:
    return require_identity(identity)
