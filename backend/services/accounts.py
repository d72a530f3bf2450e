"""Registration and password login."""

from __future__ import annotations

import logging
from typing import Any, cast

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from core import hash_password, needs_rehash, verify_password
from db.errors import is_unique_violation
from models import User

from .errors import Conflict, Unauthorized

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_DETAIL = "Invalid email or password"


def _eq(column: Any, value: Any) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column == value)


def normalize_email(value: str) -> str:
    return value.strip().lower()


async def register_user(
    session: AsyncSession,
    *,
    email: str,
    password: str,
    name: str,
) -> User:
    user = User(
        email=normalize_email(email),
        name=name.strip(),
        password_hash=hash_password(password),
    )
    session.add(user)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        if not is_unique_violation(exc):
            raise
        logger.info("Registration rejected for existing email %s", user.email)
        raise Conflict("User already exists") from exc
    await session.refresh(user)
    return user


async def authenticate_user(
    session: AsyncSession,
    *,
    email: str,
    password: str,
) -> User:
    result = await session.execute(
        select(User).where(_eq(User.email, normalize_email(email))).limit(1)
    )
    user = result.scalar_one_or_none()
    if user is None or not verify_password(password, user.password_hash):
        raise Unauthorized(INVALID_CREDENTIALS_DETAIL)

    if needs_rehash(user.password_hash):
        user.password_hash = hash_password(password)
        session.add(user)
        await session.commit()
        await session.refresh(user)
    return user
