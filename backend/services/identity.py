"""Bearer credential resolution.

Read paths call :func:`resolve_identity` and treat ``None`` as an anonymous
caller. Write paths pass the result through :func:`require_identity`.
"""

from __future__ import annotations

from dataclasses import dataclass

from core import ACCESS_TOKEN_TYPE, decode_token

from .errors import Unauthorized


@dataclass(frozen=True)
class Identity:
    user_id: str


def extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None

    scheme, _, value = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = value.strip()
    return token or None


def _extract_subject_from_token(token: str) -> str | None:
    try:
        payload = decode_token(token)
    except ValueError:
        return None

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        return None

    subject = payload.get("sub")
    if isinstance(subject, str):
        normalized = subject.strip()
        return normalized or None
    return None


def resolve_identity(authorization: str | None) -> Identity | None:
    """Return the caller identity, or None for anything short of a valid token."""
    token = extract_bearer_token(authorization)
    if token is None:
        return None
    subject = _extract_subject_from_token(token)
    if subject is None:
        return None
    return Identity(user_id=subject)


def require_identity(identity: Identity | None) -> Identity:
    if identity is None:
        raise Unauthorized()
    return identity
