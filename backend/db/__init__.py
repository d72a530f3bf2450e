"""Database helpers."""

from .errors import is_foreign_key_violation, is_unique_violation
from .session import AsyncSessionMaker, build_engine, casefold

__all__ = [
    "AsyncSessionMaker",
    "build_engine",
    "casefold",
    "is_foreign_key_violation",
    "is_unique_violation",
]
