"""Async engine and session factory."""

from __future__ import annotations

from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.functions import GenericFunction
from sqlalchemy.types import String

from core import settings


class casefold(GenericFunction[str]):
    """Unicode case folding; ``lower()`` everywhere except SQLite."""

    type = String()
    inherit_cache = True


@compiles(casefold)
def _compile_casefold(element: casefold, compiler: Any, **kw: Any) -> str:
    return f"lower({compiler.process(element.clauses, **kw)})"


@compiles(casefold, "sqlite")
def _compile_casefold_sqlite(element: casefold, compiler: Any, **kw: Any) -> str:
    return f"casefold({compiler.process(element.clauses, **kw)})"


def _sqlite_casefold(value: str | None) -> str | None:
    if value is None:
        return None
    return value.casefold()


def _configure_sqlite_connection(dbapi_connection: Any, _connection_record: Any) -> None:
    # SQLite's builtin lower() only folds ASCII.
    dbapi_connection.create_function("casefold", 1, _sqlite_casefold)
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, **engine_kwargs: Any) -> AsyncEngine:
    """Create an async engine; SQLite connections get foreign keys and ``casefold``."""
    is_sqlite = make_url(database_url).get_backend_name() == "sqlite"
    connect_args = {"check_same_thread": False} if is_sqlite else {}
    engine = create_async_engine(
        database_url,
        connect_args=connect_args,
        pool_pre_ping=not is_sqlite,
        **engine_kwargs,
    )
    if is_sqlite:
        event.listen(engine.sync_engine, "connect", _configure_sqlite_connection)
    return engine


async_engine = build_engine(settings.database_url)
AsyncSessionMaker = async_sessionmaker(async_engine, expire_on_commit=False)
