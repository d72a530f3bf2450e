"""Shared pagination query parameters."""

from typing import Annotated

from fastapi import Query

from services.listing import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_PAGE, MAX_PAGE_SIZE

PageQuery = Annotated[int, Query(ge=1, le=MAX_PAGE, description="1-based page number")]
LimitQuery = Annotated[
    int,
    Query(ge=1, le=MAX_PAGE_SIZE, description=f"Page size, at most {MAX_PAGE_SIZE}"),
]

__all__ = ["DEFAULT_PAGE", "DEFAULT_PAGE_SIZE", "MAX_PAGE", "MAX_PAGE_SIZE", "PageQuery", "LimitQuery"]
