"""Post listing, creation, deletion and like endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Body, Depends, Query, Response, status
from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_current_identity, get_db, get_optional_identity
from models import Post
from models.post import MAX_POST_BODY_LENGTH, MAX_POST_TITLE_LENGTH
from services import likes as likes_service
from services import listing, post_policy
from services.identity import Identity
from .pagination import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, LimitQuery, PageQuery

router = APIRouter(prefix="/posts", tags=["posts"])


class PostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    author_id: str
    title: str
    body: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_post(cls, post: Post) -> "PostResponse":
        if post.id is None:
            raise ValueError("Post record missing identifier")
        return cls.model_validate(post)


class ListedPostResponse(PostResponse):
    liked: bool = False

    @classmethod
    def from_listed(cls, item: listing.ListedPost) -> "ListedPostResponse":
        base = PostResponse.from_post(item.post)
        return cls(**base.model_dump(), liked=item.liked)


class PostPageResponse(BaseModel):
    items: list[ListedPostResponse]
    page: int
    limit: int
    total: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool
    search: str | None = None
    liked_enabled: bool

    @classmethod
    def from_page(cls, page: listing.PostPage) -> "PostPageResponse":
        return cls(
            items=[ListedPostResponse.from_listed(item) for item in page.items],
            page=page.page,
            limit=page.limit,
            total=page.total,
            total_pages=page.total_pages,
            has_next_page=page.has_next_page,
            has_prev_page=page.has_prev_page,
            search=page.search,
            liked_enabled=page.liked_enabled,
        )


class PostSearchRequest(BaseModel):
    search: str | None = Field(default=None, max_length=listing.MAX_SEARCH_LENGTH)


class PostCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=MAX_POST_TITLE_LENGTH)
    body: str = Field(min_length=1, max_length=MAX_POST_BODY_LENGTH)

    @field_validator("title", "body")
    @classmethod
    def _reject_blank(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("Field cannot be blank")
        return normalized


class LikeResponse(BaseModel):
    liked: bool = True
    post_id: int
    created: bool


class UnlikeResponse(BaseModel):
    liked: bool = False
    removed: bool
    post_id: int


class ClearLikesResponse(BaseModel):
    deleted_count: int


@router.get("", response_model=PostPageResponse)
async def get_posts(
    page: PageQuery = DEFAULT_PAGE,
    limit: LimitQuery = DEFAULT_PAGE_SIZE,
    search: Annotated[str | None, Query(max_length=listing.MAX_SEARCH_LENGTH)] = None,
    session: AsyncSession = Depends(get_db),
    identity: Identity | None = Depends(get_optional_identity),
) -> PostPageResponse:
    result = await listing.list_posts(
        session,
        page=page,
        limit=limit,
        search=search,
        identity=identity,
    )
    return PostPageResponse.from_page(result)


@router.post("/search", response_model=PostPageResponse)
async def search_posts(
    page: PageQuery = DEFAULT_PAGE,
    limit: LimitQuery = DEFAULT_PAGE_SIZE,
    payload: PostSearchRequest | None = Body(default=None),
    session: AsyncSession = Depends(get_db),
    identity: Identity | None = Depends(get_optional_identity),
) -> PostPageResponse:
    result = await listing.list_posts(
        session,
        page=page,
        limit=limit,
        search=payload.search if payload is not None else None,
        identity=identity,
    )
    return PostPageResponse.from_page(result)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=PostResponse)
async def create_post(
    payload: PostCreateRequest,
    session: AsyncSession = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> PostResponse:
    post = await post_policy.create_post(
        session,
        identity,
        title=payload.title,
        body=payload.body,
    )
    return PostResponse.from_post(post)


@router.delete("/likes", response_model=ClearLikesResponse)
async def clear_likes(
    session: AsyncSession = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> ClearLikesResponse:
    deleted_count = await likes_service.clear_likes(session, identity)
    return ClearLikesResponse(deleted_count=deleted_count)


@router.delete("/{post_id}", status_code=status.HTTP_200_OK)
async def delete_post(
    post_id: int,
    session: AsyncSession = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> dict[str, str]:
    await post_policy.delete_owned_post(session, identity, post_id)
    return {"detail": "Deleted"}


@router.post("/{post_id}/like", response_model=LikeResponse)
async def like_post(
    post_id: int,
    response: Response,
    session: AsyncSession = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> LikeResponse:
    result = await likes_service.like_post(session, identity, post_id)
    response.status_code = (
        status.HTTP_201_CREATED if result.created else status.HTTP_200_OK
    )
    return LikeResponse(post_id=result.post_id, created=result.created)


@router.delete("/{post_id}/like", response_model=UnlikeResponse)
async def unlike_post(
    post_id: int,
    session: AsyncSession = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> UnlikeResponse:
    result = await likes_service.unlike_post(session, identity, post_id)
    return UnlikeResponse(removed=result.removed, post_id=result.post_id)
