"""Business logic services."""

from .errors import Conflict, InternalError, NotFound, Unauthorized
from .identity import Identity, extract_bearer_token, require_identity, resolve_identity
from .likes import LikeResult, UnlikeResult, clear_likes, like_post, unlike_post
from .listing import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    MAX_SEARCH_LENGTH,
    ListedPost,
    PostPage,
    list_posts,
)
from .post_policy import create_post, delete_owned_post, require_post_exists

__all__ = [
    "Conflict",
    "InternalError",
    "NotFound",
    "Unauthorized",
    "Identity",
    "extract_bearer_token",
    "require_identity",
    "resolve_identity",
    "LikeResult",
    "UnlikeResult",
    "clear_likes",
    "like_post",
    "unlike_post",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "MAX_SEARCH_LENGTH",
    "ListedPost",
    "PostPage",
    "list_posts",
    "create_post",
    "delete_owned_post",
    "require_post_exists",
]
