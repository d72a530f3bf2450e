"""HTTP-aware error types raised by the service layer."""

from __future__ import annotations

from fastapi import HTTPException, status

POST_NOT_FOUND_DETAIL = "Post not found"


class Unauthorized(HTTPException):
    """Raised when a write path has no valid identity."""

    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class NotFound(HTTPException):
    """Raised for missing posts and for posts the caller does not own."""

    def __init__(self, detail: str = POST_NOT_FOUND_DETAIL):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class Conflict(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class InternalError(HTTPException):
    """Opaque server-side failure; the cause is logged, never returned."""

    def __init__(self, detail: str = "Internal server error"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
        )
