"""Version 1 API routers."""

from fastapi import APIRouter

from .auth import router as auth_router
from .posts import router as posts_router

router = APIRouter(prefix="/api/v1")
router.include_router(auth_router)
router.include_router(posts_router)

__all__ = ["router"]
