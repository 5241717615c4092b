"""Public API routers."""

from fastapi import APIRouter

from .catalog import router as catalog_router
from .navigation import router as navigation_router

router = APIRouter()
router.include_router(catalog_router)
router.include_router(navigation_router)

__all__ = ["router"]
