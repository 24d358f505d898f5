from fastapi import APIRouter

from .navigation import router as navigation_router
from .preferences import router as preferences_router


router = APIRouter()
router.include_router(navigation_router)
router.include_router(preferences_router)
