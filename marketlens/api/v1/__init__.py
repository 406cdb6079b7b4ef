"""
API v1 routers
"""

from fastapi import APIRouter

from .health import router as health_router
from .search import router as search_router
from .sessions import router as sessions_router

api_router = APIRouter()

# Include routers
api_router.include_router(health_router, tags=["health"])
api_router.include_router(search_router, prefix="/search", tags=["search"])
api_router.include_router(sessions_router, prefix="/sessions", tags=["sessions"])
