"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from app.api.routes.upload_routes import router as upload_router
from app.api.routes.file_routes import router as file_router

# Main API router (mounted under /api)
api_router = APIRouter()
api_router.include_router(upload_router)

__all__ = ["api_router", "file_router"]
