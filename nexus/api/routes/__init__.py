"""
API routers, mounted under settings.API_PREFIX.
"""

from fastapi import APIRouter

from nexus.api.routes import admin, artworks, auth, galleries, upload, users

router = APIRouter()

# Include all endpoint routers
router.include_router(auth.router)
router.include_router(artworks.router)
router.include_router(users.router)
router.include_router(galleries.router)
router.include_router(admin.router)
router.include_router(upload.router)

__all__ = ["router"]
