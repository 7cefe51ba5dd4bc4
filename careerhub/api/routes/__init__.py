"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from careerhub.api.routes.auth_routes import router as auth_router
from careerhub.api.routes.user_routes import router as user_router
from careerhub.api.routes.job_routes import router as job_router
from careerhub.api.routes.placement_test_routes import router as test_router
from careerhub.api.routes.webinar_routes import router as webinar_router
from careerhub.api.routes.admin_routes import router as admin_router
from careerhub.api.routes.media_routes import router as media_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(user_router)
api_router.include_router(job_router)
api_router.include_router(test_router)
api_router.include_router(webinar_router)
api_router.include_router(admin_router)
api_router.include_router(media_router)
