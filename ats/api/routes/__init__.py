"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from ats.api.routes.auth_routes import router as auth_router
from ats.api.routes.applicant_routes import router as applicant_router
from ats.api.routes.email_routes import router as email_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(applicant_router)
api_router.include_router(email_router)
