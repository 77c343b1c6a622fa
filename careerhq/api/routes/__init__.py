"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from careerhq.api.routes.auth_routes import router as auth_router
from careerhq.api.routes.country_routes import router as country_router
from careerhq.api.routes.university_routes import router as university_router
from careerhq.api.routes.course_routes import router as course_router
from careerhq.api.routes.blog_routes import router as blog_router
from careerhq.api.routes.lead_routes import router as lead_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(country_router)
api_router.include_router(university_router)
api_router.include_router(course_router)
api_router.include_router(blog_router)
api_router.include_router(lead_router)
