"""
CareerHQ - Main Application

FastAPI backend with:
- MongoDB for the study-abroad catalogue, blog and leads
- Cloudinary for hosted images
- CRM automation API for converted leads
- JWT authentication for the admin back-office

Run: uvicorn careerhq.main:app --reload
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from careerhq import __version__
from careerhq.api.routes import api_router
from careerhq.core.config import Settings, get_settings
from careerhq.core.errors import register_exception_handlers
from careerhq.core.log import setup_logging
from careerhq.db.mongodb import MongoStore
from careerhq.services.automation_client import AutomationClient
from careerhq.services.media_service import MediaService

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[MongoStore] = None,
    media: Optional[MediaService] = None,
    automation: Optional[AutomationClient] = None,
) -> FastAPI:
    """
    Build the application.

    Collaborators default to the real MongoDB, Cloudinary and automation
    clients built from settings; tests pass their own.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title="CareerHQ API",
        description="""
        Study-abroad catalogue, blog and lead capture for CareerHQ.

        ## Features
        - **Catalogue**: countries, universities and courses addressed by slug or id
        - **Bulk import**: spreadsheet rows (JSON or CSV) with auto-created parents
        - **Blog**: posts, categories and related posts
        - **Leads**: enquiry capture and conversion to the CRM
        - **Authentication**: JWT-based admin login
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.settings = settings
    app.state.store = store or MongoStore(settings.mongodb_uri, settings.mongodb_db)
    app.state.media = media or MediaService(settings)
    app.state.automation = automation or AutomationClient(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app, settings)

    # Include API routes
    app.include_router(api_router, prefix="/api")

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Detailed health check."""
        return {
            "status": "healthy",
            "mongodb": "connected" if app.state.store.ping() else "disconnected",
        }

    @app.on_event("shutdown")
    async def shutdown_event():
        app.state.store.close()
        logger.info("MongoDB client closed")

    return app


app = create_app()
