"""
API Application Entry Point

Defines the FastAPI application serving email scoring, dashboard
statistics and trusted contact management.

Design Considerations:
- Logging configured once from settings before anything else
- Versioned route prefix for all scanner endpoints
- Comprehensive error handling
- Scanner service injected through a dependency so it can be replaced
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.config import EnvironmentType, get_settings
from api.routes import contacts, dashboard, emails
from api.utils.error_handlers import add_exception_handlers
from secure_inbox.utils.logging_config import setup_logging

API_PREFIX = "/api/v1"

logger = logging.getLogger("api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log application startup and shutdown."""
    logger.info("API service starting up")
    yield
    logger.info("API service shutting down")


def create_application() -> FastAPI:
    """
    Create and configure FastAPI application instance.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_DIR or None)

    app = FastAPI(
        title=settings.API_TITLE,
        description=settings.API_DESCRIPTION,
        version=settings.API_VERSION,
        docs_url="/docs" if settings.ENVIRONMENT != EnvironmentType.PRODUCTION else None,
        redoc_url="/redoc" if settings.ENVIRONMENT != EnvironmentType.PRODUCTION else None,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=settings.CORS_METHODS,
        allow_headers=["*"],
    )

    add_exception_handlers(app)

    app.include_router(emails.router, prefix=API_PREFIX)
    app.include_router(dashboard.router, prefix=API_PREFIX)
    app.include_router(contacts.router, prefix=API_PREFIX)

    @app.get("/health", tags=["Monitoring"])
    async def health_check():
        """API health check endpoint."""
        return {"status": "healthy", "version": settings.API_VERSION}

    logger.info(f"Application initialized in {settings.ENVIRONMENT.value} environment")
    return app


# Create application instance
app = create_application()
