"""Main FastAPI application for the Task Management API."""
from datetime import datetime, timezone

from fastapi import FastAPI

from app.config import get_settings
from app.db.init import init_db
from app.middleware.cors import add_cors_middleware
from app.middleware.errors import add_exception_handlers
from app.routers import auth_router, tasks_router
from app.schemas.response import success_response
from app.utils.logger import get_logger

logger = get_logger(__name__)
settings = get_settings()

# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="REST API for personal task management with Azure AD sign-in",
    version=settings.version,
)

add_cors_middleware(app)
add_exception_handlers(app)


@app.on_event("startup")
async def startup_event():
    """Initialize database tables on startup."""
    try:
        init_db()
    except Exception as e:
        logger.warning(
            "Database initialization failed; database operations may fail",
            error=str(e),
        )
    logger.info("Application startup complete", environment=settings.environment)


@app.get("/health")
async def health_check():
    """Liveness check. Does not touch the database."""
    return success_response(
        {
            "status": "healthy",
            "version": settings.version,
            "service": settings.app_name,
            "environment": settings.environment,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
        "Health check successful",
    )


@app.get("/")
async def root():
    """Root endpoint - API welcome message."""
    return success_response(
        {
            "title": settings.app_name,
            "version": settings.version,
            "docs": "/docs",
            "health": "/health",
            "features": settings.feature_flags.model_dump(),
        },
        "Welcome to the Task Management API",
    )


app.include_router(auth_router, prefix="/api/auth")  # /api/auth/callback
app.include_router(tasks_router, prefix="/api")  # /api/task/...


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=not settings.is_production,
    )
