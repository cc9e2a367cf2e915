"""CORS configuration for the React frontend."""
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.utils.logger import get_logger

logger = get_logger(__name__)


def add_cors_middleware(app):
    """Add CORS middleware to the FastAPI application."""
    settings = get_settings()
    origins = settings.allowed_origins
    logger.info("CORS configured", environment=settings.environment, allowed_origins=origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
