"""Initialize database tables."""
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel

import app.models  # noqa: F401  registers the table models
from app.db.config import engine as default_engine
from app.utils.logger import get_logger

logger = get_logger(__name__)


def init_db(db_engine: Engine = None):
    """Create all tables in the database."""
    db_engine = db_engine or default_engine
    logger.info("Creating database tables", url=str(db_engine.url.render_as_string(hide_password=True)))
    SQLModel.metadata.create_all(db_engine)
    logger.info("Database tables created")


if __name__ == "__main__":
    init_db()
