# chatplatform/db/init_db.py
"""
Database initialization and schema setup.
Creates tables for users, projects, prompts, conversations, messages and files.
"""

from chatplatform.db.base import Base
from chatplatform.db import models  # noqa: F401  (registers tables on Base.metadata)
from chatplatform.db.session import get_engine
from chatplatform.utils.logger import setup_logger

logger = setup_logger(__name__)


def init_database():
    """Create all required tables."""
    engine = get_engine()
    try:
        Base.metadata.create_all(bind=engine)
        logger.info(f"Database initialized at {engine.url.render_as_string(hide_password=True)}")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise


def reset_database():
    """Drop all tables and recreate (USE WITH CAUTION)."""
    engine = get_engine()
    Base.metadata.drop_all(bind=engine)
    logger.warning("All tables dropped")
    init_database()
