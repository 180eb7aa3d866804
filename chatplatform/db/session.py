# chatplatform/db/session.py
import os
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from chatplatform.config import DATABASE, PATHS

# Global engine variable
engine: Optional[Engine] = None
SessionLocal: Optional[sessionmaker] = None


def _default_url() -> str:
    os.makedirs(PATHS.data_dir, exist_ok=True)
    return f"sqlite:///{os.path.join(PATHS.data_dir, 'app.db')}"


def init_db_engine(db_url: Optional[str] = None) -> Engine:
    """(Re)create the engine and session factory."""
    global engine, SessionLocal

    db_url = db_url or DATABASE.url or _default_url()

    connect_args = {}
    if db_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}

    if engine is not None:
        engine.dispose()

    engine = create_engine(
        db_url,
        connect_args=connect_args,
        pool_pre_ping=True,
        echo=DATABASE.echo,
    )

    if db_url.startswith("sqlite"):
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)
    return engine


def get_engine() -> Engine:
    if engine is None:
        init_db_engine()
    return engine


def get_db() -> Generator[Session, None, None]:
    """
    Dependency to yield a database session per request.
    Closes the session automatically after the request.
    """
    if SessionLocal is None:
        init_db_engine()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """Standalone session for work outside the request lifecycle."""
    if SessionLocal is None:
        init_db_engine()
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
