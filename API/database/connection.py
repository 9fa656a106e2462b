"""
Database engine and session management.
"""

from contextlib import contextmanager
from typing import Generator

from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from core.config import settings
from .base import Base


class DatabaseConnection:
    """Owns the engine and the session factory."""
    
    def __init__(self, database_url: str):
        self.database_url = database_url
        
        engine_kwargs = {"pool_pre_ping": True}
        if database_url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            # In-memory SQLite must share one connection across sessions
            if database_url in ("sqlite://", "sqlite:///:memory:"):
                engine_kwargs["poolclass"] = StaticPool
        
        self.engine = create_engine(database_url, **engine_kwargs)
        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )
    
    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Session scope: commit on success, rollback on error."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
    
    def create_tables(self):
        Base.metadata.create_all(bind=self.engine)
    
    def drop_tables(self):
        Base.metadata.drop_all(bind=self.engine)


db = DatabaseConnection(settings.database_url)


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency: one session per request."""
    session = db.SessionLocal()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db():
    """Create all tables that don't exist yet."""
    # Make sure every model is registered on Base.metadata
    from . import models  # noqa: F401
    db.create_tables()


def reset_db():
    """Drop and recreate all tables. Used by tests and local resets."""
    from . import models  # noqa: F401
    db.drop_tables()
    db.create_tables()
    logger.warning("Database reset")
