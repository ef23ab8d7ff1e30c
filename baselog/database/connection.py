from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from ..config.settings import get_database_url

# Base class for models
Base = declarative_base()


def create_db_engine(database_url: str | None = None) -> Engine:
    """Create an engine for the logbook database.

    SQLite connections are shared with worker threads, so the same-thread
    check is disabled for them.
    """
    url = database_url or get_database_url()
    return create_engine(
        url,
        connect_args={"check_same_thread": False} if "sqlite" in url else {},
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create a session factory bound to the given engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
