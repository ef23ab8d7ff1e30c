"""Shared fixtures for logbook tests."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from baselog.database.connection import Base, create_db_engine, create_session_factory
from baselog.database.models import ExitObject, JumpType, LogEntry, ObjectImage


@pytest.fixture
def engine():
    """Create in-memory SQLite engine for testing."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def session(engine):
    """Create database session for testing."""
    session_local = sessionmaker(bind=engine)
    session = session_local()
    yield session
    session.close()


@pytest.fixture
def file_engine(tmp_path):
    """Create file-backed SQLite engine usable from worker threads."""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'BASELogbook.sqlite'}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(file_engine):
    return create_session_factory(file_engine)


@pytest.fixture
def file_session(session_factory):
    session = session_factory()
    yield session
    session.close()


def add_jump(session, jump_id, jump_number, **fields):
    """Insert a ZLOGENTRY row directly."""
    entity = LogEntry(
        jump_id=jump_id, entity=1, optimistic_lock=1, jump_number=jump_number, **fields
    )
    session.add(entity)
    session.commit()
    return entity


def add_object(session, object_id, name, **fields):
    """Insert a ZOBJECT row directly."""
    entity = ExitObject(object_id=object_id, entity=1, optimistic_lock=1, name=name, **fields)
    session.add(entity)
    session.commit()
    return entity


def add_image(session, image_id, object_id, image):
    entity = ObjectImage(
        image_id=image_id, entity=1, optimistic_lock=1, object_id=object_id, image=image
    )
    session.add(entity)
    session.commit()
    return entity


def add_jump_type(session, jump_type_id, name):
    entity = JumpType(jump_type_id=jump_type_id, entity=1, optimistic_lock=1, name=name)
    session.add(entity)
    session.commit()
    return entity
