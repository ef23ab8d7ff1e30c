"""Logbook wiring: engine, repositories, services and state from configuration."""

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from .config.settings import get_allow_number_shift, get_database_url
from .database.connection import create_db_engine, create_session_factory
from .logging_config import setup_logging
from .repositories.catalog_repository import SqlCatalogRepository
from .repositories.threaded_repository import ThreadedJumpRepository
from .services.catalog_service import CatalogService
from .state.jump_list import JumpListState

logger = logging.getLogger(__name__)


class Logbook:
    """Entry point bundling the jump list state and catalog access."""

    def __init__(self, engine: Engine, allow_number_shift: bool | None = None):
        self.engine = engine
        self.session_factory: sessionmaker = create_session_factory(engine)
        self.repo = ThreadedJumpRepository(
            self.session_factory,
            get_allow_number_shift() if allow_number_shift is None else allow_number_shift,
        )
        self.jumps = JumpListState(self.repo)

    @contextmanager
    def catalog(self) -> Iterator[CatalogService]:
        """Catalog service on a session that is closed when the block exits."""
        session = self.session_factory()
        try:
            yield CatalogService(SqlCatalogRepository(session))
        finally:
            session.close()

    def close(self) -> None:
        self.jumps.cancel_hydration()
        self.engine.dispose()


def open_logbook(database_url: str | None = None, configure_logging: bool = True) -> Logbook:
    """
    Open the logbook database described by configuration.

    The database must already exist; its schema belongs to the legacy
    store and is never created or migrated here.

    Args:
        database_url: Overrides the configured database URL
        configure_logging: Whether to install the JSON and diagnostic handlers

    Returns:
        Logbook ready for JumpListState.load()
    """
    if configure_logging:
        setup_logging()

    url = database_url or get_database_url()
    if url.startswith("sqlite:///"):
        db_path = url.replace("sqlite:///", "", 1)
        if db_path != ":memory:" and not os.path.exists(db_path):
            raise FileNotFoundError(f"Logbook database not found: {db_path}")

    db_type = "SQLite" if url.startswith("sqlite") else "external"
    logger.info(f"Opening logbook ({db_type})")
    return Logbook(create_db_engine(url))
