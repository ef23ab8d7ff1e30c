"""Centralized logbook configuration.

Every setting is read from the environment at call time so that tests and
embedding applications can override them without reloading modules.
"""

import os

DEFAULT_DB_PATH = "./data/BASELogbook.sqlite"
DEFAULT_DATE_FORMAT = "%d/%m/%Y"

_TRUTHY = {"1", "true", "yes", "on"}


def get_db_path() -> str:
    """Get the path of the SQLite logbook file."""
    return os.getenv("BASELOG_DB_PATH", DEFAULT_DB_PATH)


def get_database_url() -> str:
    """Get SQLAlchemy database URL.

    Returns:
        DATABASE_URL when set, otherwise a SQLite URL for the logbook path
    """
    return os.getenv("DATABASE_URL", f"sqlite:///{get_db_path()}")


def get_allow_number_shift() -> bool:
    """Whether the store may renumber jumps to resolve number conflicts."""
    return os.getenv("BASELOG_ALLOW_NUMBER_SHIFT", "true").strip().lower() in _TRUTHY


def get_log_level() -> str:
    return os.getenv("BASELOG_LOG_LEVEL", "INFO").upper()


def get_diagnostic_log_path() -> str:
    """Get the diagnostic log path, which sits next to the database by default."""
    return os.getenv("BASELOG_DIAGNOSTIC_LOG", get_db_path() + ".log")


def get_date_format() -> str:
    """Get the strftime format used to display jump dates."""
    return os.getenv("BASELOG_DATE_FORMAT", DEFAULT_DATE_FORMAT)
