"""BASELog: jump logbook record management and query engine."""

__version__ = "0.1.0"
