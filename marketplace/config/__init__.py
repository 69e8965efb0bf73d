from .settings import Settings, get_settings
from .database import DatabaseManager, get_database, get_database_manager, lifespan
from .logging import setup_logging

__all__ = [
    "Settings",
    "get_settings",
    "DatabaseManager",
    "get_database",
    "get_database_manager",
    "lifespan",
    "setup_logging",
]
