"""
Database operations for the Study Tracker
"""

from .config import get_database_path
from .core.database.connection import DatabaseConnection
from .core.database.state_repository import StateRepository


def init_db(db_path=None):
    """Initialize database and return its state repository"""
    return StateRepository.from_path(db_path or get_database_path())


__all__ = ['DatabaseConnection', 'StateRepository', 'get_database_path', 'init_db']
