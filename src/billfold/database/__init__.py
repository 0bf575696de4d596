"""Database layer for billfold application."""

from billfold.database.base import Database
from billfold.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
