"""Database layer for accountshelper."""

from accountshelper.database.base import Database
from accountshelper.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
