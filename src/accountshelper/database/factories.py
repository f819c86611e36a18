"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from accountshelper.database.sqlalchemy_db import SQLAlchemyDatabase

DB_PATH_ENVVAR = "ACCOUNTSHELPER_DB_PATH"


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks ACCOUNTSHELPER_DB_PATH
            environment variable, then defaults to ~/.accountshelper/accountshelper.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get(DB_PATH_ENVVAR)

    if database_path is None:
        db_dir = Path.home() / ".accountshelper"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "accountshelper.db")

    return SQLAlchemyDatabase(f"sqlite:///{database_path}")
