"""Store factory functions for creating document store instances."""

import os
from pathlib import Path
from typing import Optional

from martbackup.database.sqlalchemy_db import SQLAlchemyDocumentStore

DB_PATH_ENV = "MARTBACKUP_DB_PATH"
DEFAULT_DB_PATH = Path("~/.martbackup/martbackup.db")


def resolve_db_path(database_path: Optional[str] = None) -> Path:
    """Work out where the SQLite file lives and make sure its directory exists.

    An explicit path wins over MARTBACKUP_DB_PATH, which wins over
    ~/.martbackup/martbackup.db. A leading "~" is expanded.
    """
    raw = database_path or os.environ.get(DB_PATH_ENV) or DEFAULT_DB_PATH
    path = Path(raw).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def create_sqlite_store(database_path: Optional[str] = None) -> SQLAlchemyDocumentStore:
    """Create a SQLite-backed document store.

    Args:
        database_path: Path to the SQLite file, see resolve_db_path

    Returns:
        SQLAlchemyDocumentStore instance configured for SQLite
    """
    return SQLAlchemyDocumentStore(f"sqlite:///{resolve_db_path(database_path)}")
