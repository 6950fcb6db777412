"""Document store layer for martbackup."""

from martbackup.database.base import DocumentStore, WriteBatch
from martbackup.database.factories import create_sqlite_store

__all__ = ["DocumentStore", "WriteBatch", "create_sqlite_store"]
