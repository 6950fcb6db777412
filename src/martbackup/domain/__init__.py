"""Domain layer for martbackup.

Services live in their own modules (exporter, importer, restore, state) and
are imported from there; this package only re-exports the plain data types
so the store layer can depend on it without import cycles.
"""

from martbackup.domain.entities import (
    COLLECTION_NAMES,
    BackupStatus,
    DocumentRef,
    ImportState,
    Record,
    Snapshot,
)

__all__ = [
    "COLLECTION_NAMES",
    "BackupStatus",
    "DocumentRef",
    "ImportState",
    "Record",
    "Snapshot",
]
