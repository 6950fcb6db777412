"""Domain model entities for martbackup.

These are plain data classes describing snapshots and operation results,
independent of how the document store persists anything.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

# A document: optional "id" plus arbitrary JSON fields.
Record = dict[str, Any]

# Fixed order used for export keys, restore order and summaries.
COLLECTION_NAMES: tuple[str, ...] = (
    "customers",
    "vendors",
    "categories",
    "products",
    "sales",
    "purchases",
    "checks",
    "workers",
    "banks",
    "currencies",
    "salaryPayments",
    "workerExpenses",
    "workerAttendance",
)


class ImportState(str, Enum):
    """States of one import run."""

    IDLE = "idle"
    FILE_SELECTED = "file_selected"
    PARSING = "parsing"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    RESTORING = "restoring"
    APPLYING = "applying"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class DocumentRef:
    """Reference to one document in the store."""

    collection: str
    id: str


@dataclass(frozen=True)
class Snapshot:
    """A timestamped bundle of zero or more collections."""

    timestamp: str
    collections: dict[str, list[Record]] = field(default_factory=dict)

    def present(self) -> list[str]:
        """Names of the collections carried by this snapshot, in restore order."""
        return [name for name in COLLECTION_NAMES if name in self.collections]


@dataclass(frozen=True)
class BackupStatus:
    """User-facing outcome of an export or import operation."""

    success: bool
    message: str
    state: Optional[ImportState] = None
    filename: Optional[str] = None
    counts: dict[str, int] = field(default_factory=dict)
    failed_collection: Optional[str] = None
    replaced: list[str] = field(default_factory=list)
    not_attempted: list[str] = field(default_factory=list)
