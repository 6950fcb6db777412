"""Mapper functions to convert between records and SQLAlchemy models.

Records carry their identifier inline under "id"; the table keeps it in a
separate key column. This layer is the only place that knows about the split.
"""

from typing import Any

from martbackup.domain.entities import Record
from martbackup.database.models import Document


def document_to_record(document: Document) -> Record:
    """Convert a stored Document row to a record with its id inline."""
    record: Record = {"id": document.doc_id}
    for key, value in (document.data or {}).items():
        if key != "id":
            record[key] = value
    return record


def record_payload(record: dict[str, Any]) -> dict[str, Any]:
    """Return the fields of a record without its id."""
    return {key: value for key, value in record.items() if key != "id"}
