"""Snapshot file encoding and decoding.

A snapshot file is a UTF-8 JSON object with a "timestamp" string and one
key per backed-up collection, each holding a list of record objects.
"""

import json
import logging
from typing import Any, Mapping, Sequence

from martbackup.domain.entities import COLLECTION_NAMES, Record, Snapshot
from martbackup.domain.errors import (
    FormatError,
    SerializationError,
    invalid_collection,
    invalid_record,
)
from martbackup.utils.timestamp import parse_timestamp

logger = logging.getLogger(__name__)


def build_snapshot(collections: Mapping[str, Sequence[Record]], timestamp: str) -> Snapshot:
    """Build a snapshot carrying all thirteen collections.

    Collections missing from the mapping are written as empty lists.

    Raises:
        SerializationError: If a collection is not a list of records
    """
    bundled: dict[str, list[Record]] = {}
    for name in COLLECTION_NAMES:
        records = collections.get(name)
        if records is None:
            records = []
        if not isinstance(records, (list, tuple)):
            raise SerializationError(invalid_collection(name, "is not a list"))
        bundled[name] = list(records)
    return Snapshot(timestamp=timestamp, collections=bundled)


def encode_snapshot(snapshot: Snapshot) -> bytes:
    """Serialize a snapshot to UTF-8 JSON bytes.

    Raises:
        SerializationError: If any value cannot be represented in JSON
    """
    payload: dict[str, Any] = {"timestamp": snapshot.timestamp}
    for name in snapshot.present():
        payload[name] = snapshot.collections[name]
    try:
        text = json.dumps(payload, indent=2, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise SerializationError(str(e)) from e
    return text.encode("utf-8")


def _normalize_record(name: str, index: int, record: Any) -> Record:
    if not isinstance(record, dict):
        raise FormatError(invalid_record(name, index, "is not an object"))
    normalized = dict(record)
    if "id" not in normalized:
        return normalized

    record_id = normalized["id"]
    if record_id is None or record_id == "":
        del normalized["id"]
    elif isinstance(record_id, bool):
        raise FormatError(invalid_record(name, index, "has a non-string id"))
    elif isinstance(record_id, int):
        normalized["id"] = str(record_id)
    elif isinstance(record_id, float) and record_id.is_integer():
        normalized["id"] = str(int(record_id))
    elif not isinstance(record_id, str):
        raise FormatError(invalid_record(name, index, "has a non-string id"))
    return normalized


def decode_snapshot(data: bytes) -> Snapshot:
    """Parse snapshot file content.

    A collection key holding null is treated as absent. Keys that are not
    recognized collections are ignored.

    Raises:
        FormatError: If the content is not a well-formed snapshot
    """
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise FormatError(f"file is not UTF-8 text ({e.reason})") from e

    try:
        raw = json.loads(text)
    except (ValueError, RecursionError) as e:
        raise FormatError(f"not valid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise FormatError("top level must be a JSON object")

    if "timestamp" not in raw:
        raise FormatError("missing 'timestamp'")
    try:
        parse_timestamp(raw["timestamp"])
    except ValueError as e:
        raise FormatError(str(e)) from e

    collections: dict[str, list[Record]] = {}
    for name in COLLECTION_NAMES:
        records = raw.get(name)
        if records is None:
            continue
        if not isinstance(records, list):
            raise FormatError(invalid_collection(name, "is not a list"))
        collections[name] = [
            _normalize_record(name, index, record) for index, record in enumerate(records)
        ]

    unknown = sorted(set(raw) - set(COLLECTION_NAMES) - {"timestamp"})
    if unknown:
        logger.warning("Ignoring unknown keys in backup file: %s", ", ".join(unknown))

    return Snapshot(timestamp=raw["timestamp"], collections=collections)
