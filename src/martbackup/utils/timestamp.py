"""Timestamp utilities for snapshot files."""

from datetime import datetime, UTC
from typing import Optional
from dateutil import parser as date_parser

BACKUP_FILENAME_PREFIX = "supermarket-backup-"


def now_iso(now: Optional[datetime] = None) -> str:
    """Return an ISO-8601 UTC timestamp with millisecond precision.

    Naive datetimes are taken to be UTC. The result uses a "Z" suffix,
    e.g. "2024-03-05T14:22:01.000Z".
    """
    if now is None:
        now = datetime.now(UTC)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    else:
        now = now.astimezone(UTC)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp string.

    Args:
        value: Timestamp string such as "2024-03-05T14:22:01.000Z"

    Returns:
        Parsed datetime

    Raises:
        ValueError: If the string is not an ISO-8601 timestamp
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError("timestamp must be a non-empty string")
    try:
        return date_parser.isoparse(value.strip())
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Invalid timestamp '{value}': {e}") from e


def backup_filename(timestamp: str) -> str:
    """Build the export filename for a snapshot timestamp.

    Sub-second digits and the zone suffix are dropped and colons become
    dashes: "2024-03-05T14:22:01.000Z" -> "supermarket-backup-2024-03-05T14-22-01.json".
    """
    return f"{BACKUP_FILENAME_PREFIX}{timestamp[:19].replace(':', '-')}.json"
