"""Snapshot export domain service."""

import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Callable, Mapping, Optional, Protocol, Sequence

from martbackup.domain.entities import BackupStatus, Record
from martbackup.domain.errors import SerializationError
from martbackup.domain.snapshot import build_snapshot, encode_snapshot
from martbackup.utils.timestamp import backup_filename, now_iso

logger = logging.getLogger(__name__)


class Saver(Protocol):
    """Surface that receives a finished backup file."""

    def save(self, data: bytes, filename: str) -> None:
        ...


class FileSaver:
    """Saves backup files into a directory."""

    def __init__(self, directory: str | Path = "."):
        self.directory = Path(directory)

    def save(self, data: bytes, filename: str) -> Path:
        """Write data atomically using temp file + rename.

        Raises:
            OSError: If the file cannot be written; no partial file is left
        """
        self.directory.mkdir(parents=True, exist_ok=True)
        target = self.directory / filename
        fd, tmp_path = tempfile.mkstemp(suffix=".tmp", prefix=target.stem + "_", dir=str(self.directory))
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_path, target)
        except OSError:
            Path(tmp_path).unlink(missing_ok=True)
            raise
        return target


class SnapshotExporter:
    """Service for exporting in-memory collections to a backup file."""

    def __init__(self, saver: Saver, clock: Optional[Callable[[], datetime]] = None):
        """Initialize snapshot exporter.

        Args:
            saver: Surface the encoded file is handed to
            clock: Returns the current time; defaults to the system UTC clock
        """
        self.saver = saver
        self.clock = clock

    def export_snapshot(self, collections: Mapping[str, Sequence[Record]]) -> BackupStatus:
        """Export collections as one timestamped snapshot file.

        The input is never modified and the store is never contacted.
        Encoding finishes before the saver is called, so a failed export
        saves nothing.

        Args:
            collections: Collection name to records; missing names export as empty

        Returns:
            BackupStatus describing the outcome
        """
        timestamp = now_iso(self.clock() if self.clock else None)
        filename = backup_filename(timestamp)

        try:
            snapshot = build_snapshot(collections, timestamp)
            data = encode_snapshot(snapshot)
        except SerializationError as e:
            logger.error("Backup serialization failed: %s", e)
            return BackupStatus(success=False, message=f"Backup failed: {e}")

        try:
            self.saver.save(data, filename)
        except OSError as e:
            logger.exception("Could not save backup file %s", filename)
            return BackupStatus(
                success=False,
                message=f"Backup failed: could not save {filename}: {e}",
                filename=filename,
            )

        logger.info("Wrote backup file %s (%d bytes)", filename, len(data))
        return BackupStatus(
            success=True,
            message=f"Data backed up successfully! Saved as {filename}",
            filename=filename,
            counts={name: len(records) for name, records in snapshot.collections.items()},
        )
