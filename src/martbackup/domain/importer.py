"""Snapshot import domain service."""

import logging
from pathlib import Path
from typing import Callable, Optional

from martbackup.database.base import DocumentStore
from martbackup.domain.entities import BackupStatus, ImportState, Record, Snapshot
from martbackup.domain.errors import (
    FormatError,
    StoreError,
    UserCancelled,
    restore_partial_failure,
)
from martbackup.domain.restore import RestoreService
from martbackup.domain.snapshot import decode_snapshot
from martbackup.domain.state import AppState

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]

NO_FILE_SELECTED = "Please select a backup file to restore."
CANCELLED_MESSAGE = "Restore operation cancelled by user."


def confirmation_message(filename: str, snapshot: Snapshot) -> str:
    """Build the prompt shown before any destructive action."""
    message = (
        f"Are you sure you want to restore data from {filename}? "
        "This will replace all existing data."
    )
    replacing = [name for name in snapshot.present() if snapshot.collections[name]]
    if replacing:
        message += f"\nCollections to replace: {', '.join(replacing)}"
    return message


def success_message(filename: str, counts: dict[str, int]) -> str:
    """Build the summary shown after a successful restore."""
    summary = "\n".join(f"{name}: {count}" for name, count in counts.items())
    return (
        f"Data from {filename} has been restored successfully!"
        f"\n\nData summary:\n{summary}"
    )


class SnapshotImporter:
    """Service for restoring the store and in-memory state from a backup file.

    One run walks IDLE -> FILE_SELECTED -> PARSING -> AWAITING_CONFIRMATION
    -> RESTORING -> APPLYING -> DONE. Parsing and restoring can end in
    FAILED; declining the confirmation ends in CANCELLED.
    """

    def __init__(self, store: DocumentStore, state: AppState, confirm: Confirm):
        """Initialize snapshot importer.

        Args:
            store: Document store the collections are restored into
            state: In-memory state updated after a successful restore
            confirm: Asked yes/no before anything is replaced
        """
        self.store = store
        self.state = state
        self.confirm = confirm
        self.restore_service = RestoreService(store)
        self.selected_file: Optional[Path] = None
        self.current_state = ImportState.IDLE
        self.history: list[ImportState] = [ImportState.IDLE]
        self.last_refresh_token: Optional[int] = None

    def _transition(self, new_state: ImportState) -> None:
        logger.debug("Import state %s -> %s", self.current_state.value, new_state.value)
        self.current_state = new_state
        self.history.append(new_state)

    def select_file(self, path: str | Path) -> None:
        """Select the backup file for the next restore."""
        self.selected_file = Path(path)
        self.history = [ImportState.IDLE]
        self.current_state = ImportState.IDLE
        self._transition(ImportState.FILE_SELECTED)

    def restore_from_file(self, path: str | Path) -> BackupStatus:
        """Select a backup file and restore from it."""
        self.select_file(path)
        return self.restore()

    def restore(self) -> BackupStatus:
        """Restore from the selected file.

        Never raises; every outcome is reported through the returned status.
        The file selection is cleared afterwards whatever the outcome.
        """
        if self.selected_file is None:
            return BackupStatus(success=False, message=NO_FILE_SELECTED, state=self.current_state)

        path = self.selected_file
        try:
            return self._run(path)
        finally:
            self.selected_file = None

    def _run(self, path: Path) -> BackupStatus:
        self._transition(ImportState.PARSING)
        try:
            data = path.read_bytes()
        except OSError as e:
            logger.error("Could not read backup file %s: %s", path, e)
            return self._fail(f"Restore failed: could not read {path.name}: {e.strerror or e}")
        try:
            snapshot = decode_snapshot(data)
        except FormatError as e:
            logger.error("Could not parse backup file %s: %s", path, e)
            return self._fail(f"Invalid backup file format: {e}")

        self._transition(ImportState.AWAITING_CONFIRMATION)
        try:
            if not self.confirm(confirmation_message(path.name, snapshot)):
                raise UserCancelled(CANCELLED_MESSAGE)
        except UserCancelled:
            logger.info("Restore from %s cancelled", path.name)
            self._transition(ImportState.CANCELLED)
            return BackupStatus(
                success=False, message=CANCELLED_MESSAGE, state=self.current_state
            )

        self._transition(ImportState.RESTORING)
        present = snapshot.present()
        restored: dict[str, list[Record]] = {}
        for index, name in enumerate(present):
            records = snapshot.collections[name]
            if not records:
                continue
            try:
                restored[name] = self.restore_service.restore_collection(name, records)
            except StoreError as e:
                logger.error("Restore of %s failed (%s): %s", name, e.code, e)
                replaced = list(restored)
                not_attempted = present[index + 1:]
                message = restore_partial_failure(name, e.describe(), replaced, not_attempted)
                return self._fail(
                    message,
                    failed_collection=name,
                    replaced=replaced,
                    not_attempted=not_attempted,
                )

        self._transition(ImportState.APPLYING)
        for name, records in restored.items():
            self.state.set(name, records)
        self.last_refresh_token = self.state.notify_data_refreshed(list(restored))

        self._transition(ImportState.DONE)
        counts = {name: len(snapshot.collections[name]) for name in present}
        for name, records in restored.items():
            counts[name] = len(records)
        logger.info("Restored %d collections from %s", len(restored), path.name)
        return BackupStatus(
            success=True,
            message=success_message(path.name, counts),
            state=self.current_state,
            counts=counts,
            replaced=list(restored),
        )

    def _fail(self, message: str, **details) -> BackupStatus:
        self._transition(ImportState.FAILED)
        return BackupStatus(success=False, message=message, state=self.current_state, **details)
