"""Shared domain error messages and error types."""

from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class BackupError(DomainError):
    """Base class for failures of the export/import pipeline."""


class FormatError(BackupError):
    """The selected backup file is not a valid snapshot."""


class SerializationError(BackupError):
    """In-memory state could not be encoded into a snapshot."""


class UserCancelled(BackupError):
    """The operator declined the destructive-action confirmation."""


# Store error classification codes
PERMISSION_DENIED = "permission-denied"
UNAVAILABLE = "unavailable"
ABORTED = "aborted"
UNKNOWN = "unknown"

_STORE_MESSAGES = {
    PERMISSION_DENIED: "You do not have permission to perform this action",
    UNAVAILABLE: "Service temporarily unavailable. Please try again",
    ABORTED: "The operation was aborted because of a conflicting write",
    UNKNOWN: "An unexpected error occurred",
}


class StoreError(BackupError):
    """A read, delete, write or commit against the document store failed."""

    def __init__(
        self, message: str, code: str = UNKNOWN, collection: Optional[str] = None
    ):
        super().__init__(message)
        self.code = code
        self.collection = collection

    def describe(self) -> str:
        """Return the user-facing description of this failure."""
        return _STORE_MESSAGES.get(self.code, _STORE_MESSAGES[UNKNOWN])

    def for_collection(self, collection: str) -> "StoreError":
        """Return a copy of this error tagged with a collection name."""
        error = StoreError(str(self), code=self.code, collection=collection)
        error.__cause__ = self.__cause__
        return error


def unknown_collection(name: str) -> str:
    """Return message for an unrecognized collection name."""
    return f"Unknown collection '{name}'"


def invalid_collection(name: str, reason: str) -> str:
    """Return message for a malformed collection in a backup file."""
    return f"collection '{name}' {reason}"


def invalid_record(name: str, index: int, reason: str) -> str:
    """Return message for a malformed record in a backup file."""
    return f"record {index} of '{name}' {reason}"


def restore_partial_failure(
    collection: str, reason: str, replaced: list[str], not_attempted: list[str]
) -> str:
    """Return message when a restore stops partway through the collections."""
    lines = [f"Restore failed at '{collection}': {reason}"]
    if replaced:
        lines.append(f"Already replaced: {', '.join(replaced)}")
    else:
        lines.append("No collections were replaced.")
    unchanged = [collection] + not_attempted
    lines.append(f"Left unchanged: {', '.join(unchanged)}")
    return "\n".join(lines)
