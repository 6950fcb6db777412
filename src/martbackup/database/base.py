"""Abstract document store interface."""

import secrets
import string
from abc import ABC, abstractmethod
from typing import Any, Optional

# Import entities directly to avoid circular import through domain/__init__.py
from martbackup.domain.entities import COLLECTION_NAMES, DocumentRef, Record
from martbackup.domain.errors import ValidationError, unknown_collection

_ID_ALPHABET = string.ascii_letters + string.digits
AUTO_ID_LENGTH = 20


def new_document_id() -> str:
    """Generate a store-assigned document identifier."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(AUTO_ID_LENGTH))


def check_collection(name: str) -> None:
    """Raise ValidationError if name is not a recognized collection."""
    if name not in COLLECTION_NAMES:
        raise ValidationError(unknown_collection(name))


class WriteBatch:
    """Ordered set of delete/set operations committed atomically."""

    def __init__(self, store: "DocumentStore"):
        self._store = store
        self._operations: list[tuple[str, DocumentRef, Optional[dict[str, Any]]]] = []
        self._committed = False

    def delete(self, ref: DocumentRef) -> "WriteBatch":
        """Mark a document for deletion."""
        self._check_open()
        self._operations.append(("delete", ref, None))
        return self

    def set(self, ref: DocumentRef, data: dict[str, Any]) -> "WriteBatch":
        """Mark a document for insertion, replacing any existing content."""
        self._check_open()
        self._operations.append(("set", ref, dict(data)))
        return self

    def commit(self) -> None:
        """Apply every marked operation, or none of them."""
        self._check_open()
        self._committed = True
        self._store.commit_batch(list(self._operations))

    def __len__(self) -> int:
        return len(self._operations)

    def _check_open(self) -> None:
        if self._committed:
            raise ValidationError("Write batch has already been committed")


class DocumentStore(ABC):
    """Abstract document store interface for martbackup."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the store."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize store schema (create tables)."""
        pass

    # Bulk operations
    @abstractmethod
    def list_all(self, collection: str) -> list[Record]:
        """List every document of a collection, each including its id."""
        pass

    @abstractmethod
    def commit_batch(
        self, operations: list[tuple[str, DocumentRef, Optional[dict[str, Any]]]]
    ) -> None:
        """Apply batch operations in order within one transaction.

        Raises:
            StoreError: If any operation or the commit fails; nothing is applied.
        """
        pass

    def doc_ref(self, collection: str, doc_id: Optional[str] = None) -> DocumentRef:
        """Return a reference to a document, generating an id when none is given."""
        check_collection(collection)
        return DocumentRef(collection=collection, id=doc_id or new_document_id())

    def batch(self) -> WriteBatch:
        """Start a new write batch."""
        return WriteBatch(self)

    # Incremental operations
    @abstractmethod
    def add_document(self, collection: str, data: dict[str, Any]) -> str:
        """Add a document under a new id. Returns the document id."""
        pass

    @abstractmethod
    def get_document(self, collection: str, doc_id: str) -> Optional[Record]:
        """Get a document by id."""
        pass

    @abstractmethod
    def set_document(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        """Create or replace a document."""
        pass

    @abstractmethod
    def delete_document(self, collection: str, doc_id: str) -> None:
        """Delete a document if it exists."""
        pass

    @abstractmethod
    def count(self, collection: str) -> int:
        """Count documents in a collection."""
        pass
