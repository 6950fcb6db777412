"""Per-collection restore transactions."""

import logging
from typing import Sequence

from martbackup.database.base import DocumentStore, check_collection
from martbackup.domain.entities import Record
from martbackup.domain.errors import StoreError

logger = logging.getLogger(__name__)


class RestoreService:
    """Service for replacing the contents of a collection in the store."""

    def __init__(self, store: DocumentStore):
        """Initialize restore service.

        Args:
            store: Document store instance
        """
        self.store = store

    def restore_collection(self, name: str, records: Sequence[Record]) -> list[Record]:
        """Replace every document of a collection with the given records.

        Existing documents are deleted and the incoming records written in
        one batch, so the collection ends up holding exactly these records
        or is left as it was. Records keep their "id"; records without one
        get a store-assigned id.

        Args:
            name: Collection name
            records: Records to write, in order

        Returns:
            The written records, each with its "id"

        Raises:
            ValidationError: If name is not a recognized collection
            StoreError: If reading, preparing or committing fails
        """
        check_collection(name)
        try:
            existing = self.store.list_all(name)
            batch = self.store.batch()
            for record in existing:
                batch.delete(self.store.doc_ref(name, record["id"]))

            # Repeated ids: the last record wins and takes the later position.
            written: dict[str, Record] = {}
            for record in records:
                ref = self.store.doc_ref(name, record.get("id"))
                payload = {key: value for key, value in record.items() if key != "id"}
                batch.set(ref, payload)
                written.pop(ref.id, None)
                written[ref.id] = {"id": ref.id, **payload}

            batch.commit()
        except StoreError as e:
            raise e.for_collection(name) from e.__cause__

        logger.info(
            "Restored %s: removed %d, wrote %d", name, len(existing), len(written)
        )
        return list(written.values())
