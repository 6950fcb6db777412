"""Domain tests for per-collection restore transactions."""

import pytest

from martbackup.domain import errors
from martbackup.domain.restore import RestoreService


def test_restore_replaces_contents(restore_service, temp_store, seed_store):
    """Existing documents are removed and incoming ones written."""
    seed_store({"customers": [{"id": "old-1", "name": "Old"}, {"id": "old-2", "name": "Older"}]})

    written = restore_service.restore_collection(
        "customers", [{"id": "new-1", "name": "New"}]
    )

    assert written == [{"id": "new-1", "name": "New"}]
    assert temp_store.list_all("customers") == [{"id": "new-1", "name": "New"}]


def test_restore_keeps_record_order(restore_service, temp_store):
    """Records are stored in the order given."""
    records = [{"id": doc_id} for doc_id in ["c", "a", "b"]]
    restore_service.restore_collection("categories", records)
    assert [r["id"] for r in temp_store.list_all("categories")] == ["c", "a", "b"]


def test_restore_assigns_missing_ids(restore_service, temp_store):
    """Records without an id get one that can be used to fetch them."""
    written = restore_service.restore_collection("vendors", [{"name": "Fresh Farms"}])

    assert len(written) == 1
    new_id = written[0]["id"]
    assert new_id
    assert temp_store.get_document("vendors", new_id) == {"id": new_id, "name": "Fresh Farms"}


def test_restore_same_id_as_existing(restore_service, temp_store, seed_store):
    """A record reusing an existing id overwrites it rather than being deleted."""
    seed_store({"products": [{"id": "p1", "name": "Milk", "price": 1}]})

    restore_service.restore_collection("products", [{"id": "p1", "name": "Milk", "price": 2}])

    assert temp_store.list_all("products") == [{"id": "p1", "name": "Milk", "price": 2}]


def test_restore_duplicate_ids_last_wins(restore_service, temp_store):
    """Repeated ids in one collection keep the last record."""
    written = restore_service.restore_collection(
        "banks", [{"id": "b1", "v": 1}, {"id": "b2"}, {"id": "b1", "v": 2}]
    )
    assert written == [{"id": "b2"}, {"id": "b1", "v": 2}]
    assert temp_store.list_all("banks") == written


def test_restore_does_not_touch_other_collections(restore_service, temp_store, seed_store):
    """Only the named collection changes."""
    seed_store({"sales": [{"id": "s1"}], "purchases": [{"id": "pu1"}]})
    restore_service.restore_collection("sales", [{"id": "s2"}])
    assert temp_store.list_all("purchases") == [{"id": "pu1"}]


def test_restore_failure_is_tagged_and_atomic(failing_store, seed_store, temp_store):
    """A failed commit leaves the collection untouched and names it."""
    seed_store({"sales": [{"id": "s1", "total": 5}]})
    service = RestoreService(failing_store({"sales"}, code=errors.PERMISSION_DENIED))

    with pytest.raises(errors.StoreError) as excinfo:
        service.restore_collection("sales", [{"id": "s2"}])

    assert excinfo.value.collection == "sales"
    assert excinfo.value.code == errors.PERMISSION_DENIED
    assert temp_store.list_all("sales") == [{"id": "s1", "total": 5}]


def test_read_failure_is_tagged_and_writes_nothing(failing_store, seed_store, temp_store):
    """A failed read names the collection and commits no batch."""
    seed_store({"sales": [{"id": "s1"}]})
    store = failing_store(fail_reads_on={"sales"})

    with pytest.raises(errors.StoreError) as excinfo:
        RestoreService(store).restore_collection("sales", [{"id": "s2"}])

    assert excinfo.value.collection == "sales"
    assert excinfo.value.code == errors.UNAVAILABLE
    assert store.committed == []
    assert temp_store.list_all("sales") == [{"id": "s1"}]


def test_restore_unknown_collection(restore_service):
    """Unknown collection names are rejected before touching the store."""
    with pytest.raises(errors.ValidationError):
        restore_service.restore_collection("budgets", [])
