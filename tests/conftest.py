"""Shared pytest fixtures for martbackup tests."""

import json
import logging
import tempfile
import os
import pytest

from martbackup.database.factories import create_sqlite_store
from martbackup.database.sqlalchemy_db import SQLAlchemyDocumentStore
from martbackup.domain import errors
from martbackup.domain.entities import COLLECTION_NAMES
from martbackup.domain.importer import SnapshotImporter
from martbackup.domain.restore import RestoreService
from martbackup.domain.state import AppState
from martbackup.utils.log import LOGGER_NAME


class FailingStore(SQLAlchemyDocumentStore):
    """Store whose batch commits, or reads, fail for chosen collections."""

    def __init__(
        self,
        database_url: str,
        fail_on: set[str],
        code: str = errors.UNAVAILABLE,
        fail_reads_on: set[str] = frozenset(),
    ):
        super().__init__(database_url)
        self.fail_on = set(fail_on)
        self.fail_reads_on = set(fail_reads_on)
        self.code = code
        self.committed: list[str] = []

    def list_all(self, collection):
        if collection in self.fail_reads_on:
            raise errors.StoreError("read timed out", code=self.code)
        return super().list_all(collection)

    def commit_batch(self, operations):
        names = {ref.collection for _, ref, _ in operations}
        if names & self.fail_on:
            raise errors.StoreError("backend went away", code=self.code)
        super().commit_batch(operations)
        self.committed.extend(sorted(names))


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers a test installed on the martbackup logger."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def db_path():
    """Path to a temporary SQLite file, removed afterwards."""
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    yield path
    if os.path.exists(path):
        os.unlink(path)


@pytest.fixture
def temp_store(db_path):
    """Create a temporary document store for testing."""
    store = create_sqlite_store(database_path=db_path)
    # Store the path for tests that need it
    store.database_path = db_path
    store.connect()
    store.initialize_schema()

    yield store

    store.disconnect()


@pytest.fixture
def failing_store(db_path):
    """Factory for a store that fails to commit or read the given collections."""
    stores = []

    def make(fail_on=(), code=errors.UNAVAILABLE, fail_reads_on=()):
        store = FailingStore(
            f"sqlite:///{db_path}",
            fail_on=set(fail_on),
            code=code,
            fail_reads_on=set(fail_reads_on),
        )
        stores.append(store)
        return store

    yield make

    for store in stores:
        store.disconnect()


@pytest.fixture
def app_state():
    """Empty in-memory application state."""
    return AppState()


@pytest.fixture
def restore_service(temp_store):
    """Create a RestoreService with a temporary store."""
    return RestoreService(temp_store)


@pytest.fixture
def confirm_calls():
    """Messages passed to the confirmation prompt."""
    return []


@pytest.fixture
def make_importer(temp_store, app_state, confirm_calls):
    """Factory for a SnapshotImporter that answers the prompt with `answer`."""

    def make(answer=True, store=None, state=None):
        def confirm(message):
            confirm_calls.append(message)
            return answer

        return SnapshotImporter(store or temp_store, state or app_state, confirm)

    return make


@pytest.fixture
def sample_collections():
    """A small data set touching every collection."""
    data = {name: [] for name in COLLECTION_NAMES}
    data["customers"] = [
        {"id": "cust-1", "name": "Ayse Demir", "phone": "555-0101", "balance": 120.5},
        {"id": "cust-2", "name": "Karim Haddad", "phone": "555-0102", "balance": 0},
    ]
    data["vendors"] = [{"id": "ven-1", "name": "Fresh Farms", "balance": -300}]
    data["categories"] = [{"id": "cat-1", "name": "Dairy"}, {"id": "cat-2", "name": "Bakery"}]
    data["products"] = [
        {
            "id": "prod-1",
            "name": "Milk 1L",
            "categoryId": "cat-1",
            "price": 1.25,
            "stock": 40,
            "tags": ["fresh", "cold"],
        }
    ]
    data["sales"] = [
        {
            "id": "sale-1",
            "customerId": "cust-1",
            "items": [{"productId": "prod-1", "quantity": 2, "price": 1.25}],
            "total": 2.5,
            "date": "2024-03-01",
        }
    ]
    data["purchases"] = [{"id": "pur-1", "vendorId": "ven-1", "total": 300, "paid": False}]
    data["checks"] = [{"id": "chk-1", "amount": 150, "dueDate": "2024-04-01", "status": "pending"}]
    data["workers"] = [{"id": "wrk-1", "name": "Omar", "salary": 900}]
    data["banks"] = [{"id": "bank-1", "name": "City Bank"}]
    data["currencies"] = [{"id": "cur-1", "code": "USD", "rate": 1}]
    data["salaryPayments"] = [{"id": "pay-1", "workerId": "wrk-1", "amount": 900}]
    data["workerExpenses"] = [{"id": "exp-1", "workerId": "wrk-1", "amount": 25, "note": None}]
    data["workerAttendance"] = [{"id": "att-1", "workerId": "wrk-1", "date": "2024-03-01", "present": True}]
    return data


@pytest.fixture
def seed_store(temp_store):
    """Write records straight into the store, keeping their ids."""

    def seed(collections):
        for name, records in collections.items():
            for record in records:
                payload = {key: value for key, value in record.items() if key != "id"}
                temp_store.set_document(name, record["id"], payload)

    return seed


@pytest.fixture
def write_backup(tmp_path):
    """Write a backup file from a dict and return its path."""

    def write(payload, name="backup.json"):
        path = tmp_path / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return write


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
