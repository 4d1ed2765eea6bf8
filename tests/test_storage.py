"""
Tests for insert-only storage backends and transaction support
"""

import pytest
import tempfile
from pathlib import Path

from product_catalog.errors import IntegrityError
from product_catalog.storage import InMemoryStorage, SQLiteStorage, create_storage


def make_row(record_id, business_key="PROD001", parent_key="PROD001", name="Savings"):
    return {
        "record_id": record_id,
        "business_key": business_key,
        "parent_key": parent_key,
        "created_at": "2024-01-01T00:00:00+00:00",
        "payload": {"product_name": name},
    }


@pytest.fixture
def sqlite_path():
    """Temporary SQLite database file"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir) / "catalog.db"


@pytest.fixture(params=["memory", "sqlite"])
def storage(request, sqlite_path):
    """Each storage backend in turn"""
    if request.param == "memory":
        backend = InMemoryStorage()
    else:
        backend = SQLiteStorage(sqlite_path)
    yield backend
    backend.close()


class TestStorageBackends:
    """Behaviour shared by every backend"""

    def test_insert_and_load(self, storage):
        """Test inserted rows can be loaded back by id"""
        storage.insert("product_versions", "r1", make_row("r1"))

        loaded = storage.load("product_versions", "r1")
        assert loaded == make_row("r1")
        assert storage.load("product_versions", "missing") is None
        assert storage.count("product_versions") == 1

    def test_duplicate_id_rejected(self, storage):
        """Test a surrogate id can only be written once"""
        storage.insert("product_versions", "r1", make_row("r1"))

        with pytest.raises(IntegrityError):
            storage.insert("product_versions", "r1", make_row("r1", name="Other"))

        assert storage.load("product_versions", "r1")["payload"]["product_name"] == "Savings"

    def test_load_all_in_insertion_order(self, storage):
        """Test rows come back in the order they were inserted"""
        for record_id in ["z", "a", "m"]:
            storage.insert("product_versions", record_id, make_row(record_id))

        ids = [row["record_id"] for row in storage.load_all("product_versions")]
        assert ids == ["z", "a", "m"]

    def test_find_by_business_and_parent_key(self, storage):
        """Test equality filters on the key columns"""
        storage.insert("charge_versions", "r1", make_row("r1", "PROD001/FEE", "PROD001"))
        storage.insert("charge_versions", "r2", make_row("r2", "PROD002/FEE", "PROD002"))
        storage.insert("charge_versions", "r3", make_row("r3", "PROD001/ATM", "PROD001"))

        by_key = storage.find("charge_versions", {"business_key": "PROD001/FEE"})
        assert [row["record_id"] for row in by_key] == ["r1"]

        by_parent = storage.find("charge_versions", {"parent_key": "PROD001"})
        assert [row["record_id"] for row in by_parent] == ["r1", "r3"]

        assert storage.find("charge_versions", {"parent_key": "PROD999"}) == []

    def test_find_on_payload_column(self, storage):
        """Test filters on fields that are not key columns"""
        storage.insert("product_versions", "r1", make_row("r1"))
        storage.insert("product_versions", "r2", make_row("r2", "PROD002", "PROD002"))

        results = storage.find("product_versions", {"record_id": "r2"})
        assert len(results) == 1
        assert results[0]["business_key"] == "PROD002"

    def test_returned_rows_are_copies(self, storage):
        """Test mutating a loaded row does not change the stored row"""
        storage.insert("product_versions", "r1", make_row("r1"))

        loaded = storage.load("product_versions", "r1")
        loaded["payload"]["product_name"] = "Changed"

        assert storage.load("product_versions", "r1")["payload"]["product_name"] == "Savings"

    def test_atomic_commits(self, storage):
        """Test rows written in an atomic block are kept"""
        with storage.atomic():
            storage.insert("product_versions", "r1", make_row("r1"))
            storage.insert("product_versions", "r2", make_row("r2"))

        assert storage.count("product_versions") == 2

    def test_atomic_rolls_back_on_error(self, storage):
        """Test rows written in a failed atomic block are discarded"""
        storage.insert("product_versions", "r0", make_row("r0"))

        with pytest.raises(RuntimeError):
            with storage.atomic():
                storage.insert("product_versions", "r1", make_row("r1"))
                raise RuntimeError("boom")

        assert storage.count("product_versions") == 1
        assert storage.load("product_versions", "r1") is None

    def test_nested_atomic_rolls_back_whole_unit(self, storage):
        """Test an error in a nested block undoes the outer block too"""
        with pytest.raises(RuntimeError):
            with storage.atomic():
                storage.insert("product_versions", "r1", make_row("r1"))
                with storage.atomic():
                    storage.insert("product_versions", "r2", make_row("r2"))
                raise RuntimeError("boom")

        assert storage.count("product_versions") == 0

    def test_clear_table(self, storage):
        """Test clearing a table"""
        storage.insert("product_versions", "r1", make_row("r1"))
        storage.clear_table("product_versions")
        assert storage.count("product_versions") == 0


class TestSQLiteStorage:
    """SQLite specific behaviour"""

    def test_rows_survive_reopen(self, sqlite_path):
        """Test data persists across connections"""
        storage = SQLiteStorage(sqlite_path)
        storage.insert("product_versions", "r1", make_row("r1"))
        storage.close()

        reopened = SQLiteStorage(sqlite_path)
        try:
            assert reopened.load("product_versions", "r1") == make_row("r1")
        finally:
            reopened.close()

    def test_table_usable_after_rollback(self):
        """Test a table first touched inside a rolled back block still works"""
        storage = SQLiteStorage(":memory:")

        with pytest.raises(RuntimeError):
            with storage.atomic():
                storage.insert("rule_versions", "r1", make_row("r1"))
                raise RuntimeError("boom")

        storage.insert("rule_versions", "r2", make_row("r2"))
        assert storage.count("rule_versions") == 1
        storage.close()


class TestCreateStorage:
    """Test backend selection by name"""

    def test_memory_backend(self):
        assert isinstance(create_storage("memory"), InMemoryStorage)

    def test_sqlite_backend(self):
        storage = create_storage("sqlite", ":memory:")
        assert isinstance(storage, SQLiteStorage)
        storage.close()

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_storage("postgres")
