"""
Storage Backend Module

Provides the abstract insert-only storage interface and implementations for
in-memory (testing) and SQLite (persistence). Rows are written once and never
updated or removed individually; all monetary values are stored as Decimal strings.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Any, Union
from datetime import datetime, timezone
import sqlite3
import json
import threading
from pathlib import Path
from contextlib import contextmanager

from .errors import IntegrityError


class StorageInterface(ABC):
    """Abstract interface for insert-only storage backends"""

    @abstractmethod
    def insert(self, table: str, record_id: str, data: Dict[str, Any]) -> None:
        """Insert a new row. Raises IntegrityError if record_id is taken."""
        pass

    @abstractmethod
    def load(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        """Load a row by its surrogate id"""
        pass

    @abstractmethod
    def load_all(self, table: str) -> List[Dict[str, Any]]:
        """Load all rows from a table in insertion order"""
        pass

    @abstractmethod
    def find(self, table: str, filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Find rows matching equality filters, in insertion order"""
        pass

    @abstractmethod
    def count(self, table: str) -> int:
        """Count rows in table"""
        pass

    @abstractmethod
    def clear_table(self, table: str) -> None:
        """Clear all rows from a table (test support only)"""
        pass

    @abstractmethod
    def close(self) -> None:
        """Close storage connection"""
        pass

    def begin_transaction(self) -> None:
        """Start a database transaction (default no-op)"""
        pass

    def commit(self) -> None:
        """Commit current transaction (default no-op)"""
        pass

    def rollback(self) -> None:
        """Rollback current transaction (default no-op)"""
        pass

    @contextmanager
    def atomic(self):
        """Context manager for atomic operations"""
        self.begin_transaction()
        try:
            yield
            self.commit()
        except Exception:
            self.rollback()
            raise


class InMemoryStorage(StorageInterface):
    """In-memory storage implementation for testing"""

    def __init__(self):
        self._data: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._lock = threading.RLock()
        self._pending: Optional[List[tuple]] = None
        self._depth = 0

    def _ensure_table(self, table: str) -> None:
        if table not in self._data:
            self._data[table] = {}

    def insert(self, table: str, record_id: str, data: Dict[str, Any]) -> None:
        """Insert a row into memory"""
        with self._lock:
            self._ensure_table(table)
            if record_id in self._data[table]:
                raise IntegrityError(f"Record {record_id} already exists in {table}")
            # Deep copy to prevent external mutation
            self._data[table][record_id] = json.loads(json.dumps(data, default=str))
            if self._pending is not None:
                self._pending.append((table, record_id))

    def load(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            self._ensure_table(table)
            record = self._data[table].get(record_id)
            if record:
                return json.loads(json.dumps(record))
            return None

    def load_all(self, table: str) -> List[Dict[str, Any]]:
        with self._lock:
            self._ensure_table(table)
            return [json.loads(json.dumps(record)) for record in self._data[table].values()]

    def find(self, table: str, filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        with self._lock:
            self._ensure_table(table)
            results = []
            for record in self._data[table].values():
                match = True
                for key, value in filters.items():
                    if key not in record or record[key] != value:
                        match = False
                        break
                if match:
                    results.append(json.loads(json.dumps(record)))
            return results

    def count(self, table: str) -> int:
        with self._lock:
            self._ensure_table(table)
            return len(self._data[table])

    def clear_table(self, table: str) -> None:
        with self._lock:
            self._data[table] = {}

    def begin_transaction(self) -> None:
        """Start tracking inserted rows so they can be rolled back"""
        self._lock.acquire()
        self._depth += 1
        if self._pending is None:
            self._pending = []

    def commit(self) -> None:
        try:
            self._depth -= 1
            if self._depth == 0:
                self._pending = None
        finally:
            self._lock.release()

    def rollback(self) -> None:
        try:
            self._depth -= 1
            if self._depth == 0:
                for table, record_id in reversed(self._pending or []):
                    self._data[table].pop(record_id, None)
                self._pending = None
        finally:
            self._lock.release()

    def close(self) -> None:
        """Close storage (no-op for in-memory)"""
        pass


class SQLiteStorage(StorageInterface):
    """SQLite storage implementation for persistence"""

    def __init__(self, db_path: Union[str, Path] = ":memory:"):
        self.db_path = str(db_path)
        # Set isolation_level to 'DEFERRED' to enable manual transaction control
        self._connection = sqlite3.connect(self.db_path, check_same_thread=False, isolation_level='DEFERRED')
        self._connection.row_factory = sqlite3.Row
        self._lock = threading.RLock()
        self._in_transaction = False
        self._depth = 0
        self._tables: set = set()

        # Enable WAL mode for better concurrent access
        if self.db_path != ":memory:":
            with self._lock:
                self._connection.execute("PRAGMA journal_mode = WAL")
                self._connection.execute("PRAGMA synchronous = NORMAL")
                self._connection.commit()

    def _ensure_table(self, table: str) -> None:
        """Ensure table exists with the insert-only schema"""
        if table in self._tables:
            return
        with self._lock:
            # seq preserves insertion order independently of clock resolution
            self._connection.execute(f"""
                CREATE TABLE IF NOT EXISTS {table} (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    id TEXT NOT NULL UNIQUE,
                    business_key TEXT,
                    parent_key TEXT,
                    data TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)
            self._connection.execute(f"""
                CREATE INDEX IF NOT EXISTS idx_{table}_business_key
                ON {table}(business_key, created_at)
            """)
            self._connection.execute(f"""
                CREATE INDEX IF NOT EXISTS idx_{table}_parent_key
                ON {table}(parent_key)
            """)
            if not self._in_transaction:
                self._connection.commit()
            self._tables.add(table)

    def insert(self, table: str, record_id: str, data: Dict[str, Any]) -> None:
        """Insert a row into SQLite"""
        with self._lock:
            self._ensure_table(table)

            created_at = data.get('created_at') or datetime.now(timezone.utc).isoformat()
            data_json = json.dumps(data, default=str)

            try:
                self._connection.execute(f"""
                    INSERT INTO {table} (id, business_key, parent_key, data, created_at)
                    VALUES (?, ?, ?, ?, ?)
                """, (record_id, data.get('business_key'), data.get('parent_key'),
                      data_json, str(created_at)))
            except sqlite3.IntegrityError as e:
                raise IntegrityError(f"Record {record_id} already exists in {table}") from e

            # Only commit if not in transaction
            if not self._in_transaction:
                self._connection.commit()

    def load(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            self._ensure_table(table)
            cursor = self._connection.execute(f"""
                SELECT data FROM {table} WHERE id = ?
            """, (record_id,))
            row = cursor.fetchone()
            if row:
                return json.loads(row['data'])
            return None

    def load_all(self, table: str) -> List[Dict[str, Any]]:
        with self._lock:
            self._ensure_table(table)
            cursor = self._connection.execute(f"""
                SELECT data FROM {table} ORDER BY seq
            """)
            return [json.loads(row['data']) for row in cursor.fetchall()]

    def find(self, table: str, filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Find rows matching filters (indexed columns go to SQL, the rest are JSON-matched)"""
        with self._lock:
            self._ensure_table(table)

            conditions = []
            params = []
            remaining = {}
            for key, value in filters.items():
                if key in ('business_key', 'parent_key'):
                    conditions.append(f"{key} = ?")
                    params.append(value)
                else:
                    remaining[key] = value

            where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""
            cursor = self._connection.execute(f"""
                SELECT data FROM {table} {where_clause} ORDER BY seq
            """, params)

            results = []
            for row in cursor.fetchall():
                record = json.loads(row['data'])
                match = True
                for key, value in remaining.items():
                    if key not in record or record[key] != value:
                        match = False
                        break
                if match:
                    results.append(record)

            return results

    def count(self, table: str) -> int:
        with self._lock:
            self._ensure_table(table)
            cursor = self._connection.execute(f"""
                SELECT COUNT(*) as count FROM {table}
            """)
            return cursor.fetchone()['count']

    def clear_table(self, table: str) -> None:
        with self._lock:
            self._ensure_table(table)
            self._connection.execute(f"DELETE FROM {table}")

            if not self._in_transaction:
                self._connection.commit()

    def begin_transaction(self) -> None:
        """Start a database transaction"""
        self._lock.acquire()
        self._depth += 1
        if not self._in_transaction:
            # SQLite with isolation_level='DEFERRED' automatically starts transactions
            # We just need to track the state
            self._in_transaction = True

    def commit(self) -> None:
        try:
            self._depth -= 1
            if self._in_transaction and self._depth == 0:
                self._connection.commit()
                self._in_transaction = False
        finally:
            self._lock.release()

    def rollback(self) -> None:
        try:
            self._depth -= 1
            if self._in_transaction and self._depth == 0:
                self._connection.rollback()
                self._in_transaction = False
                # Tables created inside the transaction are gone too
                self._tables.clear()
        finally:
            self._lock.release()

    def close(self) -> None:
        with self._lock:
            if self._connection:
                self._connection.close()
                self._connection = None


def create_storage(backend: str = "sqlite", database_path: Union[str, Path] = ":memory:") -> StorageInterface:
    """Create a storage backend by name"""
    if backend == "memory":
        return InMemoryStorage()
    if backend == "sqlite":
        return SQLiteStorage(database_path)
    raise ValueError(f"Unknown storage backend: {backend}")
