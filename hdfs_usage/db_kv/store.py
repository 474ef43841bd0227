"""SQLite-backed ordered key-value store.

Thread-safe connection management with WAL mode for concurrent readers.

Key features:
- Thread-local connections, so concurrent scans never share a cursor
- Byte-ordered range scans over a BLOB primary key
- Column restriction, prefix / while-match filters and batched round trips
- Scan metrics (rows, cells, bytes, round trips) on every scanner
"""

import sqlite3
import threading
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Protocol

from loguru import logger

from hdfs_usage.common.exceptions import StoreUnavailableError
from hdfs_usage.db_kv.scan import Row, Scan, ScanMetrics


class Scanner(Protocol):
    """An open scan cursor. Must be closed by whoever opened it."""

    metrics: ScanMetrics

    def __iter__(self) -> Iterator[Row]: ...

    def close(self) -> None: ...


class KVStore(Protocol):
    """Read side of the ordered key-value store."""

    def open_scanner(self, scan: Scan) -> Scanner: ...


class SqliteKVStore:
    """Ordered key-value table stored in a single SQLite file."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._local = threading.local()
        self._connections: list[sqlite3.Connection] = []
        self._connections_lock = threading.Lock()
        self._generation = 0

    @classmethod
    def open(cls, db_path: str) -> "SqliteKVStore":
        """Open a store, creating the file and the cells table if missing.

        Raises:
            StoreUnavailableError: If the database cannot be created or opened
        """
        store = cls(db_path)
        store.bootstrap()
        return store

    def bootstrap(self) -> None:
        """Create the cells table if it doesn't exist."""
        try:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            conn = self.get_connection()
            conn.executescript(self._schema_sql())
            conn.commit()
        except (OSError, sqlite3.Error) as e:
            raise StoreUnavailableError(f"Could not initialize store at {self.db_path}: {e}") from e
        logger.info(f"HDFS usage store initialized: {self.db_path}")

    @staticmethod
    def _schema_sql() -> str:
        schema_path = Path(__file__).parent / "schema.sql"
        return schema_path.read_text()

    @staticmethod
    def _create_connection(db_path: str) -> sqlite3.Connection:
        """Create a new SQLite connection with proper settings."""
        conn = sqlite3.connect(db_path, check_same_thread=False)

        conn.execute("PRAGMA journal_mode=WAL")  # Write-Ahead Logging
        conn.execute("PRAGMA synchronous=NORMAL")  # Safe with WAL
        conn.execute("PRAGMA busy_timeout=5000")  # Wait up to 5s on SQLITE_BUSY
        conn.execute("PRAGMA cache_size=-10000")  # 10 MB page cache

        return conn

    def get_connection(self) -> sqlite3.Connection:
        """Get a thread-local database connection.

        Raises:
            StoreUnavailableError: If the connection cannot be opened
        """
        conn = getattr(self._local, "connection", None)
        if conn is None or getattr(self._local, "generation", None) != self._generation:
            try:
                conn = self._create_connection(self.db_path)
            except sqlite3.Error as e:
                raise StoreUnavailableError(f"Could not connect to store {self.db_path}: {e}") from e
            self._local.connection = conn
            self._local.generation = self._generation
            with self._connections_lock:
                self._connections.append(conn)
        return conn

    def close(self) -> None:
        """Close the connection for the current thread."""
        conn = getattr(self._local, "connection", None)
        if conn is not None:
            with self._connections_lock:
                if conn in self._connections:
                    self._connections.remove(conn)
            self._close_connection(conn)
            self._local.connection = None

    def close_all(self) -> None:
        """Close the connections of every thread that used this store.

        Call on shutdown, once no more queries are in flight. A thread that
        uses the store afterwards gets a fresh connection.
        """
        with self._connections_lock:
            connections, self._connections = self._connections, []
            self._generation += 1
        for conn in connections:
            self._close_connection(conn)
        self._local.connection = None
        logger.info(f"Closed {len(connections)} usage store connection(s)")

    @staticmethod
    def _close_connection(conn: sqlite3.Connection) -> None:
        try:
            conn.close()
        except sqlite3.Error as e:
            logger.warning(f"Closing store connection failed: {e}")

    def checkpoint_wal(self) -> None:
        """Force a WAL checkpoint to write changes to the main database file."""
        try:
            self.get_connection().execute("PRAGMA wal_checkpoint(TRUNCATE)")
            logger.info("Usage store WAL checkpoint complete")
        except (sqlite3.Error, StoreUnavailableError) as e:
            logger.warning(f"WAL checkpoint failed: {e}")

    def put_row(self, row_key: bytes, family: str, values: Mapping[str, bytes]) -> None:
        """Write (or overwrite) cells of one row in one column family.

        Used for table bootstrap and fixtures; the query path never writes.
        """
        conn = self.get_connection()
        try:
            conn.executemany(
                "INSERT OR REPLACE INTO cells (row_key, family, qualifier, value) VALUES (?, ?, ?, ?)",
                [(row_key, family, qualifier, value) for qualifier, value in values.items()],
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Write to store {self.db_path} failed: {e}") from e

    def open_scanner(self, scan: Scan) -> "SqliteScanner":
        """Open a scan cursor. Use as a context manager or close() explicitly.

        Raises:
            StoreUnavailableError: If the store cannot be reached
        """
        conn = self.get_connection()
        try:
            cursor = conn.cursor()
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Could not open scanner on {self.db_path}: {e}") from e
        return SqliteScanner(cursor, scan)


class SqliteScanner:
    """Iterates rows of a Scan, one batch of row keys per round trip."""

    def __init__(self, cursor: sqlite3.Cursor, scan: Scan):
        self._cursor = cursor
        self._scan = scan
        self._closed = False
        self.metrics = ScanMetrics()

    def __enter__(self) -> "SqliteScanner":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._cursor.close()

    def __iter__(self) -> Iterator[Row]:
        scan = self._scan
        row_filter = scan.row_filter
        stop_row = row_filter.stop_row() if row_filter is not None else None
        last_key: bytes | None = None

        while not self._closed:
            batch = self._fetch_batch(last_key, stop_row)
            self.metrics.round_trips += 1
            if not batch:
                return

            for row in batch:
                if self._closed:
                    return
                last_key = row.row_key
                if row_filter is not None and not row_filter.include_row(row.row_key):
                    if row_filter.filter_all_remaining():
                        return
                    continue
                self.metrics.record(row)
                yield row

            if len(batch) < scan.batch_size:
                return

    def _column_clause(self) -> tuple[str, list]:
        if not self._scan.columns:
            return "", []
        clause = " OR ".join("(family = ? AND qualifier = ?)" for _ in self._scan.columns)
        params = [part for column in self._scan.columns for part in column]
        return f" AND ({clause})", params

    def _fetch_batch(self, after_key: bytes | None, stop_row: bytes | None) -> list[Row]:
        """Fetch the next ``batch_size`` rows that hold at least one requested column."""
        column_sql, column_params = self._column_clause()

        if after_key is None:
            where, params = "row_key >= ?", [self._scan.start_row]
        else:
            where, params = "row_key > ?", [after_key]
        if stop_row is not None:
            where += " AND row_key < ?"
            params.append(stop_row)

        try:
            self._cursor.execute(
                f"SELECT DISTINCT row_key FROM cells WHERE {where}{column_sql} "
                "ORDER BY row_key LIMIT ?",
                [*params, *column_params, self._scan.batch_size],
            )
            keys = [key for (key,) in self._cursor.fetchall()]
            if not keys:
                return []

            placeholders = ", ".join("?" for _ in keys)
            self._cursor.execute(
                f"SELECT row_key, family, qualifier, value FROM cells "
                f"WHERE row_key IN ({placeholders}){column_sql} "
                "ORDER BY row_key, family, qualifier",
                [*keys, *column_params],
            )
            cells = self._cursor.fetchall()
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Scan failed: {e}") from e

        rows: dict[bytes, dict[str, dict[str, bytes]]] = {key: {} for key in keys}
        for row_key, family, qualifier, value in cells:
            rows[bytes(row_key)].setdefault(family, {})[qualifier] = bytes(value)

        return [Row(row_key=bytes(key), families=families) for key, families in rows.items()]
