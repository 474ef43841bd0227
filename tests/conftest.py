"""Shared fixtures: temporary SQLite stores and a scripted store double."""

import os
import tempfile
from collections.abc import Callable, Iterator

import pytest

from hdfs_usage.db_kv.columns import encode_int, encode_str
from hdfs_usage.db_kv.scan import Row, Scan, ScanMetrics
from hdfs_usage.db_kv.store import SqliteKVStore
from hdfs_usage.features.hdfs_stats.constants import INFO_FAMILY
from hdfs_usage.features.hdfs_stats.keys import encode_key


@pytest.fixture
def temp_store() -> Iterator[SqliteKVStore]:
    """Fresh store in a temporary directory."""
    with tempfile.TemporaryDirectory() as temp_dir:
        store = SqliteKVStore.open(os.path.join(temp_dir, "usage.db"))
        yield store
        store.close_all()


@pytest.fixture
def put_stats(temp_store: SqliteKVStore) -> Callable[..., bytes]:
    """Write one usage row; int kwargs become 8-byte cells, str kwargs UTF-8 cells."""

    def _put(bucket_start: int, cluster: str, path: str, **values: int | str) -> bytes:
        row_key = encode_key(bucket_start, cluster, path)
        cells = {
            name: encode_str(value) if isinstance(value, str) else encode_int(value)
            for name, value in values.items()
        }
        temp_store.put_row(row_key, INFO_FAMILY, cells)
        return row_key

    return _put


class FakeScanner:
    """Scanner double yielding scripted rows, optionally failing mid-iteration."""

    def __init__(
        self,
        rows: list[Row],
        fail_after: int | None = None,
        close_error: Exception | None = None,
    ):
        self.rows = rows
        self.fail_after = fail_after
        self.close_error = close_error
        self.close_calls = 0
        self.rows_pulled = 0
        self.metrics = ScanMetrics()

    def __iter__(self) -> Iterator[Row]:
        for index, row in enumerate(self.rows):
            if self.fail_after is not None and index >= self.fail_after:
                raise RuntimeError("connection reset during scan")
            self.rows_pulled += 1
            self.metrics.record(row)
            yield row

    def close(self) -> None:
        self.close_calls += 1
        if self.close_error is not None:
            raise self.close_error


class FakeStore:
    """Store double that records scans and hands out one FakeScanner."""

    def __init__(self, scanner: FakeScanner | None = None, open_error: Exception | None = None):
        self.scanner = scanner or FakeScanner([])
        self.open_error = open_error
        self.scans: list[Scan] = []

    def open_scanner(self, scan: Scan) -> FakeScanner:
        self.scans.append(scan)
        if self.open_error is not None:
            raise self.open_error
        return self.scanner


@pytest.fixture
def fake_store_factory() -> Callable[..., FakeStore]:
    return FakeStore


@pytest.fixture
def fake_scanner_factory() -> Callable[..., FakeScanner]:
    return FakeScanner
