"""Ordered key-value store with per-row column families.

Backs the HDFS usage table. Rows are addressed by a byte-string key and
read through forward range scans:

- Scan: start key, column restriction, batch size, row filter
- PrefixFilter / WhileMatchFilter: stop as soon as keys leave a prefix
- Scanner: scoped cursor with rows/cells/bytes metrics

Typed column decoding lives in ``columns``.
"""

from hdfs_usage.db_kv.columns import (
    column_value,
    encode_int,
    encode_str,
    value_as_int,
    value_as_str,
)
from hdfs_usage.db_kv.scan import (
    PrefixFilter,
    Row,
    RowFilter,
    Scan,
    ScanMetrics,
    WhileMatchFilter,
)
from hdfs_usage.db_kv.store import KVStore, Scanner, SqliteKVStore, SqliteScanner

__all__ = [
    # Store
    "KVStore",
    "Scanner",
    "SqliteKVStore",
    "SqliteScanner",
    # Scans
    "Scan",
    "Row",
    "ScanMetrics",
    "RowFilter",
    "PrefixFilter",
    "WhileMatchFilter",
    # Columns
    "column_value",
    "value_as_int",
    "value_as_str",
    "encode_int",
    "encode_str",
]
