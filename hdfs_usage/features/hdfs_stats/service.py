"""Query service for the HDFS usage table.

Translates "top N paths under a prefix on a cluster as of time T" into one
bounded prefix scan and assembles the rows into StatsRecord values.

All operations are synchronous; use run_in_executor() for async contexts.
The service holds no per-call state, so one instance can serve concurrent
callers as long as the store hands out per-thread connections.
"""

import time

from loguru import logger

from hdfs_usage.common.exceptions import InvalidInputError
from hdfs_usage.db_kv.scan import PrefixFilter, Scan, WhileMatchFilter
from hdfs_usage.db_kv.store import KVStore, Scanner
from hdfs_usage.features.hdfs_stats.keys import bucket_of, decode_key, encode_key
from hdfs_usage.features.hdfs_stats.models import STATS_COLUMNS, StatsRecord

DEFAULT_SCAN_BATCH_SIZE = 100


class StatsQueryService:
    """Reads StatsRecord values from an ordered key-value store."""

    def __init__(self, store: KVStore, default_scan_batch_size: int = DEFAULT_SCAN_BATCH_SIZE):
        if default_scan_batch_size <= 0:
            raise InvalidInputError(f"default_scan_batch_size must be positive, got {default_scan_batch_size}")
        self._store = store
        self._default_scan_batch_size = default_scan_batch_size

    @property
    def default_scan_batch_size(self) -> int:
        return self._default_scan_batch_size

    def list_by_prefix(
        self,
        cluster: str,
        path_prefix: str | None,
        limit: int,
        reference_time: int,
    ) -> list[StatsRecord]:
        """Get usage stats for paths under ``path_prefix`` in the hour containing ``reference_time``.

        Args:
            cluster: Cluster identifier
            path_prefix: Path prefix; empty or None matches every path of the cluster
            limit: Maximum records to return (must be positive)
            reference_time: Epoch seconds (UTC) selecting the hourly bucket

        Returns:
            Records in key order (ascending path), at most ``limit`` of them

        Raises:
            InvalidInputError: Bad arguments, raised before any store access
            StoreUnavailableError: Store unreachable or scan failed
            MalformedKeyError: A scanned row key could not be decoded
        """
        if limit <= 0:
            raise InvalidInputError(f"limit must be positive, got {limit}")

        bucket_start = bucket_of(reference_time)
        row_prefix = encode_key(bucket_start, cluster, path_prefix or "")
        logger.debug(f"HDFS stats scan: bucket={bucket_start} row_prefix={row_prefix!r}")

        # A full default batch would over-fetch for small limits
        scan = Scan(
            start_row=row_prefix,
            columns=list(STATS_COLUMNS),
            batch_size=min(limit, self._default_scan_batch_size),
            row_filter=WhileMatchFilter(PrefixFilter(row_prefix)),
        )
        return self._create_from_results(cluster, scan, limit)

    def _create_from_results(self, cluster: str, scan: Scan, limit: int) -> list[StatsRecord]:
        """Consume the scan into records, stopping at ``limit``. Always closes the scanner."""
        records: list[StatsRecord] = []
        started = time.perf_counter()
        scanner: Scanner | None = None
        outcome = "error"

        try:
            scanner = self._store.open_scanner(scan)
            for row in scanner:
                if row.is_empty():
                    continue
                key = decode_key(row.row_key)
                records.append(StatsRecord.from_row(key, row))
                if len(records) >= limit:
                    break
            outcome = "ok"
        finally:
            if scanner is not None:
                _close_scanner(scanner)
                self._log_scan(cluster, scanner, outcome, time.perf_counter() - started)

        return records

    @staticmethod
    def _log_scan(cluster: str, scanner: Scanner, outcome: str, elapsed: float) -> None:
        metrics = scanner.metrics
        logger.info(
            "HDFS stats scan finished",
            extra={
                "cluster": cluster,
                "outcome": outcome,
                "rows": metrics.rows,
                "columns": metrics.columns,
                "bytes": metrics.bytes,
                "megabytes": metrics.bytes // (1024 * 1024),
                "round_trips": metrics.round_trips,
                "elapsed_seconds": round(elapsed, 4),
            },
        )

    def time_series_by_path(self, cluster: str, path: str, limit: int, start_time: int) -> list[StatsRecord]:
        """Stats for one path across several hourly buckets.

        Not implemented: bucket range and pagination policy are undecided.
        """
        raise NotImplementedError("time_series_by_path is not implemented")


def _close_scanner(scanner: Scanner) -> None:
    """Close a scanner without masking the result or error already in flight."""
    try:
        scanner.close()
    except Exception as e:
        logger.warning(
            "Failed to close HDFS stats scanner",
            extra={"error": str(e), "error_type": type(e).__name__},
        )
