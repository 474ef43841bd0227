"""Command line access to HDFS usage stats.

Usage:
    hdfs-stats cluster1@dc1 --path /user --limit 20 --attime 1700000000

Prints one JSON object per record on stdout; logs go to stderr.
"""

import argparse
import sys
import time

from loguru import logger

from hdfs_usage.common.exceptions import HdfsUsageError
from hdfs_usage.config.logger import setup_logging
from hdfs_usage.config.settings import settings
from hdfs_usage.db_kv.store import SqliteKVStore
from hdfs_usage.features.hdfs_stats.schemas import HdfsStatsResponse
from hdfs_usage.features.hdfs_stats.service import StatsQueryService


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="List hourly HDFS usage stats for paths under a prefix on a cluster.",
    )
    parser.add_argument("cluster", help="Cluster identifier, e.g. cluster1@dc1")
    parser.add_argument("--path", default="", help="Path prefix (default: all paths)")
    parser.add_argument("--limit", type=int, default=100, help="Maximum records (default: 100)")
    parser.add_argument(
        "--attime",
        type=int,
        default=None,
        help="Reference time in epoch seconds (default: now)",
    )
    parser.add_argument(
        "--db",
        default=None,
        help="Path to the usage store (default: HDFS_STATS_DB_PATH)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: HDFS_USAGE_LOG_LEVEL)",
    )
    return parser.parse_args(args)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(level=args.log_level, log_format="text")

    db_path = args.db or settings.store.db_path_resolved
    reference_time = args.attime if args.attime is not None else int(time.time())

    try:
        store = SqliteKVStore.open(db_path)
        try:
            service = StatsQueryService(store, default_scan_batch_size=settings.store.default_scan_batch_size)
            records = service.list_by_prefix(args.cluster, args.path, args.limit, reference_time)
        finally:
            store.close()
    except HdfsUsageError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    for record in records:
        print(HdfsStatsResponse.from_record(record).model_dump_json(exclude_none=True))

    return 0


if __name__ == "__main__":
    sys.exit(main())
