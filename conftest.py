"""Pytest configuration.

IMPORTANT: Environment variables must be set BEFORE importing app code.
Settings are loaded at import time, so the store path points at a temp
directory for the whole session.
"""

import os
import tempfile

if "HDFS_STATS_DB_PATH" not in os.environ:
    _test_base_dir = tempfile.mkdtemp(prefix="hdfs_usage_test_")
    os.environ["HDFS_STATS_DB_PATH"] = f"{_test_base_dir}/hdfs_usage.db"
