"""Error taxonomy for the HDFS usage query path.

- InvalidInputError: bad caller arguments, raised before any store I/O
- MalformedKeyError: a stored row key cannot be decoded (data corruption)
- StoreUnavailableError: the backing store cannot be reached or scanned
"""


class HdfsUsageError(Exception):
    """Base class for all HDFS usage errors."""


class InvalidInputError(HdfsUsageError, ValueError):
    """Caller supplied an invalid cluster, path, limit or timestamp."""


class MalformedKeyError(HdfsUsageError):
    """A row key read from the store does not decode to (timestamp, cluster, path)."""

    def __init__(self, message: str, row_key: bytes | None = None):
        super().__init__(message)
        self.row_key = row_key


class StoreUnavailableError(HdfsUsageError):
    """The backing key-value store could not be opened or scanned."""
