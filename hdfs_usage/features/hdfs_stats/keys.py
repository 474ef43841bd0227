"""Row key codec for the HDFS usage table.

Key layout: ``{MAX_LONG - bucket_start:019d}!{cluster}!{path}`` as UTF-8.

Storing the inverted bucket start makes the newest hour sort first, so the
latest snapshot is reachable with a forward scan. Cluster may not contain the
separator; path may, since decoding only splits on the first two separators.
"""

from dataclasses import dataclass

from hdfs_usage.common.exceptions import InvalidInputError, MalformedKeyError
from hdfs_usage.features.hdfs_stats.constants import (
    BUCKET_SECONDS,
    INVERTED_TS_WIDTH,
    MAX_LONG,
    SEP,
)


def bucket_of(instant_seconds: int) -> int:
    """Start of the UTC hour containing ``instant_seconds``."""
    instant_seconds = int(instant_seconds)
    return instant_seconds - (instant_seconds % BUCKET_SECONDS)


def invert_timestamp(bucket_start: int) -> int:
    return MAX_LONG - bucket_start


@dataclass(frozen=True)
class StatsKey:
    """Identity of one usage snapshot: (bucket start, cluster, path)."""

    bucket_start: int
    cluster: str
    path: str = ""

    @property
    def inverted_timestamp(self) -> int:
        return invert_timestamp(self.bucket_start)

    def to_bytes(self) -> bytes:
        return encode_key(self.bucket_start, self.cluster, self.path)

    @classmethod
    def from_bytes(cls, data: bytes) -> "StatsKey":
        return decode_key(data)


def encode_key(bucket_start: int, cluster: str, path: str = "") -> bytes:
    """Encode a row key (or, with a partial path, a scan prefix).

    Raises:
        InvalidInputError: If cluster is empty or contains the separator,
            bucket_start is outside [0, MAX_LONG], or the text is not
            encodable as UTF-8 (lone surrogates)
    """
    if not cluster:
        raise InvalidInputError("cluster must be non-empty")
    if SEP in cluster:
        raise InvalidInputError(f"cluster must not contain {SEP!r}: {cluster!r}")
    if not 0 <= bucket_start <= MAX_LONG:
        raise InvalidInputError(f"bucket start out of range: {bucket_start}")

    inverted = invert_timestamp(bucket_start)
    text = f"{inverted:0{INVERTED_TS_WIDTH}d}{SEP}{cluster}{SEP}{path or ''}"
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise InvalidInputError(f"cluster and path must be encodable as UTF-8: {e}") from e


def decode_key(data: bytes) -> StatsKey:
    """Decode a stored row key.

    Raises:
        MalformedKeyError: If the key has fewer than three segments, is not
            UTF-8, or the timestamp segment is not a valid integer
    """
    try:
        text = bytes(data).decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedKeyError(f"Row key is not valid UTF-8: {data!r}", row_key=data) from e

    parts = text.split(SEP, 2)
    if len(parts) < 3:
        raise MalformedKeyError(f"Row key has {len(parts)} segment(s), expected 3: {data!r}", row_key=data)

    ts_part, cluster, path = parts
    if not (ts_part.isascii() and ts_part.isdigit()):
        raise MalformedKeyError(f"Row key timestamp is not an integer: {data!r}", row_key=data)

    inverted = int(ts_part)
    if inverted > MAX_LONG:
        raise MalformedKeyError(f"Row key timestamp out of range: {data!r}", row_key=data)

    return StatsKey(bucket_start=invert_timestamp(inverted), cluster=cluster, path=path)
