"""Scan requests, row filters and scan results for the ordered key-value store.

A scan starts at ``start_row`` and walks keys in ascending byte order,
fetching ``batch_size`` rows per round trip. Filters decide per row key
whether a row is returned and whether the scan can stop early.
"""

from dataclasses import dataclass, field


class RowFilter:
    """Base row filter: accepts every row and never ends the scan."""

    def include_row(self, row_key: bytes) -> bool:
        return True

    def filter_all_remaining(self) -> bool:
        """True once no further rows can match."""
        return False

    def stop_row(self) -> bytes | None:
        """Exclusive upper bound the store may use to bound its range read."""
        return None


class PrefixFilter(RowFilter):
    """Accept rows whose key starts with ``prefix``."""

    def __init__(self, prefix: bytes):
        self.prefix = prefix

    def include_row(self, row_key: bytes) -> bool:
        return row_key.startswith(self.prefix)

    def stop_row(self) -> bytes | None:
        return prefix_successor(self.prefix)


class WhileMatchFilter(RowFilter):
    """Wrap a filter and terminate the scan on the first row it rejects."""

    def __init__(self, inner: RowFilter):
        self.inner = inner
        self._done = False

    def include_row(self, row_key: bytes) -> bool:
        if self._done:
            return False
        if not self.inner.include_row(row_key):
            self._done = True
            return False
        return True

    def filter_all_remaining(self) -> bool:
        return self._done or self.inner.filter_all_remaining()

    def stop_row(self) -> bytes | None:
        return self.inner.stop_row()


def prefix_successor(prefix: bytes) -> bytes | None:
    """Smallest key greater than every key starting with ``prefix``.

    Returns None when no such key exists (empty or all-0xff prefix).
    """
    trimmed = prefix.rstrip(b"\xff")
    if not trimmed:
        return None
    return trimmed[:-1] + bytes([trimmed[-1] + 1])


@dataclass
class Scan:
    """A bounded range read request."""

    start_row: bytes = b""
    # (family, qualifier) pairs; empty means every column
    columns: list[tuple[str, str]] = field(default_factory=list)
    batch_size: int = 100
    row_filter: RowFilter | None = None

    def add_column(self, family: str, qualifier: str) -> "Scan":
        self.columns.append((family, qualifier))
        return self


@dataclass(frozen=True)
class Row:
    """One row returned by a scan: ``families[family][qualifier] -> raw bytes``."""

    row_key: bytes
    families: dict[str, dict[str, bytes]] = field(default_factory=dict)

    def family(self, name: str) -> dict[str, bytes]:
        return self.families.get(name, {})

    def is_empty(self) -> bool:
        return not any(self.families.values())

    @property
    def size(self) -> int:
        """Number of cells in the row."""
        return sum(len(cells) for cells in self.families.values())

    @property
    def byte_size(self) -> int:
        """Approximate bytes transferred for the row (key, qualifiers, values)."""
        total = 0
        for family, cells in self.families.items():
            for qualifier, value in cells.items():
                total += len(self.row_key) + len(family) + len(qualifier) + len(value)
        return total


@dataclass
class ScanMetrics:
    """Counters accumulated while a scanner is consumed."""

    rows: int = 0
    columns: int = 0
    bytes: int = 0
    round_trips: int = 0

    def record(self, row: Row) -> None:
        self.rows += 1
        self.columns += row.size
        self.bytes += row.byte_size
