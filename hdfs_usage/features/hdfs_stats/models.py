"""Usage statistics for one path in one hourly bucket."""

from dataclasses import dataclass, field

from hdfs_usage.db_kv.columns import value_as_int, value_as_str
from hdfs_usage.db_kv.scan import Row
from hdfs_usage.features.hdfs_stats.constants import (
    ACCESS_COST_COLUMN,
    ACCESS_COUNT_TOTAL_COLUMN,
    DIR_COUNT_COLUMN,
    FILE_COUNT_COLUMN,
    INFO_FAMILY,
    OWNER_COLUMN,
    QUOTA_COLUMN,
    SPACE_CONSUMED_COLUMN,
    SPACE_QUOTA_COLUMN,
    STORAGE_COST_COLUMN,
    TMP_FILE_COUNT_COLUMN,
    TMP_SPACE_CONSUMED_COLUMN,
    TRASH_FILE_COUNT_COLUMN,
    TRASH_SPACE_CONSUMED_COLUMN,
)
from hdfs_usage.features.hdfs_stats.keys import StatsKey

# record field -> column qualifier in the info family
INT_COLUMNS: dict[str, str] = {
    "file_count": FILE_COUNT_COLUMN,
    "dir_count": DIR_COUNT_COLUMN,
    "tmp_file_count": TMP_FILE_COUNT_COLUMN,
    "trash_file_count": TRASH_FILE_COUNT_COLUMN,
    "access_count_total": ACCESS_COUNT_TOTAL_COLUMN,
    "space_consumed": SPACE_CONSUMED_COLUMN,
    "quota": QUOTA_COLUMN,
    "space_quota": SPACE_QUOTA_COLUMN,
    "tmp_space_consumed": TMP_SPACE_CONSUMED_COLUMN,
    "trash_space_consumed": TRASH_SPACE_CONSUMED_COLUMN,
    "access_cost": ACCESS_COST_COLUMN,
    "storage_cost": STORAGE_COST_COLUMN,
}
STR_COLUMNS: dict[str, str] = {
    "owner": OWNER_COLUMN,
}

# Columns a scan must fetch to build a StatsRecord
STATS_COLUMNS: list[tuple[str, str]] = [
    (INFO_FAMILY, qualifier) for qualifier in (*INT_COLUMNS.values(), *STR_COLUMNS.values())
]


@dataclass(frozen=True)
class StatsRecord:
    """Usage snapshot of one path. Missing columns read as 0 / ""."""

    key: StatsKey
    file_count: int = 0
    dir_count: int = 0
    tmp_file_count: int = 0
    trash_file_count: int = 0
    access_count_total: int = 0
    space_consumed: int = 0
    quota: int = 0
    space_quota: int = 0
    tmp_space_consumed: int = 0
    trash_space_consumed: int = 0
    access_cost: int = 0
    storage_cost: int = 0
    owner: str = ""
    # record fields whose column was present in the stored row
    present_fields: frozenset[str] = field(default=frozenset(), compare=False, repr=False)

    @property
    def total_cost(self) -> int:
        return self.access_cost + self.storage_cost

    @classmethod
    def from_row(cls, key: StatsKey, row: Row) -> "StatsRecord":
        """Build a record from the info family of a scanned row."""
        info = row.family(INFO_FAMILY)

        values: dict[str, int | str] = {
            name: value_as_int(info, qualifier) for name, qualifier in INT_COLUMNS.items()
        }
        values.update({name: value_as_str(info, qualifier) for name, qualifier in STR_COLUMNS.items()})

        present = frozenset(
            name
            for name, qualifier in (*INT_COLUMNS.items(), *STR_COLUMNS.items())
            if qualifier in info
        )
        return cls(key=key, present_fields=present, **values)  # type: ignore[arg-type]
