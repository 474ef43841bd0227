"""HDFS stats response schemas.

Fields whose column was absent in the store are None and dropped from JSON
(serialize with ``exclude_none=True``).
"""

from pydantic import BaseModel, Field

from hdfs_usage.features.hdfs_stats.models import INT_COLUMNS, STR_COLUMNS, StatsRecord


class HdfsStatsResponse(BaseModel):
    """Usage snapshot of one path in one hourly bucket."""

    cluster: str = Field(examples=["cluster1@dc1"])
    bucket_start: int = Field(description="Start of the hourly bucket (epoch seconds, UTC)")
    path: str = Field(examples=["/user/alice"])

    file_count: int | None = None
    dir_count: int | None = None
    tmp_file_count: int | None = None
    trash_file_count: int | None = None
    access_count_total: int | None = None
    space_consumed: int | None = Field(default=None, description="Bytes")
    quota: int | None = None
    space_quota: int | None = Field(default=None, description="Bytes")
    tmp_space_consumed: int | None = Field(default=None, description="Bytes")
    trash_space_consumed: int | None = Field(default=None, description="Bytes")
    owner: str | None = None
    access_cost: int | None = None
    storage_cost: int | None = None
    total_cost: int = Field(description="access_cost + storage_cost")

    @classmethod
    def from_record(cls, record: StatsRecord) -> "HdfsStatsResponse":
        fields = {
            name: getattr(record, name) if name in record.present_fields else None
            for name in (*INT_COLUMNS, *STR_COLUMNS)
        }
        return cls(
            cluster=record.key.cluster,
            bucket_start=record.key.bucket_start,
            path=record.key.path,
            total_cost=record.total_cost,
            **fields,
        )
