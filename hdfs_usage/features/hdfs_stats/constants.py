"""Row key layout and column names of the HDFS usage table."""

SEP = "!"

MAX_LONG = 2**63 - 1
# Inverted timestamps are zero-padded so byte order matches numeric order
INVERTED_TS_WIDTH = len(str(MAX_LONG))

BUCKET_SECONDS = 3600

INFO_FAMILY = "i"

FILE_COUNT_COLUMN = "file_count"
DIR_COUNT_COLUMN = "dir_count"
ACCESS_COUNT_TOTAL_COLUMN = "access_count_total"
ACCESS_COST_COLUMN = "access_cost"
STORAGE_COST_COLUMN = "storage_cost"
SPACE_CONSUMED_COLUMN = "space_consumed"
TMP_FILE_COUNT_COLUMN = "tmp_file_count"
TMP_SPACE_CONSUMED_COLUMN = "tmp_space_consumed"
TRASH_FILE_COUNT_COLUMN = "trash_file_count"
TRASH_SPACE_CONSUMED_COLUMN = "trash_space_consumed"
OWNER_COLUMN = "owner"
QUOTA_COLUMN = "quota"
SPACE_QUOTA_COLUMN = "space_quota"
