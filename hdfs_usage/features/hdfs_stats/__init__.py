"""HDFS usage stats feature.

Reads hourly per-path usage snapshots from the usage table. Row keys put the
inverted bucket start first, so the newest snapshot of a cluster/path prefix
is found with a forward scan from the smallest key.
"""
