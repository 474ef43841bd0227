"""HDFS usage statistics service."""
