import pytest

from hdfs_usage.common.exceptions import InvalidInputError, MalformedKeyError
from hdfs_usage.features.hdfs_stats.constants import MAX_LONG
from hdfs_usage.features.hdfs_stats.keys import StatsKey, bucket_of, decode_key, encode_key


@pytest.mark.unit
@pytest.mark.parametrize(
    "bucket_start, cluster, path",
    [
        (0, "c1", ""),
        (3600, "c1", "/data"),
        (1700000000 - 1700000000 % 3600, "cluster1@dc1", "/user/alice/logs"),
        (1700003600, "c1", "/path/with!bang!inside"),
        (1700003600, "c1", "/unicode/dätä"),
        (MAX_LONG, "c1", "/max"),
    ],
)
def test_encode_decode_round_trip(bucket_start, cluster, path):
    key = decode_key(encode_key(bucket_start, cluster, path))

    assert key == StatsKey(bucket_start, cluster, path)


@pytest.mark.unit
def test_stats_key_bytes_helpers():
    key = StatsKey(bucket_start=7200, cluster="c1", path="/a")

    assert StatsKey.from_bytes(key.to_bytes()) == key
    assert key.inverted_timestamp == MAX_LONG - 7200


@pytest.mark.unit
def test_newer_bucket_sorts_first():
    earlier = encode_key(3600, "c1", "/data")
    later = encode_key(7200, "c1", "/data")

    assert later < earlier


@pytest.mark.unit
def test_inverted_timestamp_is_fixed_width():
    # Byte order must equal numeric order across magnitudes
    small = encode_key(MAX_LONG, "c1", "")
    large = encode_key(0, "c1", "")

    assert len(small.split(b"!")[0]) == len(large.split(b"!")[0]) == 19
    assert small < large


@pytest.mark.unit
def test_same_bucket_orders_by_cluster_then_path():
    keys = [
        encode_key(3600, "c2", "/a"),
        encode_key(3600, "c1", "/b"),
        encode_key(3600, "c1", "/a"),
    ]

    assert sorted(keys) == [keys[2], keys[1], keys[0]]


@pytest.mark.unit
@pytest.mark.parametrize("instant", [0, 1, 3599, 3600, 3661, 1700000123, 1700003599])
def test_bucket_of_truncates_to_hour(instant):
    bucket = bucket_of(instant)

    assert 0 <= instant - bucket < 3600
    assert bucket % 3600 == 0
    assert bucket_of(bucket) == bucket


@pytest.mark.unit
def test_bucket_of_scenario_value():
    assert bucket_of(3661) == 3600


@pytest.mark.unit
@pytest.mark.parametrize("cluster", ["", "c!1"])
def test_encode_rejects_bad_cluster(cluster):
    with pytest.raises(InvalidInputError):
        encode_key(3600, cluster, "/data")


@pytest.mark.unit
def test_encode_rejects_negative_bucket():
    with pytest.raises(InvalidInputError):
        encode_key(-3600, "c1", "/data")


@pytest.mark.unit
@pytest.mark.parametrize("cluster, path", [("c1", "/\udc80"), ("c\ud800", "/data")])
def test_encode_rejects_text_not_encodable_as_utf8(cluster, path):
    with pytest.raises(InvalidInputError) as exc_info:
        encode_key(3600, cluster, path)

    assert isinstance(exc_info.value.__cause__, UnicodeEncodeError)


@pytest.mark.unit
@pytest.mark.parametrize(
    "data",
    [
        b"",
        b"9223372036854775807",
        b"9223372036854775807!c1",
        b"notanumber!c1!/data",
        b"-12!c1!/data",
        b"99999999999999999999!c1!/data",
        b"\xff\xfe!c1!/data",
    ],
)
def test_decode_rejects_malformed_keys(data):
    with pytest.raises(MalformedKeyError) as exc_info:
        decode_key(data)

    assert exc_info.value.row_key == data


@pytest.mark.unit
def test_empty_path_prefix_does_not_match_longer_cluster_name():
    prefix = encode_key(3600, "c1", "")

    assert encode_key(3600, "c1", "/data").startswith(prefix)
    assert not encode_key(3600, "c10", "/data").startswith(prefix)
