import pytest

from hdfs_usage.db_kv.columns import (
    column_value,
    encode_int,
    encode_str,
    value_as_int,
    value_as_str,
)


@pytest.mark.unit
def test_int_cells_are_eight_byte_big_endian():
    assert encode_int(1) == b"\x00\x00\x00\x00\x00\x00\x00\x01"
    assert value_as_int({"fc": encode_int(123456789012)}, "fc") == 123456789012


@pytest.mark.unit
def test_str_cells_are_utf8():
    assert value_as_str({"owner": encode_str("jörg")}, "owner") == "jörg"


@pytest.mark.unit
def test_missing_columns_read_as_zero_values():
    assert value_as_int({}, "fc") == 0
    assert value_as_str({}, "owner") == ""


@pytest.mark.unit
def test_column_value_rejects_unsupported_type():
    with pytest.raises(TypeError):
        column_value({"x": b"\x00"}, "x", float)  # type: ignore[type-var]
