"""Typed column value helpers.

Numeric cells hold 8-byte big-endian signed integers; string cells hold
UTF-8. A missing column yields the type's zero value.
"""

from collections.abc import Mapping
from typing import TypeVar

T = TypeVar("T", int, str)

INT_WIDTH = 8


def encode_int(value: int) -> bytes:
    return value.to_bytes(INT_WIDTH, "big", signed=True)


def encode_str(value: str) -> bytes:
    return value.encode("utf-8")


def decode_int(raw: bytes) -> int:
    return int.from_bytes(raw, "big", signed=True)


def decode_str(raw: bytes) -> str:
    return raw.decode("utf-8")


def column_value(family_map: Mapping[str, bytes], qualifier: str, expected_type: type[T]) -> T:
    """Read ``qualifier`` from a column-family map as ``expected_type``.

    Args:
        family_map: qualifier -> raw bytes for one column family of a row
        qualifier: Column name
        expected_type: ``int`` or ``str``

    Returns:
        Decoded value, or ``expected_type()`` (0 / "") if the column is absent
    """
    raw = family_map.get(qualifier)
    if raw is None:
        return expected_type()
    if expected_type is int:
        return decode_int(raw)  # type: ignore[return-value]
    if expected_type is str:
        return decode_str(raw)  # type: ignore[return-value]
    raise TypeError(f"Unsupported column type: {expected_type!r}")


def value_as_int(family_map: Mapping[str, bytes], qualifier: str) -> int:
    return column_value(family_map, qualifier, int)


def value_as_str(family_map: Mapping[str, bytes], qualifier: str) -> str:
    return column_value(family_map, qualifier, str)
