"""
Minimal protobuf wire framing.

Key envelopes are tiny two-field messages, so they are framed by hand rather
than through generated code. Only the pieces needed here are implemented:

- Unsigned LEB128 varints (at most 10 bytes, i.e. 64-bit values)
- Field keys: (field_number << 3) | wire_type
- Varint and length-delimited fields
- Skipping of fixed-width fields so unknown fields can be ignored

Encoding is deterministic: fields are emitted in the order given and every
varint uses the fewest bytes possible.

References:
    - https://protobuf.dev/programming-guides/encoding/
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import IntEnum
from typing import Final

_MAX_VARINT_BYTES: Final = 10
"""A 64-bit value needs at most ten 7-bit groups."""


class ProtobufError(Exception):
    """Raised when protobuf bytes cannot be framed or parsed."""


class VarintError(ProtobufError):
    """Raised when varint encoding or decoding fails."""


class WireType(IntEnum):
    """Protobuf wire types (low three bits of a field key)."""

    VARINT = 0
    I64 = 1
    LEN = 2
    I32 = 5


def encode_varint(value: int) -> bytes:
    """
    Encode a non-negative integer as an unsigned LEB128 varint.

    Raises:
        ValueError: If value is negative.
    """
    if value < 0:
        raise ValueError("Varint must be non-negative")

    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def decode_varint(data: bytes, offset: int = 0) -> tuple[int, int]:
    """
    Decode a varint starting at `offset`.

    Returns:
        Tuple of (value, bytes_consumed).

    Raises:
        VarintError: If the input is truncated or longer than 10 bytes.
    """
    value = 0
    for index in range(_MAX_VARINT_BYTES):
        pos = offset + index
        if pos >= len(data):
            raise VarintError("Truncated varint")

        byte = data[pos]
        value |= (byte & 0x7F) << (7 * index)
        if not byte & 0x80:
            return value, index + 1

    raise VarintError("Varint too long")


def encode_key(field_number: int, wire_type: WireType) -> bytes:
    """Encode a field key."""
    return encode_varint((field_number << 3) | wire_type)


def encode_varint_field(field_number: int, value: int) -> bytes:
    """Encode a varint-typed field (int, enum, bool)."""
    return encode_key(field_number, WireType.VARINT) + encode_varint(value)


def encode_bytes_field(field_number: int, data: bytes) -> bytes:
    """Encode a length-delimited field."""
    return encode_key(field_number, WireType.LEN) + encode_varint(len(data)) + data


def iter_fields(data: bytes) -> Iterator[tuple[int, WireType, int | bytes]]:
    """
    Walk the top-level fields of a message.

    Varint fields yield their integer value, length-delimited fields yield
    their payload bytes, and fixed-width fields yield their raw bytes.

    Raises:
        ProtobufError: On truncation, an invalid field number, or a wire
            type this framer does not understand (groups).
    """
    offset = 0
    while offset < len(data):
        key, consumed = decode_varint(data, offset)
        offset += consumed

        field_number = key >> 3
        if field_number == 0:
            raise ProtobufError("Field number 0 is reserved")

        try:
            wire_type = WireType(key & 0x07)
        except ValueError:
            raise ProtobufError(f"Unsupported wire type {key & 0x07}") from None

        value: int | bytes
        match wire_type:
            case WireType.VARINT:
                value, consumed = decode_varint(data, offset)
                offset += consumed
            case WireType.LEN:
                length, consumed = decode_varint(data, offset)
                offset += consumed
                if offset + length > len(data):
                    raise ProtobufError("Truncated length-delimited field")
                value = data[offset : offset + length]
                offset += length
            case WireType.I64 | WireType.I32:
                width = 8 if wire_type is WireType.I64 else 4
                if offset + width > len(data):
                    raise ProtobufError("Truncated fixed-width field")
                value = data[offset : offset + width]
                offset += width

        yield field_number, wire_type, value
