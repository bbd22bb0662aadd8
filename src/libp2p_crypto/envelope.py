"""
Type-tagged key envelope.

Marshaled keys carry their algorithm so they can be decoded without any
outside context. The envelope is the libp2p-crypto protobuf message:

    message PublicKey {
        required KeyType Type = 1;  // Field 1, varint
        required bytes Data = 2;    // Field 2, length-delimited
    }

PrivateKey has the identical shape. Canonical wire form:

    [0x08][type_varint][0x12][length_varint][key_bytes]

References:
    - https://github.com/libp2p/specs/blob/master/peer-ids/peer-ids.md#keys
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from .exceptions import MalformedEnvelopeError, UnsupportedKeyTypeError
from .protobuf import ProtobufError, WireType, encode_bytes_field, encode_varint_field, iter_fields

_FIELD_TYPE = 1
_FIELD_DATA = 2


class KeyType(IntEnum):
    """
    libp2p-crypto key type codes.

    Values are part of the wire format and must never be renumbered.
    """

    RSA = 0
    """RSA; PKCS#1 DER private, SubjectPublicKeyInfo DER public."""

    ED25519 = 1
    """Ed25519. Reserved; not implemented."""

    SECP256K1 = 2
    """secp256k1; 32-byte scalar private, 33-byte compressed point public."""

    ECDSA = 3
    """ECDSA over NIST curves. Reserved; not implemented."""


@dataclass(frozen=True, slots=True)
class KeyEnvelope:
    """
    A key in libp2p-crypto protobuf form.

    Attributes:
        key_type: Algorithm tag.
        data: Raw key bytes, format depending on key_type.
    """

    key_type: KeyType
    """Algorithm tag."""

    data: bytes
    """Raw key bytes."""

    def encode(self) -> bytes:
        """Encode as deterministic protobuf bytes."""
        return encode_varint_field(_FIELD_TYPE, self.key_type) + encode_bytes_field(
            _FIELD_DATA, self.data
        )

    @classmethod
    def decode(cls, data: bytes) -> KeyEnvelope:
        """
        Decode protobuf bytes into an envelope.

        Fields may appear in any order; a repeated field keeps its last value
        and unknown fields are skipped, as protobuf parsers do.

        Raises:
            MalformedEnvelopeError: If the bytes are not a well-formed message
                or a required field is missing or mistyped.
            UnsupportedKeyTypeError: If the tag is not a known KeyType.
        """
        type_value: int | None = None
        key_data: bytes | None = None

        try:
            for field_number, wire_type, value in iter_fields(data):
                if field_number == _FIELD_TYPE:
                    if not isinstance(value, int):
                        raise MalformedEnvelopeError("Type field must be a varint")
                    type_value = value
                elif field_number == _FIELD_DATA:
                    if wire_type is not WireType.LEN or not isinstance(value, bytes):
                        raise MalformedEnvelopeError("Data field must be length-delimited")
                    key_data = value
        except ProtobufError as exc:
            raise MalformedEnvelopeError(f"Invalid key envelope: {exc}") from exc

        if type_value is None:
            raise MalformedEnvelopeError("Missing Type field in key envelope")
        if key_data is None:
            raise MalformedEnvelopeError("Missing Data field in key envelope")

        try:
            key_type = KeyType(type_value)
        except ValueError:
            raise UnsupportedKeyTypeError(type_value) from None

        return cls(key_type=key_type, data=key_data)
