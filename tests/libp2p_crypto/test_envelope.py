"""Tests for the type-tagged key envelope."""

from __future__ import annotations

import pytest

from libp2p_crypto import KeyEnvelope, KeyType, MalformedEnvelopeError, UnsupportedKeyTypeError


class TestKeyType:
    """Tests for wire tag values."""

    @pytest.mark.parametrize(
        ("key_type", "value"),
        [
            (KeyType.RSA, 0),
            (KeyType.ED25519, 1),
            (KeyType.SECP256K1, 2),
            (KeyType.ECDSA, 3),
        ],
    )
    def test_values(self, key_type: KeyType, value: int) -> None:
        """Tags match the libp2p-crypto protobuf enum."""
        assert key_type == value


class TestEncode:
    """Tests for canonical envelope encoding."""

    def test_secp256k1_public_key_layout(self) -> None:
        """A 33-byte key encodes as 08 02 12 21 || key."""
        data = b"\x02" + b"\xab" * 32
        encoded = KeyEnvelope(key_type=KeyType.SECP256K1, data=data).encode()

        assert encoded == b"\x08\x02\x12\x21" + data
        assert len(encoded) == 37

    def test_rsa_tag_is_written(self) -> None:
        """The zero tag is still emitted."""
        encoded = KeyEnvelope(key_type=KeyType.RSA, data=b"k").encode()
        assert encoded == b"\x08\x00\x12\x01k"

    def test_long_data_uses_multibyte_length(self) -> None:
        """Payloads over 127 bytes use a two-byte length varint."""
        data = b"\x00" * 300
        encoded = KeyEnvelope(key_type=KeyType.RSA, data=data).encode()
        assert encoded[:5] == b"\x08\x00\x12\xac\x02"

    def test_empty_data(self) -> None:
        """An empty payload is still a present field."""
        encoded = KeyEnvelope(key_type=KeyType.SECP256K1, data=b"").encode()
        assert encoded == b"\x08\x02\x12\x00"
        assert KeyEnvelope.decode(encoded).data == b""


class TestDecode:
    """Tests for envelope decoding."""

    def test_decode(self) -> None:
        """Canonical bytes decode to the original envelope."""
        envelope = KeyEnvelope(key_type=KeyType.SECP256K1, data=b"\x03" * 33)
        assert KeyEnvelope.decode(envelope.encode()) == envelope

    def test_field_order_is_irrelevant(self) -> None:
        """Data before Type is accepted."""
        assert KeyEnvelope.decode(b"\x12\x02hi\x08\x02") == KeyEnvelope(
            key_type=KeyType.SECP256K1, data=b"hi"
        )

    def test_unknown_fields_are_skipped(self) -> None:
        """Fields other than 1 and 2 are ignored."""
        data = b"\x08\x00" + b"\x1a\x03xyz" + b"\x20\x07" + b"\x12\x01k"
        assert KeyEnvelope.decode(data) == KeyEnvelope(key_type=KeyType.RSA, data=b"k")

    def test_repeated_field_keeps_last(self) -> None:
        """A repeated field takes its last value."""
        data = b"\x08\x00\x12\x01a\x08\x02\x12\x01b"
        assert KeyEnvelope.decode(data) == KeyEnvelope(key_type=KeyType.SECP256K1, data=b"b")

    def test_reserved_tags_decode(self) -> None:
        """Reserved algorithms are still valid envelopes."""
        assert KeyEnvelope.decode(b"\x08\x01\x12\x00").key_type is KeyType.ED25519
        assert KeyEnvelope.decode(b"\x08\x03\x12\x00").key_type is KeyType.ECDSA

    def test_unknown_tag(self) -> None:
        """Tags outside the enum are unsupported, not malformed."""
        with pytest.raises(UnsupportedKeyTypeError) as exc_info:
            KeyEnvelope.decode(b"\x08\x09\x12\x00")
        assert exc_info.value.key_type == 9

    @pytest.mark.parametrize(
        ("data", "match"),
        [
            (b"", "Missing Type"),
            (b"\x12\x01k", "Missing Type"),
            (b"\x08\x02", "Missing Data"),
            (b"\x08", "Truncated varint"),
            (b"\x08\x02\x12\x21\x02", "Truncated length-delimited"),
            (b"\x0a\x01k\x12\x01k", "Type field must be a varint"),
            (b"\x08\x02\x10\x05", "Data field must be length-delimited"),
            (b"\x00\x00", "reserved"),
        ],
    )
    def test_malformed(self, data: bytes, match: str) -> None:
        """Structurally broken envelopes are rejected."""
        with pytest.raises(MalformedEnvelopeError, match=match):
            KeyEnvelope.decode(data)
