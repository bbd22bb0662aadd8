"""
Peer identifiers derived from marshaled public keys.

A PeerId is a multihash of the public key envelope:

    1. Marshal the public key (KeyType tag + raw bytes, see envelope.py)
    2. Encoded length <= 42 bytes: identity multihash, the key is embedded
    3. Encoded length > 42 bytes: SHA-256 multihash
    4. Base58 (Bitcoin alphabet) for display

A secp256k1 envelope is 37 bytes, so its PeerId embeds the key and renders
as "16Uiu2...". RSA envelopes are far larger and render as "Qm...".

References:
    - https://github.com/libp2p/specs/blob/master/peer-ids/peer-ids.md
    - https://github.com/multiformats/multihash
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from enum import IntEnum
from typing import Final

from .codec import unmarshal_public_key
from .exceptions import CryptoError
from .keys import PublicKey
from .protobuf import VarintError, decode_varint, encode_varint

__all__ = [
    "Multihash",
    "MultihashCode",
    "PeerId",
    "b58decode",
    "b58encode",
]

_B58_ALPHABET: Final = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
"""Bitcoin Base58 alphabet: no 0, O, I or l."""

_MAX_INLINE_KEY_LENGTH: Final = 42
"""Longest envelope embedded with the identity multihash."""


def b58encode(data: bytes) -> str:
    """Encode bytes as Base58. Each leading zero byte becomes a '1'."""
    zeros = len(data) - len(data.lstrip(b"\x00"))
    num = int.from_bytes(data, "big")

    digits: list[str] = []
    while num:
        num, rem = divmod(num, 58)
        digits.append(_B58_ALPHABET[rem])

    return "1" * zeros + "".join(reversed(digits))


def b58decode(text: str) -> bytes:
    """
    Decode a Base58 string.

    Raises:
        ValueError: If text contains a character outside the alphabet.
    """
    num = 0
    for char in text:
        index = _B58_ALPHABET.find(char)
        if index < 0:
            raise ValueError(f"Invalid Base58 character: {char!r}")
        num = num * 58 + index

    zeros = len(text) - len(text.lstrip("1"))
    body = num.to_bytes((num.bit_length() + 7) // 8, "big") if num else b""
    return b"\x00" * zeros + body


class MultihashCode(IntEnum):
    """Multihash function codes used for PeerIds."""

    IDENTITY = 0x00
    """No hashing; the digest is the input itself."""

    SHA256 = 0x12
    """SHA-256, 32-byte digest."""


@dataclass(frozen=True, slots=True)
class Multihash:
    """
    A self-describing hash: [code varint][length varint][digest].

    Attributes:
        code: Hash function.
        digest: Hash output, or the input itself for IDENTITY.
    """

    code: MultihashCode
    """Hash function."""

    digest: bytes
    """Hash output or embedded data."""

    def encode(self) -> bytes:
        """Encode as multihash bytes."""
        return encode_varint(self.code) + encode_varint(len(self.digest)) + self.digest

    @classmethod
    def decode(cls, data: bytes) -> Multihash:
        """
        Decode multihash bytes.

        Raises:
            ValueError: On an unknown code, truncation, or trailing bytes.
        """
        try:
            code, offset = decode_varint(data)
            length, consumed = decode_varint(data, offset)
        except VarintError as exc:
            raise ValueError(f"Invalid multihash: {exc}") from exc
        offset += consumed

        if offset + length != len(data):
            raise ValueError(
                f"Multihash declares {length} digest bytes, found {len(data) - offset}"
            )

        try:
            hash_code = MultihashCode(code)
        except ValueError:
            raise ValueError(f"Unsupported multihash code: {code:#x}") from None

        return cls(code=hash_code, digest=data[offset:])

    @classmethod
    def for_public_key(cls, encoded: bytes) -> Multihash:
        """Select identity or SHA-256 by envelope length."""
        if len(encoded) <= _MAX_INLINE_KEY_LENGTH:
            return cls(code=MultihashCode.IDENTITY, digest=encoded)
        return cls(code=MultihashCode.SHA256, digest=hashlib.sha256(encoded).digest())


@dataclass(frozen=True, slots=True)
class PeerId:
    """
    A libp2p peer identifier.

    Attributes:
        multihash: Raw multihash bytes.
    """

    multihash: bytes
    """Raw multihash bytes (before Base58 encoding)."""

    def __str__(self) -> str:
        return b58encode(self.multihash)

    def __repr__(self) -> str:
        return f"PeerId({self!s})"

    @classmethod
    def from_base58(cls, text: str) -> PeerId:
        """
        Parse a Base58 PeerId.

        Raises:
            ValueError: If text is not Base58 or not a supported multihash.
        """
        data = b58decode(text)
        Multihash.decode(data)
        return cls(multihash=data)

    @classmethod
    def from_public_key(cls, public_key: PublicKey) -> PeerId:
        """Derive the PeerId of a public key from its marshaled envelope."""
        return cls(multihash=Multihash.for_public_key(public_key.to_bytes()).encode())

    def extract_public_key(self) -> PublicKey | None:
        """
        Recover the public key embedded in an identity-multihash PeerId.

        Returns:
            The public key, or None when the PeerId only holds a SHA-256 hash,
            is not a valid multihash, or the embedded bytes are not a
            supported key.
        """
        try:
            multihash = Multihash.decode(self.multihash)
        except ValueError:
            return None
        if multihash.code is not MultihashCode.IDENTITY:
            return None

        try:
            return unmarshal_public_key(multihash.digest)
        except CryptoError:
            return None

    def matches(self, public_key: PublicKey) -> bool:
        """Return True if this PeerId was derived from `public_key`."""
        return self == PeerId.from_public_key(public_key)
