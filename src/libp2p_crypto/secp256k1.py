"""
secp256k1 identity keys.

Wire formats:
    - Private key: the scalar d as 32 bytes, big-endian
    - Public key: SEC1 compressed point, 0x02 (even y) or 0x03 (odd y) || x
    - Signature: DER SEQUENCE { r INTEGER, s INTEGER }

SIGNING INPUT
-------------
The message is handed to ECDSA as its input value without a separate hash
pass. ECDSA converts that input to an integer from its leftmost 256 bits
(the bit length of the curve order), so:

    - Messages of 32 bytes or more: the first 32 bytes are signed
    - Shorter messages: the message read as a big-endian integer

Existing peers sign exactly this value, so it must not be replaced with a
SHA-256 digest of the message.

The primitive library only accepts a fixed 32-byte ECDSA input, so the
message is truncated or left-padded with zero bytes to 32 bytes first. Zero
padding does not change the integer value.

Verification is permissive about malleability: both s and n - s verify, and
the absolute value of each DER integer is used.
"""

from __future__ import annotations

import logging

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import Prehashed, decode_dss_signature

from . import asn1
from .config import SECP256K1_ORDER, SECP256K1_PRIVATE_KEY_SIZE
from .context import CryptoContext, default_context
from .envelope import KeyType
from .exceptions import InvalidKeyError
from .keys import PrivateKey, PublicKey

__all__ = [
    "Secp256k1PrivateKey",
    "Secp256k1PublicKey",
    "generate_secp256k1_key_pair",
    "unmarshal_secp256k1_private_key",
    "unmarshal_secp256k1_public_key",
]

logger = logging.getLogger(__name__)

_ECDSA_INPUT_SIZE = 32
"""Bytes of message consumed by ECDSA: the curve order is 256 bits."""

_ECDSA = ec.ECDSA(Prehashed(hashes.SHA256()))
"""ECDSA over a caller-supplied 32-byte input. SHA-256 only fixes the size."""


def _ecdsa_input(data: bytes) -> bytes:
    """Map a message to the 32-byte value ECDSA consumes."""
    return data[:_ECDSA_INPUT_SIZE].rjust(_ECDSA_INPUT_SIZE, b"\x00")


class Secp256k1PublicKey(PublicKey):
    """secp256k1 public key (curve point)."""

    key_type = KeyType.SECP256K1

    __slots__ = ("_key",)

    def __init__(self, key: ec.EllipticCurvePublicKey) -> None:
        self._key = key

    def raw(self) -> bytes:
        """Return the 33-byte SEC1 compressed point."""
        return self._key.public_bytes(
            encoding=serialization.Encoding.X962,
            format=serialization.PublicFormat.CompressedPoint,
        )

    def verify(self, data: bytes, signature: bytes) -> bool:
        """
        Verify a DER ECDSA signature.

        Returns:
            True if the signature is valid, False otherwise.

        Raises:
            InvalidSignatureEncodingError: If the signature is not a DER
                sequence of exactly two integers.
        """
        r, s = asn1.decode_ecdsa_signature(signature)

        try:
            self._key.verify(
                asn1.encode_ecdsa_signature(abs(r), abs(s)),
                _ecdsa_input(data),
                _ECDSA,
            )
        except InvalidSignature:
            return False
        return True


class Secp256k1PrivateKey(PrivateKey):
    """secp256k1 private key (scalar)."""

    key_type = KeyType.SECP256K1

    __slots__ = ("_key", "_public_key")

    def __init__(self, key: ec.EllipticCurvePrivateKey) -> None:
        if not isinstance(key.curve, ec.SECP256K1):
            raise InvalidKeyError(f"Expected a secp256k1 key, got curve {key.curve.name}")

        self._key = key
        self._public_key = Secp256k1PublicKey(key.public_key())

    def raw(self) -> bytes:
        """Return the private scalar as 32 big-endian bytes."""
        value = self._key.private_numbers().private_value
        return value.to_bytes(SECP256K1_PRIVATE_KEY_SIZE, "big")

    def sign(self, data: bytes) -> bytes:
        """
        Sign a message with ECDSA.

        The nonce is drawn by the primitive library, so repeated signatures
        over the same message differ.

        Returns:
            DER-encoded ECDSA signature.
        """
        r, s = decode_dss_signature(self._key.sign(_ecdsa_input(data), _ECDSA))
        return asn1.encode_ecdsa_signature(r, s)

    def public_key(self) -> Secp256k1PublicKey:
        """Return the matching public key, Q = d·G."""
        return self._public_key


def generate_secp256k1_key_pair(
    context: CryptoContext | None = None,
) -> tuple[Secp256k1PrivateKey, Secp256k1PublicKey]:
    """
    Generate a secp256k1 keypair.

    The scalar d is drawn uniformly from [1, n - 1] using the context's
    random source; the point multiplication is done by the primitive library.

    Args:
        context: Provider context. The process default when omitted.

    Returns:
        Tuple of (private_key, public_key).
    """
    if context is None:
        context = default_context()

    scalar = context.random_scalar(SECP256K1_ORDER)
    private_key = Secp256k1PrivateKey(ec.derive_private_key(scalar, ec.SECP256K1()))
    logger.debug("Generated secp256k1 key")
    return private_key, private_key.public_key()


def unmarshal_secp256k1_private_key(data: bytes) -> Secp256k1PrivateKey:
    """
    Reconstruct a private key from its big-endian scalar.

    Any length is accepted; the bytes are read as an unsigned integer and
    range checks are left to the primitive library.

    Raises:
        InvalidKeyError: If the primitive library rejects the scalar.
    """
    scalar = int.from_bytes(data, "big")

    try:
        key = ec.derive_private_key(scalar, ec.SECP256K1())
    except ValueError as exc:
        logger.debug("Rejected secp256k1 scalar of %d bytes: %s", len(data), exc)
        raise InvalidKeyError(f"Invalid secp256k1 private key: {exc}") from exc

    return Secp256k1PrivateKey(key)


def unmarshal_secp256k1_public_key(data: bytes) -> Secp256k1PublicKey:
    """
    Reconstruct a public key from a SEC1 point, compressed or uncompressed.

    Raises:
        InvalidKeyError: If the bytes are not a point on the curve.
    """
    try:
        key = ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256K1(), data)
    except ValueError as exc:
        raise InvalidKeyError(f"Invalid secp256k1 public key: {exc}") from exc

    return Secp256k1PublicKey(key)
