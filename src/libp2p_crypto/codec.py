"""
Algorithm dispatch for marshaling, unmarshaling, and key generation.

Every entry point routes on KeyType with an exhaustive match. Reserved tags
decode as valid envelopes but are refused here, so the mapping from wire tag
to implementation stays total.
"""

from __future__ import annotations

import logging

from .context import CryptoContext, default_context
from .envelope import KeyEnvelope, KeyType
from .exceptions import UnsupportedKeyTypeError
from .keys import PrivateKey, PublicKey
from .rsa import generate_rsa_key_pair, unmarshal_rsa_private_key, unmarshal_rsa_public_key
from .secp256k1 import (
    generate_secp256k1_key_pair,
    unmarshal_secp256k1_private_key,
    unmarshal_secp256k1_public_key,
)

__all__ = [
    "generate_key_pair",
    "marshal_private_key",
    "marshal_public_key",
    "unmarshal_private_key",
    "unmarshal_public_key",
]

logger = logging.getLogger(__name__)


def generate_key_pair(
    key_type: KeyType,
    bits: int | None = None,
    context: CryptoContext | None = None,
) -> tuple[PrivateKey, PublicKey]:
    """
    Generate a keypair for the given algorithm.

    Args:
        key_type: Algorithm to generate.
        bits: RSA modulus size. Defaults to the context configuration.
            Ignored for secp256k1.
        context: Provider context. The process default when omitted.

    Raises:
        UnsupportedKeyTypeError: For reserved algorithms.
        RsaKeyTooSmallError: For RSA sizes below 512 bits.
    """
    if context is None:
        context = default_context()

    match key_type:
        case KeyType.RSA:
            if bits is None:
                bits = context.config.rsa_default_bits
            return generate_rsa_key_pair(bits, context)
        case KeyType.SECP256K1:
            return generate_secp256k1_key_pair(context)
        case KeyType.ED25519 | KeyType.ECDSA:
            raise UnsupportedKeyTypeError(key_type)


def marshal_private_key(key: PrivateKey) -> bytes:
    """Encode a private key as a type-tagged envelope."""
    return key.to_bytes()


def marshal_public_key(key: PublicKey) -> bytes:
    """Encode a public key as a type-tagged envelope."""
    return key.to_bytes()


def unmarshal_private_key(data: bytes) -> PrivateKey:
    """
    Decode a private key envelope.

    Raises:
        MalformedEnvelopeError: If the envelope is malformed.
        UnsupportedKeyTypeError: If the tag is unknown or reserved.
        CryptoError: Any error raised by the algorithm's decoder.
    """
    envelope = KeyEnvelope.decode(data)
    logger.debug("Unmarshaling %s private key", envelope.key_type.name)

    match envelope.key_type:
        case KeyType.RSA:
            return unmarshal_rsa_private_key(envelope.data)
        case KeyType.SECP256K1:
            return unmarshal_secp256k1_private_key(envelope.data)
        case KeyType.ED25519 | KeyType.ECDSA:
            raise UnsupportedKeyTypeError(envelope.key_type)


def unmarshal_public_key(data: bytes) -> PublicKey:
    """
    Decode a public key envelope.

    Raises:
        MalformedEnvelopeError: If the envelope is malformed.
        UnsupportedKeyTypeError: If the tag is unknown or reserved.
        CryptoError: Any error raised by the algorithm's decoder.
    """
    envelope = KeyEnvelope.decode(data)
    logger.debug("Unmarshaling %s public key", envelope.key_type.name)

    match envelope.key_type:
        case KeyType.RSA:
            return unmarshal_rsa_public_key(envelope.data)
        case KeyType.SECP256K1:
            return unmarshal_secp256k1_public_key(envelope.data)
        case KeyType.ED25519 | KeyType.ECDSA:
            raise UnsupportedKeyTypeError(envelope.key_type)
