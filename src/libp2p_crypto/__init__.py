"""
libp2p identity keys.

Generation, canonical wire marshaling, and signing for the RSA and secp256k1
key types used by libp2p peers. Marshaled keys are byte-compatible with other
libp2p implementations.
"""

from .codec import (
    generate_key_pair,
    marshal_private_key,
    marshal_public_key,
    unmarshal_private_key,
    unmarshal_public_key,
)
from .config import CryptoConfig
from .context import CryptoContext, default_context
from .envelope import KeyEnvelope, KeyType
from .exceptions import (
    CryptoError,
    InvalidKeyError,
    InvalidSignatureEncodingError,
    MalformedAsn1Error,
    MalformedEnvelopeError,
    RsaKeyTooSmallError,
    UnsupportedKeyFormatError,
    UnsupportedKeyTypeError,
)
from .keys import PrivateKey, PublicKey
from .peer_id import PeerId
from .rsa import (
    RsaPrivateKey,
    RsaPublicKey,
    generate_rsa_key_pair,
    unmarshal_rsa_private_key,
    unmarshal_rsa_public_key,
)
from .secp256k1 import (
    Secp256k1PrivateKey,
    Secp256k1PublicKey,
    generate_secp256k1_key_pair,
    unmarshal_secp256k1_private_key,
    unmarshal_secp256k1_public_key,
)

__all__ = [
    # Abstraction
    "KeyEnvelope",
    "KeyType",
    "PrivateKey",
    "PublicKey",
    "PeerId",
    # Dispatch
    "generate_key_pair",
    "marshal_private_key",
    "marshal_public_key",
    "unmarshal_private_key",
    "unmarshal_public_key",
    # RSA
    "RsaPrivateKey",
    "RsaPublicKey",
    "generate_rsa_key_pair",
    "unmarshal_rsa_private_key",
    "unmarshal_rsa_public_key",
    # secp256k1
    "Secp256k1PrivateKey",
    "Secp256k1PublicKey",
    "generate_secp256k1_key_pair",
    "unmarshal_secp256k1_private_key",
    "unmarshal_secp256k1_public_key",
    # Configuration
    "CryptoConfig",
    "CryptoContext",
    "default_context",
    # Errors
    "CryptoError",
    "InvalidKeyError",
    "InvalidSignatureEncodingError",
    "MalformedAsn1Error",
    "MalformedEnvelopeError",
    "RsaKeyTooSmallError",
    "UnsupportedKeyFormatError",
    "UnsupportedKeyTypeError",
]
