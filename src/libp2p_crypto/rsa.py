"""
RSA identity keys.

Wire formats:
    - Private key: PKCS#1 RSAPrivateKey, DER
    - Public key: X.509 SubjectPublicKeyInfo, DER
    - Signature: RSASSA-PKCS1-v1.5 over SHA-256, modulus-length bytes

The primitive library only exports private keys as PKCS#8 (or its own
traditional format), so the PKCS#1 wire form is obtained by unwrapping the
PKCS#8 PrivateKeyInfo, and the reverse wrapping is applied on import.

Keys below 512 bits cannot sign a 256-bit digest and are refused.
"""

from __future__ import annotations

import logging
import math

from Crypto.Util import number
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from . import asn1
from .config import RSA_MIN_BITS, RSA_PUBLIC_EXPONENT
from .context import CryptoContext, default_context
from .envelope import KeyType
from .exceptions import (
    InvalidKeyError,
    InvalidSignatureEncodingError,
    RsaKeyTooSmallError,
    UnsupportedKeyFormatError,
)
from .keys import PrivateKey, PublicKey

__all__ = [
    "RsaPrivateKey",
    "RsaPublicKey",
    "generate_rsa_key_pair",
    "unmarshal_rsa_private_key",
    "unmarshal_rsa_public_key",
]

logger = logging.getLogger(__name__)

_PRIMITIVE_MIN_BITS = 1024
"""Smallest size the primitive library will generate by itself."""


class RsaPublicKey(PublicKey):
    """RSA public key (modulus and public exponent)."""

    key_type = KeyType.RSA

    __slots__ = ("_key", "_raw")

    def __init__(self, key: rsa.RSAPublicKey) -> None:
        self._key = key
        self._raw = key.public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )

    @property
    def key_size(self) -> int:
        """Modulus length in bits."""
        return self._key.key_size

    def raw(self) -> bytes:
        """Return the X.509 SubjectPublicKeyInfo DER encoding."""
        return self._raw

    def verify(self, data: bytes, signature: bytes) -> bool:
        """
        Verify an RSASSA-PKCS1-v1.5 SHA-256 signature.

        Returns:
            True if the signature is valid, False otherwise.

        Raises:
            InvalidSignatureEncodingError: If the signature length does not
                match the modulus length.
        """
        expected = (self._key.key_size + 7) // 8
        if len(signature) != expected:
            raise InvalidSignatureEncodingError(
                f"RSA signature must be {expected} bytes, got {len(signature)}"
            )

        try:
            self._key.verify(signature, data, padding.PKCS1v15(), hashes.SHA256())
        except InvalidSignature:
            return False
        return True


class RsaPrivateKey(PrivateKey):
    """
    RSA private key in CRT form.

    The PKCS#1 raw encoding is computed once at construction from the key's
    PKCS#8 export.
    """

    key_type = KeyType.RSA

    __slots__ = ("_key", "_raw", "_public_key")

    def __init__(self, key: rsa.RSAPrivateKey, public_key: rsa.RSAPublicKey | None = None) -> None:
        """
        Wrap a native private key.

        Args:
            key: Primitive-library RSA private key.
            public_key: Matching public key. Derived from `key` when omitted.

        Raises:
            UnsupportedKeyFormatError: If `key` is not an RSA key exportable
                as an rsaEncryption PKCS#8 PrivateKeyInfo.
            InvalidKeyError: If `public_key` does not match `key`.
        """
        if not isinstance(key, rsa.RSAPrivateKey):
            raise UnsupportedKeyFormatError(
                f"Private key must be an RSA key in PKCS#8 format, got {type(key).__name__}"
            )

        pkcs8 = key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )

        derived = key.public_key()
        if public_key is None:
            public_key = derived
        elif public_key.public_numbers() != derived.public_numbers():
            raise InvalidKeyError("RSA public key does not match the private key")

        self._key = key
        self._raw = asn1.pkcs8_to_pkcs1(pkcs8)
        self._public_key = RsaPublicKey(public_key)

    @classmethod
    def from_pkcs8(cls, der: bytes) -> RsaPrivateKey:
        """
        Load a key from unencrypted PKCS#8 DER.

        Raises:
            UnsupportedKeyFormatError: If the bytes hold an encrypted or
                non-RSA key.
            InvalidKeyError: If the key material is rejected.
        """
        try:
            key = serialization.load_der_private_key(der, password=None)
        except (TypeError, UnsupportedAlgorithm) as exc:
            raise UnsupportedKeyFormatError(f"Unsupported PKCS#8 key: {exc}") from exc
        except ValueError as exc:
            raise InvalidKeyError(f"Invalid PKCS#8 key: {exc}") from exc

        return cls(key)  # type: ignore[arg-type]

    def raw(self) -> bytes:
        """Return the PKCS#1 RSAPrivateKey DER encoding."""
        return self._raw

    def sign(self, data: bytes) -> bytes:
        """Sign with RSASSA-PKCS1-v1.5 over SHA-256. Deterministic."""
        return self._key.sign(data, padding.PKCS1v15(), hashes.SHA256())

    def public_key(self) -> RsaPublicKey:
        """Return the matching public key."""
        return self._public_key


def _generate_below_primitive_floor(bits: int, context: CryptoContext) -> rsa.RSAPrivateKey:
    """
    Build a key for sizes the primitive library refuses to generate.

    Primes come from the context's random source; the private exponent is
    taken modulo lcm(p - 1, q - 1) as OpenSSL does.
    """
    e = RSA_PUBLIC_EXPONENT
    p_bits = (bits + 1) // 2
    q_bits = bits - p_bits

    while True:
        p = number.getPrime(p_bits, randfunc=context.random_bytes)
        q = number.getPrime(q_bits, randfunc=context.random_bytes)
        if p == q or (p * q).bit_length() != bits:
            continue

        carmichael = math.lcm(p - 1, q - 1)
        if math.gcd(e, carmichael) == 1:
            break

    if p < q:
        p, q = q, p

    d = pow(e, -1, carmichael)
    numbers = rsa.RSAPrivateNumbers(
        p=p,
        q=q,
        d=d,
        dmp1=rsa.rsa_crt_dmp1(d, p),
        dmq1=rsa.rsa_crt_dmq1(d, q),
        iqmp=rsa.rsa_crt_iqmp(p, q),
        public_numbers=rsa.RSAPublicNumbers(e=e, n=p * q),
    )
    return numbers.private_key()


def generate_rsa_key_pair(
    bits: int,
    context: CryptoContext | None = None,
) -> tuple[RsaPrivateKey, RsaPublicKey]:
    """
    Generate an RSA keypair with public exponent 65537.

    Args:
        bits: Modulus size. The modulus has exactly this many bits.
        context: Provider context. The process default when omitted.

    Returns:
        Tuple of (private_key, public_key).

    Raises:
        RsaKeyTooSmallError: If bits is below 512. Nothing is generated.
    """
    if bits < RSA_MIN_BITS:
        raise RsaKeyTooSmallError(bits)

    if context is None:
        context = default_context()

    if bits >= _PRIMITIVE_MIN_BITS:
        native = rsa.generate_private_key(public_exponent=RSA_PUBLIC_EXPONENT, key_size=bits)
    else:
        native = _generate_below_primitive_floor(bits, context)

    private_key = RsaPrivateKey(native)
    logger.debug("Generated %d-bit RSA key", bits)
    return private_key, private_key.public_key()


def unmarshal_rsa_private_key(data: bytes) -> RsaPrivateKey:
    """
    Reconstruct a private key from PKCS#1 DER.

    The key is re-wrapped as PKCS#8 for the primitive library. The public
    key is rebuilt from (n, e) since PKCS#1 carries no public key structure.

    Raises:
        MalformedAsn1Error: If data is not a PKCS#1 RSAPrivateKey.
        InvalidKeyError: If the parameters do not form a consistent key.
    """
    params = asn1.parse_rsa_private_key(data)
    pkcs8 = asn1.pkcs1_to_pkcs8(data)

    try:
        native = serialization.load_der_private_key(pkcs8, password=None)
        public = rsa.RSAPublicNumbers(e=params.public_exponent, n=params.modulus).public_key()
    except ValueError as exc:
        logger.debug("Rejected RSA private key: %s", exc)
        raise InvalidKeyError(f"Invalid RSA private key: {exc}") from exc

    return RsaPrivateKey(native, public)  # type: ignore[arg-type]


def unmarshal_rsa_public_key(data: bytes) -> RsaPublicKey:
    """
    Reconstruct a public key from X.509 SubjectPublicKeyInfo DER.

    Raises:
        MalformedAsn1Error: If data is not valid SubjectPublicKeyInfo DER.
        UnsupportedKeyFormatError: If the key is not an RSA key.
        InvalidKeyError: If the modulus or exponent is rejected.
    """
    modulus, public_exponent = asn1.parse_subject_public_key_info(data)

    try:
        public = rsa.RSAPublicNumbers(e=public_exponent, n=modulus).public_key()
    except ValueError as exc:
        raise InvalidKeyError(f"Invalid RSA public key: {exc}") from exc

    return RsaPublicKey(public)
