"""
ASN.1 DER structures used by the identity key formats.

RSA private keys travel on the wire as PKCS#1 `RSAPrivateKey`, while the
primitive library imports and exports PKCS#8 `PrivateKeyInfo`. PKCS#8 is a
wrapper around the same PKCS#1 payload:

    PrivateKeyInfo ::= SEQUENCE {
        version             INTEGER,             -- 0
        privateKeyAlgorithm AlgorithmIdentifier, -- rsaEncryption, NULL
        privateKey          OCTET STRING         -- DER RSAPrivateKey
    }

    RSAPrivateKey ::= SEQUENCE {
        version, modulus, publicExponent, privateExponent,
        prime1, prime2, exponent1, exponent2, coefficient   -- all INTEGER
    }

Converting between the two is a matter of unwrapping or wrapping the octet
string. RSA public keys use X.509 `SubjectPublicKeyInfo`, and ECDSA
signatures are `SEQUENCE { r INTEGER, s INTEGER }`.

References:
    - RFC 8017 (PKCS#1), RFC 5208 (PKCS#8), RFC 5280 (SubjectPublicKeyInfo)
    - SEC1 section C.8 (ECDSA-Sig-Value)
"""

from __future__ import annotations

from typing import NamedTuple, TypeVar

from pyasn1.codec.der import decoder as der_decoder
from pyasn1.codec.der import encoder as der_encoder
from pyasn1.error import PyAsn1Error
from pyasn1.type import base, univ
from pyasn1_modules import rfc2437, rfc2459, rfc3447, rfc5208

from .exceptions import InvalidSignatureEncodingError, MalformedAsn1Error, UnsupportedKeyFormatError

_T = TypeVar("_T", bound=base.Asn1Type)


class RsaPrivateParameters(NamedTuple):
    """The nine INTEGER fields of a two-prime PKCS#1 RSAPrivateKey."""

    version: int
    modulus: int
    public_exponent: int
    private_exponent: int
    prime1: int
    prime2: int
    exponent1: int
    exponent2: int
    coefficient: int


class _EcdsaSignature(univ.SequenceOf):
    """ECDSA-Sig-Value, decoded loosely so the integer count can be checked."""

    componentType = univ.Integer()


def decode_der(data: bytes, spec: _T) -> _T:
    """
    Decode DER bytes against a schema.

    Raises:
        MalformedAsn1Error: If decoding fails or bytes trail the structure.
    """
    try:
        value, rest = der_decoder.decode(data, asn1Spec=spec)
    except PyAsn1Error as exc:
        raise MalformedAsn1Error(f"Invalid {spec.__class__.__name__} DER: {exc}") from exc

    if rest:
        raise MalformedAsn1Error(
            f"{len(rest)} trailing bytes after {spec.__class__.__name__} DER"
        )
    return value


def _set_rsa_algorithm(algorithm: univ.Sequence) -> None:
    algorithm["algorithm"] = rfc2459.rsaEncryption
    # Parameters must be an explicit NULL; set it pre-encoded.
    algorithm["parameters"] = univ.Any(der_encoder.encode(univ.Null()))


def parse_rsa_private_key(der: bytes) -> RsaPrivateParameters:
    """
    Parse a PKCS#1 RSAPrivateKey.

    Raises:
        MalformedAsn1Error: If the bytes are not a two-prime RSAPrivateKey.
    """
    key = decode_der(der, rfc3447.RSAPrivateKey())
    if int(key["version"]) != 0:
        raise MalformedAsn1Error("Multi-prime RSA keys are not supported")

    return RsaPrivateParameters(
        version=int(key["version"]),
        modulus=int(key["modulus"]),
        public_exponent=int(key["publicExponent"]),
        private_exponent=int(key["privateExponent"]),
        prime1=int(key["prime1"]),
        prime2=int(key["prime2"]),
        exponent1=int(key["exponent1"]),
        exponent2=int(key["exponent2"]),
        coefficient=int(key["coefficient"]),
    )


def encode_rsa_private_key(params: RsaPrivateParameters) -> bytes:
    """Encode parameters as a PKCS#1 RSAPrivateKey."""
    key = rfc3447.RSAPrivateKey()
    key["version"] = params.version
    key["modulus"] = params.modulus
    key["publicExponent"] = params.public_exponent
    key["privateExponent"] = params.private_exponent
    key["prime1"] = params.prime1
    key["prime2"] = params.prime2
    key["exponent1"] = params.exponent1
    key["exponent2"] = params.exponent2
    key["coefficient"] = params.coefficient
    return der_encoder.encode(key)


def pkcs8_to_pkcs1(der: bytes) -> bytes:
    """
    Extract the PKCS#1 RSAPrivateKey carried inside a PKCS#8 PrivateKeyInfo.

    The algorithm identifier wrapper is discarded. The inner key is parsed and
    re-encoded so the result is canonical DER.

    Raises:
        MalformedAsn1Error: If either layer is not valid DER.
        UnsupportedKeyFormatError: If the wrapped key is not an RSA key.
    """
    info = decode_der(der, rfc5208.PrivateKeyInfo())

    algorithm = info["privateKeyAlgorithm"]["algorithm"]
    if algorithm != rfc2459.rsaEncryption:
        raise UnsupportedKeyFormatError(f"PKCS#8 key algorithm {algorithm} is not rsaEncryption")

    inner = info["privateKey"].asOctets()
    return encode_rsa_private_key(parse_rsa_private_key(inner))


def pkcs1_to_pkcs8(der: bytes) -> bytes:
    """
    Wrap a PKCS#1 RSAPrivateKey into a PKCS#8 PrivateKeyInfo.

    Raises:
        MalformedAsn1Error: If the input is not a valid RSAPrivateKey.
    """
    params = parse_rsa_private_key(der)

    info = rfc5208.PrivateKeyInfo()
    info["version"] = 0
    _set_rsa_algorithm(info["privateKeyAlgorithm"])
    info["privateKey"] = encode_rsa_private_key(params)
    return der_encoder.encode(info)


def encode_subject_public_key_info(modulus: int, public_exponent: int) -> bytes:
    """Encode an RSA public key as X.509 SubjectPublicKeyInfo."""
    rsa_key = rfc2437.RSAPublicKey()
    rsa_key["modulus"] = modulus
    rsa_key["publicExponent"] = public_exponent

    spki = rfc2459.SubjectPublicKeyInfo()
    _set_rsa_algorithm(spki["algorithm"])
    spki["subjectPublicKey"] = univ.BitString.fromOctetString(der_encoder.encode(rsa_key))
    return der_encoder.encode(spki)


def parse_subject_public_key_info(der: bytes) -> tuple[int, int]:
    """
    Parse an RSA SubjectPublicKeyInfo.

    Returns:
        Tuple of (modulus, public_exponent).

    Raises:
        MalformedAsn1Error: If the bytes are not valid DER.
        UnsupportedKeyFormatError: If the key is not an RSA key.
    """
    spki = decode_der(der, rfc2459.SubjectPublicKeyInfo())

    algorithm = spki["algorithm"]["algorithm"]
    if algorithm != rfc2459.rsaEncryption:
        raise UnsupportedKeyFormatError(f"Public key algorithm {algorithm} is not rsaEncryption")

    rsa_key = decode_der(spki["subjectPublicKey"].asOctets(), rfc2437.RSAPublicKey())
    return int(rsa_key["modulus"]), int(rsa_key["publicExponent"])


def encode_ecdsa_signature(r: int, s: int) -> bytes:
    """Encode an ECDSA signature as DER SEQUENCE { r INTEGER, s INTEGER }."""
    signature = _EcdsaSignature()
    signature.setComponentByPosition(0, r)
    signature.setComponentByPosition(1, s)
    return der_encoder.encode(signature)


def decode_ecdsa_signature(der: bytes) -> tuple[int, int]:
    """
    Decode a DER ECDSA signature.

    Values are returned as encoded, sign included.

    Raises:
        InvalidSignatureEncodingError: If the input is not a DER sequence of
            exactly two integers.
    """
    try:
        signature = decode_der(der, _EcdsaSignature())
    except MalformedAsn1Error as exc:
        raise InvalidSignatureEncodingError(f"Invalid signature: {exc.message}") from exc

    if len(signature) != 2:
        raise InvalidSignatureEncodingError(
            f"Invalid signature: expected 2 values for 'r' and 's' but got {len(signature)}"
        )

    return int(signature[0]), int(signature[1])
