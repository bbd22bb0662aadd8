"""Exception hierarchy for libp2p identity keys."""

from __future__ import annotations


class CryptoError(Exception):
    """
    Base exception for all key handling errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class RsaKeyTooSmallError(CryptoError):
    """
    Raised when an RSA key smaller than 512 bits is requested.

    Keys must be large enough to sign a 256-bit digest.

    Attributes:
        bits: The rejected modulus size.
    """

    def __init__(self, bits: int) -> None:
        self.bits = bits
        super().__init__(f"rsa keys must be >= 512 bits to be useful, got {bits}")


class UnsupportedKeyFormatError(CryptoError):
    """Raised when a native key is not in the expected PKCS#8 RSA encoding."""


class UnsupportedKeyTypeError(CryptoError):
    """
    Raised when a wire tag names an unknown or unimplemented algorithm.

    Attributes:
        key_type: The offending numeric tag.
    """

    def __init__(self, key_type: int) -> None:
        self.key_type = key_type
        super().__init__(f"Unsupported key type: {key_type}")


class MalformedEnvelopeError(CryptoError):
    """Raised when key envelope bytes are not a valid protobuf record."""


class MalformedAsn1Error(CryptoError):
    """Raised when DER input is structurally invalid for the expected schema."""


class InvalidSignatureEncodingError(CryptoError):
    """Raised when a signature cannot possibly be valid for its key's format."""


class InvalidKeyError(CryptoError):
    """Raised when well-formed bytes describe key material the primitive rejects."""
