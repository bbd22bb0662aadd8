"""
Capability interface shared by every identity key algorithm.

Each algorithm module provides one PrivateKey and one PublicKey subclass.
Subclasses supply their algorithm tag and canonical raw bytes; marshaling,
equality, and hashing are defined here once, over the marshaled envelope, so
two keys compare equal exactly when their wire encodings are identical.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar

from .envelope import KeyEnvelope, KeyType


class _Key(ABC):
    """Behaviour common to private and public keys."""

    key_type: ClassVar[KeyType]
    """Algorithm tag written into the envelope."""

    __slots__ = ()

    @abstractmethod
    def raw(self) -> bytes:
        """Return the canonical algorithm-specific encoding."""

    def to_bytes(self) -> bytes:
        """Return the key marshaled as a type-tagged envelope."""
        return KeyEnvelope(key_type=self.key_type, data=self.raw()).encode()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _Key):
            return NotImplemented
        if isinstance(self, PrivateKey) != isinstance(other, PrivateKey):
            return False
        return self.to_bytes() == other.to_bytes()

    def __hash__(self) -> int:
        return hash((isinstance(self, PrivateKey), self.to_bytes()))


class PublicKey(_Key):
    """A public identity key able to check signatures."""

    __slots__ = ()

    @abstractmethod
    def verify(self, data: bytes, signature: bytes) -> bool:
        """
        Check a signature over `data`.

        Returns:
            True if the signature is valid, False otherwise.
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.raw().hex()})"


class PrivateKey(_Key):
    """A private identity key able to sign."""

    __slots__ = ()

    @abstractmethod
    def sign(self, data: bytes) -> bytes:
        """Sign `data` and return the algorithm's signature encoding."""

    @abstractmethod
    def public_key(self) -> PublicKey:
        """Return the matching public key."""

    def __repr__(self) -> str:
        # Never expose secret material.
        return f"{self.__class__.__name__}(public_key={self.public_key().raw().hex()})"
