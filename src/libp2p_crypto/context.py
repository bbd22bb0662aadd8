"""
Explicit cryptographic context.

Key generation draws randomness and defaults from a context object instead of
hidden module globals. A context is immutable; its random source reads the
operating system CSPRNG and is safe to share between threads.

Signing nonces and RSA primes of 1024 bits and more are produced inside
OpenSSL by the `cryptography` package. OpenSSL's generator is internally
synchronized and seeded once per process.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field
from functools import lru_cache

from .config import CryptoConfig


@dataclass(frozen=True, slots=True)
class CryptoContext:
    """
    Provider state shared by every key generation call.

    Attributes:
        config: Generation defaults.
        rng: Secure random source.
    """

    config: CryptoConfig = field(default_factory=CryptoConfig)
    """Generation defaults."""

    rng: secrets.SystemRandom = field(default_factory=secrets.SystemRandom)
    """Operating system backed random source."""

    def random_bytes(self, length: int) -> bytes:
        """Return `length` bytes from the secure random source."""
        return self.rng.randbytes(length)

    def random_scalar(self, order: int) -> int:
        """Return a uniform integer in [1, order - 1]."""
        return 1 + self.rng.randrange(order - 1)


@lru_cache(maxsize=1)
def default_context() -> CryptoContext:
    """
    Return the process-wide context, built once on first use.

    The configuration is read from the environment at that moment.
    """
    return CryptoContext(config=CryptoConfig.from_env())
