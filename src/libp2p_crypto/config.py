"""
Configuration constants for libp2p identity keys.

The wire-facing constants are fixed by interoperability with other libp2p
implementations and must not change. Only the default RSA size is tunable.
"""

from __future__ import annotations

import os
from typing import Final, Self

from pydantic import BaseModel, ConfigDict, field_validator

RSA_MIN_BITS: Final = 512
"""Smallest RSA modulus able to sign a 256-bit digest."""

RSA_DEFAULT_BITS: Final = 2048
"""Modulus size used when the caller does not request one."""

RSA_PUBLIC_EXPONENT: Final = 65537
"""Public exponent for every generated RSA key."""

SECP256K1_PRIVATE_KEY_SIZE: Final = 32
"""Width of the big-endian private scalar."""

SECP256K1_COMPRESSED_KEY_SIZE: Final = 33
"""SEC1 compressed point: 0x02/0x03 prefix + 32-byte x coordinate."""

SECP256K1_ORDER: Final = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
"""Order n of the secp256k1 base point (SEC2)."""

RSA_BITS_ENV_VAR: Final = "LIBP2P_CRYPTO_RSA_BITS"
"""Environment variable overriding the default RSA modulus size."""


class StrictBaseModel(BaseModel):
    """A strict, immutable pydantic base model."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        strict=True,
        validate_default=True,
    )


class CryptoConfig(StrictBaseModel):
    """Runtime configuration for key generation."""

    rsa_default_bits: int = RSA_DEFAULT_BITS
    """RSA modulus size used by generate_key_pair when none is given."""

    @field_validator("rsa_default_bits")
    @classmethod
    def _check_rsa_bits(cls, value: int) -> int:
        if value < RSA_MIN_BITS:
            raise ValueError(f"rsa_default_bits must be >= {RSA_MIN_BITS}, got {value}")
        return value

    @classmethod
    def from_env(cls) -> Self:
        """
        Build a configuration from the process environment.

        Returns:
            Configuration with any environment overrides applied.

        Raises:
            ValueError: If an override is not a valid integer or is out of range.
        """
        raw = os.environ.get(RSA_BITS_ENV_VAR)
        if raw is None:
            return cls()

        try:
            bits = int(raw)
        except ValueError:
            raise ValueError(f"Invalid {RSA_BITS_ENV_VAR} environment variable: '{raw}'") from None

        return cls(rsa_default_bits=bits)
