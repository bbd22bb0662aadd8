"""
Shared keypair fixtures.

RSA generation is slow, so keys are generated once per session and shared.
Keys are immutable, which makes sharing safe.
"""

from __future__ import annotations

import pytest

from libp2p_crypto import (
    RsaPrivateKey,
    RsaPublicKey,
    Secp256k1PrivateKey,
    Secp256k1PublicKey,
    generate_rsa_key_pair,
    generate_secp256k1_key_pair,
)


@pytest.fixture(scope="session")
def rsa_512_key_pair() -> tuple[RsaPrivateKey, RsaPublicKey]:
    """Smallest permitted RSA keypair, built below the primitive's own floor."""
    return generate_rsa_key_pair(512)


@pytest.fixture(scope="session")
def rsa_1024_key_pair() -> tuple[RsaPrivateKey, RsaPublicKey]:
    """RSA keypair generated by the primitive library."""
    return generate_rsa_key_pair(1024)


@pytest.fixture(scope="session")
def secp256k1_key_pair() -> tuple[Secp256k1PrivateKey, Secp256k1PublicKey]:
    """secp256k1 keypair."""
    return generate_secp256k1_key_pair()
