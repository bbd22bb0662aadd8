"""Pytest configuration and shared fixtures."""

import os

from hypothesis import settings

# Keep default RSA generation quick; tests that need a size pass it explicitly.
if "LIBP2P_CRYPTO_RSA_BITS" not in os.environ:
    os.environ["LIBP2P_CRYPTO_RSA_BITS"] = "1024"

# Create a profile named "no_deadline" with deadline disabled.
settings.register_profile("no_deadline", deadline=None)
settings.load_profile("no_deadline")
