"""
Command-line tool for libp2p identity keys.

Usage::

    python -m libp2p_crypto generate --type secp256k1
    python -m libp2p_crypto generate --type rsa --bits 2048
    python -m libp2p_crypto inspect 08021221...

Commands:
    generate   Create a keypair and print both marshaled keys and the PeerId
    inspect    Decode a marshaled public key (hex) and print its PeerId
"""

from __future__ import annotations

import argparse
import logging
import sys

from .codec import generate_key_pair, unmarshal_public_key
from .envelope import KeyType
from .exceptions import CryptoError
from .peer_id import PeerId

logger = logging.getLogger(__name__)

_KEY_TYPES = {
    "rsa": KeyType.RSA,
    "secp256k1": KeyType.SECP256K1,
}


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging for the command line."""
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)


def _generate(args: argparse.Namespace) -> None:
    private_key, public_key = generate_key_pair(_KEY_TYPES[args.type], bits=args.bits)

    print(f"type:        {public_key.key_type.name}")
    print(f"private_key: {private_key.to_bytes().hex()}")
    print(f"public_key:  {public_key.to_bytes().hex()}")
    print(f"peer_id:     {PeerId.from_public_key(public_key)}")


def _inspect(args: argparse.Namespace) -> None:
    try:
        data = bytes.fromhex(args.public_key)
    except ValueError as exc:
        raise CryptoError(f"Public key is not valid hex: {exc}") from exc

    public_key = unmarshal_public_key(data)

    print(f"type:        {public_key.key_type.name}")
    print(f"raw_length:  {len(public_key.raw())}")
    print(f"peer_id:     {PeerId.from_public_key(public_key)}")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="python -m libp2p_crypto",
        description="libp2p identity key tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    generate = commands.add_parser("generate", help="Generate a keypair")
    generate.add_argument(
        "--type",
        choices=sorted(_KEY_TYPES),
        default="secp256k1",
        help="Key algorithm (default: secp256k1)",
    )
    generate.add_argument(
        "--bits",
        type=int,
        default=None,
        help="RSA modulus size (default: 2048, or LIBP2P_CRYPTO_RSA_BITS)",
    )
    generate.set_defaults(handler=_generate)

    inspect = commands.add_parser("inspect", help="Decode a marshaled public key")
    inspect.add_argument("public_key", help="Marshaled public key as hex")
    inspect.set_defaults(handler=_inspect)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        args.handler(args)
    except CryptoError as exc:
        logger.error("%s", exc.message)
        return 1
    except ValueError as exc:
        # Raised by configuration loading, e.g. an invalid LIBP2P_CRYPTO_RSA_BITS.
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
