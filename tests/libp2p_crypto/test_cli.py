"""Tests for the command-line tool."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from libp2p_crypto import PeerId, default_context, unmarshal_private_key, unmarshal_public_key
from libp2p_crypto.__main__ import build_parser, main
from libp2p_crypto.config import RSA_BITS_ENV_VAR


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Iterator[None]:
    """Undo the handlers main() installs on the root logger."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _parse(output: str) -> dict[str, str]:
    fields = {}
    for line in output.strip().splitlines():
        key, value = line.split(":", 1)
        fields[key.strip()] = value.strip()
    return fields


class TestParser:
    """Tests for argument parsing."""

    def test_generate_defaults(self) -> None:
        """generate defaults to secp256k1 with no explicit size."""
        args = build_parser().parse_args(["generate"])
        assert args.type == "secp256k1"
        assert args.bits is None

    def test_command_required(self) -> None:
        """A subcommand must be given."""
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_unknown_type(self) -> None:
        """Only implemented algorithms can be requested."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["generate", "--type", "ed25519"])


class TestGenerate:
    """Tests for the generate command."""

    def test_secp256k1(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Printed keys decode and agree with the printed PeerId."""
        assert main(["generate"]) == 0

        fields = _parse(capsys.readouterr().out)
        private_key = unmarshal_private_key(bytes.fromhex(fields["private_key"]))
        public_key = unmarshal_public_key(bytes.fromhex(fields["public_key"]))

        assert fields["type"] == "SECP256K1"
        assert private_key.public_key() == public_key
        assert fields["peer_id"] == str(PeerId.from_public_key(public_key))
        assert fields["peer_id"].startswith("16Uiu2")

    def test_rsa(self, capsys: pytest.CaptureFixture[str]) -> None:
        """RSA keys of the requested size are printed."""
        assert main(["generate", "--type", "rsa", "--bits", "512"]) == 0

        fields = _parse(capsys.readouterr().out)
        assert fields["type"] == "RSA"
        assert fields["peer_id"].startswith("Qm")

    @pytest.mark.parametrize("value", ["big", "128"])
    def test_invalid_environment(
        self,
        value: str,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """A bad LIBP2P_CRYPTO_RSA_BITS exits with status 1 instead of a traceback."""
        monkeypatch.setenv(RSA_BITS_ENV_VAR, value)
        default_context.cache_clear()
        try:
            assert main(["generate"]) == 1
        finally:
            default_context.cache_clear()
        assert capsys.readouterr().out == ""

    def test_rsa_too_small(self, capsys: pytest.CaptureFixture[str]) -> None:
        """A refused size exits with status 1 and prints nothing."""
        assert main(["generate", "--type", "rsa", "--bits", "256"]) == 1
        assert capsys.readouterr().out == ""


class TestInspect:
    """Tests for the inspect command."""

    def test_inspect(self, capsys: pytest.CaptureFixture[str]) -> None:
        """A marshaled public key is decoded and its PeerId printed."""
        assert main(["generate"]) == 0
        generated = _parse(capsys.readouterr().out)

        assert main(["inspect", generated["public_key"]]) == 0
        fields = _parse(capsys.readouterr().out)

        assert fields["type"] == "SECP256K1"
        assert fields["raw_length"] == "33"
        assert fields["peer_id"] == generated["peer_id"]

    def test_invalid_hex(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Input that is not hex exits with status 1."""
        assert main(["inspect", "zz"]) == 1
        assert capsys.readouterr().out == ""

    def test_reserved_key_type(self) -> None:
        """A reserved algorithm exits with status 1."""
        assert main(["inspect", "08011200"]) == 1
