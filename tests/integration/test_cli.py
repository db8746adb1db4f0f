"""
CLI integration tests using Click's test runner.

Tests verify that the CLI commands work end-to-end via the Click
CliRunner, without requiring network access: the keyfile wallet only
touches an RPC endpoint to send transactions, and contract reads are
patched at ``formicarium.market``.
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner
from dotenv import dotenv_values

from formicarium.cli import cli
from formicarium.wallet.keyfile import generate_key, save_private_key

OWNER = "0x9999999999999999999999999999999999999999"


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def wallet(formicarium_home: Path) -> tuple[str, str]:
    """Generate and save a wallet to the temp formicarium home."""
    private_key, address = generate_key()
    save_private_key(private_key)
    return private_key, address


def _env(home: Path) -> dict:
    return dotenv_values(home / ".env")


class TestVersionAndInfo:
    """Basic commands that don't require a wallet."""

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.3.0" in result.output

    def test_info_without_wallet(self, runner: CliRunner, formicarium_home: Path) -> None:
        result = runner.invoke(cli, ["info"])
        assert result.exit_code == 0
        assert "not initialized" in result.output
        assert "Base Sepolia Testnet" in result.output

    def test_network_list(self, runner: CliRunner, formicarium_home: Path) -> None:
        result = runner.invoke(cli, ["network", "list"])
        assert result.exit_code == 0
        for key in ("base-testnet", "base-mainnet", "arbitrum-sepolia"):
            assert key in result.output

    def test_network_show(self, runner: CliRunner, formicarium_home: Path) -> None:
        result = runner.invoke(cli, ["network", "show"])
        assert result.exit_code == 0
        assert "84532 (0x14a34)" in result.output
        assert "https://sepolia.base.org" in result.output


class TestWallet:
    """wallet init / connect / disconnect / whoami."""

    def test_init(self, runner: CliRunner, formicarium_home: Path) -> None:
        result = runner.invoke(cli, ["wallet", "init"])
        assert result.exit_code == 0
        assert "Wallet created!" in result.output
        assert _env(formicarium_home)["PRIVATE_KEY"].startswith("0x")

    def test_init_keeps_existing(self, runner: CliRunner, wallet: tuple[str, str]) -> None:
        result = runner.invoke(cli, ["wallet", "init"])
        assert result.exit_code == 0
        assert f"Wallet already exists: {wallet[1]}" in result.output

    def test_init_force_forgets_connected_address(
        self, runner: CliRunner, wallet: tuple[str, str], formicarium_home: Path
    ) -> None:
        old_key, old_address = wallet
        runner.invoke(cli, ["-y", "connect"])
        assert _env(formicarium_home)["WALLET_ADDRESS"] == old_address

        result = runner.invoke(cli, ["wallet", "init", "--force"])
        assert result.exit_code == 0
        assert "Wallet created!" in result.output

        env = _env(formicarium_home)
        assert env["PRIVATE_KEY"] != old_key
        assert "WALLET_ADDRESS" not in env

        result = runner.invoke(cli, ["whoami"])
        assert result.exit_code == 1
        assert "Wallet not connected." in result.output

    def test_connect_without_wallet(self, runner: CliRunner, formicarium_home: Path) -> None:
        result = runner.invoke(cli, ["connect"])
        assert result.exit_code == 1
        assert "No wallet is configured" in result.output

    def test_connect(self, runner: CliRunner, wallet: tuple[str, str], formicarium_home: Path) -> None:
        _, address = wallet
        result = runner.invoke(cli, ["-y", "connect"])
        assert result.exit_code == 0
        assert "Wallet connected!" in result.output
        assert f"{address[:6]}...{address[-4:]}" in result.output
        assert _env(formicarium_home)["WALLET_ADDRESS"] == address

        result = runner.invoke(cli, ["whoami"])
        assert result.exit_code == 0
        assert f"Address: {address}" in result.output
        assert f"https://sepolia.basescan.org/address/{address}" in result.output

    def test_connect_rejected(self, runner: CliRunner, wallet: tuple[str, str], formicarium_home: Path) -> None:
        result = runner.invoke(cli, ["connect"], input="n\n")
        assert result.exit_code == 1
        assert "Failed to connect wallet." in result.output
        assert "WALLET_ADDRESS" not in _env(formicarium_home)

    def test_disconnect(self, runner: CliRunner, wallet: tuple[str, str], formicarium_home: Path) -> None:
        runner.invoke(cli, ["-y", "connect"])
        result = runner.invoke(cli, ["disconnect"])
        assert result.exit_code == 0
        assert "WALLET_ADDRESS" not in _env(formicarium_home)

        result = runner.invoke(cli, ["whoami"])
        assert result.exit_code == 1
        assert "Wallet not connected." in result.output

    def test_whoami_without_wallet(self, runner: CliRunner, formicarium_home: Path) -> None:
        result = runner.invoke(cli, ["whoami"])
        assert result.exit_code == 1
        assert "No wallet found." in result.output


class TestNetworkSwitch:
    """network switch adds unknown chains to the wallet first."""

    def test_switch_adds_chain(self, runner: CliRunner, wallet: tuple[str, str], formicarium_home: Path) -> None:
        result = runner.invoke(cli, ["-y", "network", "switch", "base-mainnet"])
        assert result.exit_code == 0
        assert "Switched to Base Mainnet" in result.output

        env = _env(formicarium_home)
        assert env["SELECTED_NETWORK"] == "base-mainnet"
        assert env["WALLET_CHAIN_ID"] == "8453"
        assert "8453|https://mainnet.base.org" in env["WALLET_CHAINS"]

        # The next invocation syncs with the wallet's chain
        result = runner.invoke(cli, ["network", "show"])
        assert "Base Mainnet" in result.output

    def test_switch_rejected(self, runner: CliRunner, wallet: tuple[str, str], formicarium_home: Path) -> None:
        result = runner.invoke(cli, ["network", "switch", "arbitrum-sepolia"], input="n\n")
        assert result.exit_code == 1
        assert "Failed to switch to Arbitrum Sepolia Testnet." in result.output
        assert _env(formicarium_home).get("SELECTED_NETWORK") != "arbitrum-sepolia"

    def test_switch_without_wallet(self, runner: CliRunner, formicarium_home: Path) -> None:
        result = runner.invoke(cli, ["network", "switch", "base-mainnet"])
        assert result.exit_code == 1
        assert "No wallet is configured" in result.output

    def test_unknown_network_key(self, runner: CliRunner, formicarium_home: Path) -> None:
        result = runner.invoke(cli, ["network", "switch", "polygon"])
        assert result.exit_code == 2

    def test_sync_follows_wallet_chain(self, runner: CliRunner, wallet: tuple[str, str], monkeypatch) -> None:
        monkeypatch.setenv("WALLET_CHAIN_ID", "421614")
        monkeypatch.setenv("WALLET_CHAINS", "421614|https://sepolia-rollup.arbitrum.io/rpc")
        result = runner.invoke(cli, ["network", "sync"])
        assert result.exit_code == 0
        assert "arbitrum-sepolia" in result.output


class TestMarketQueries:
    """Reads with the chain patched out."""

    def test_owner(self, runner: CliRunner, formicarium_home: Path) -> None:
        with patch("formicarium.market.read_contract", return_value=OWNER):
            result = runner.invoke(cli, ["owner"])
        assert result.exit_code == 0
        assert OWNER in result.output

    def test_printers(self, runner: CliRunner, formicarium_home: Path) -> None:
        raw = [("p-1", OWNER, "Prusa MK4", 10**18, True)]
        with patch("formicarium.market.read_contract", return_value=raw):
            result = runner.invoke(cli, ["printers", "--network", "base-mainnet"])
        assert result.exit_code == 0
        assert "=== Printers (Base Mainnet) ===" in result.output
        assert "Prusa MK4" in result.output
        assert "available" in result.output

    def test_no_printers(self, runner: CliRunner, formicarium_home: Path) -> None:
        with patch("formicarium.market.read_contract", return_value=[]):
            result = runner.invoke(cli, ["printers"])
        assert "No printers registered." in result.output

    def test_printers_failure(self, runner: CliRunner, formicarium_home: Path) -> None:
        with patch("formicarium.market.read_contract", side_effect=RuntimeError("down")):
            result = runner.invoke(cli, ["printers"])
        assert result.exit_code == 1
        assert "Failed to fetch printers" in result.output

    def test_orders(self, runner: CliRunner, wallet: tuple[str, str]) -> None:
        _, address = wallet
        raw = [("o-1", "p-1", address, 10**18, 10**18, 7200, 1_700_000_000, 0)]
        with patch("formicarium.market.read_contract", return_value=raw) as read:
            result = runner.invoke(cli, ["orders"])
        assert result.exit_code == 0
        assert "o-1" in result.output
        assert "pending" in result.output
        assert read.call_args.kwargs["from_address"] == address

    def test_balance(self, runner: CliRunner, formicarium_home: Path) -> None:
        with patch("formicarium.market.get_balance", return_value=2 * 10**18), \
                patch("formicarium.market.read_contract", return_value=5 * 10**17):
            result = runner.invoke(cli, ["balance", "--address", OWNER])
        assert result.exit_code == 0
        assert "2 ETH" in result.output
        assert "0.5" in result.output

    def test_balance_needs_address(self, runner: CliRunner, formicarium_home: Path) -> None:
        result = runner.invoke(cli, ["balance"])
        assert result.exit_code == 1
        assert "No address given" in result.output


class TestOrderPlace:
    """order place delegates to market.place_order."""

    ARGS = [
        "order", "place",
        "--order-id", "order-1",
        "--printer-id", "p-1",
        "--min-price", "1",
        "--actual-price", "1.5",
        "--duration", "2",
    ]

    def test_place(self, runner: CliRunner, wallet: tuple[str, str]) -> None:
        tx_hash = "0x" + "ab" * 32
        with patch("formicarium.market.place_order", return_value=tx_hash) as place:
            result = runner.invoke(cli, ["-y", *self.ARGS])

        assert result.exit_code == 0
        assert "Order placed!" in result.output
        assert f"https://sepolia.basescan.org/tx/{tx_hash}" in result.output

        network, _ = place.call_args.args
        assert network == "base-testnet"
        assert place.call_args.kwargs["order_id"] == "order-1"
        assert str(place.call_args.kwargs["actual_price"]) == "1.5"
        assert place.call_args.kwargs["duration"] == 2

    def test_place_failure(self, runner: CliRunner, wallet: tuple[str, str]) -> None:
        with patch("formicarium.market.place_order", return_value=None):
            result = runner.invoke(cli, ["-y", *self.ARGS])
        assert result.exit_code == 1
        assert "Order failed." in result.output

    def test_place_without_wallet(self, runner: CliRunner, formicarium_home: Path) -> None:
        result = runner.invoke(cli, self.ARGS)
        assert result.exit_code == 5
        assert "No wallet found." in result.output

    def test_negative_price_rejected(self, runner: CliRunner, wallet: tuple[str, str]) -> None:
        args = [a if a != "1.5" else "-1" for a in self.ARGS]
        result = runner.invoke(cli, args)
        assert result.exit_code == 2

    def test_prices_passed_exactly(self, runner: CliRunner, wallet: tuple[str, str]) -> None:
        args = [a if a != "1.5" else "123456789.123456789123" for a in self.ARGS]
        with patch("formicarium.market.place_order", return_value="0x" + "ab" * 32) as place:
            result = runner.invoke(cli, ["-y", *args])

        assert result.exit_code == 0
        assert place.call_args.kwargs["actual_price"] == Decimal("123456789.123456789123")
        assert place.call_args.kwargs["min_price"] == Decimal("1")
        assert "123456789.123456789123" in result.output

    @pytest.mark.parametrize("price", ["0.0000000000000000001", "NaN", "one"])
    def test_unrepresentable_price_rejected(self, runner: CliRunner, wallet: tuple[str, str], price: str) -> None:
        args = [a if a != "1.5" else price for a in self.ARGS]
        with patch("formicarium.market.place_order") as place:
            result = runner.invoke(cli, ["-y", *args])
        assert result.exit_code == 2
        place.assert_not_called()


class TestOrderAllowance:
    """order allowance reads the payment token allowance for the marketplace."""

    def test_explicit_address(self, runner: CliRunner, formicarium_home: Path) -> None:
        with patch("formicarium.market.read_contract", return_value=25 * 10**17) as read:
            result = runner.invoke(cli, ["order", "allowance", "--address", OWNER])

        assert result.exit_code == 0
        assert OWNER in result.output
        assert "2.5" in result.output
        address, function_name = read.call_args.args
        assert function_name == "allowance"
        assert read.call_args.kwargs["args"][0] == OWNER

    def test_connected_wallet(self, runner: CliRunner, wallet: tuple[str, str]) -> None:
        _, address = wallet
        runner.invoke(cli, ["-y", "connect"])
        with patch("formicarium.market.read_contract", return_value=0) as read:
            result = runner.invoke(cli, ["order", "allowance"])

        assert result.exit_code == 0
        assert address in result.output
        assert read.call_args.kwargs["args"][0] == address

    def test_no_address(self, runner: CliRunner, formicarium_home: Path) -> None:
        result = runner.invoke(cli, ["order", "allowance"])
        assert result.exit_code == 1
        assert "No address given" in result.output

    def test_read_failure(self, runner: CliRunner, formicarium_home: Path) -> None:
        with patch("formicarium.market.read_contract", side_effect=RuntimeError("down")):
            result = runner.invoke(cli, ["order", "allowance", "--address", OWNER])
        assert result.exit_code == 1
        assert "Failed to fetch allowance" in result.output
