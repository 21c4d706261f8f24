"""Tests for the command-line interface."""

import pytest
from conftest import OTHER_ADDRESS, TARGET_ADDRESS
from typer.testing import CliRunner

from chain_tx_tracker.cli import main
from chain_tx_tracker.core.errors import ErrorKind
from chain_tx_tracker.core.models import ChainScanResult, TransactionDirection, TransactionRecord, TransactionStatus
from chain_tx_tracker.data.preferences import HOME_ENV, PreferenceStore

runner = CliRunner()


@pytest.fixture(autouse=True)
def environment(tmp_path, monkeypatch):
    """Isolated preferences and only Ethereum configured."""
    monkeypatch.setenv(HOME_ENV, str(tmp_path))
    monkeypatch.setenv("ALCHEMY_ETHEREUM_URL", "https://eth.rpc.example")
    monkeypatch.delenv("ALCHEMY_POLYGON_URL", raising=False)
    monkeypatch.delenv("ALCHEMY_ARBITRUM_URL", raising=False)
    monkeypatch.delenv("CHAIN_TX_TRACKER_CONFIG", raising=False)


@pytest.fixture
def fetched(monkeypatch):
    """Replace network fetching with canned per-chain results."""
    calls = []
    results = [
        ChainScanResult(
            chain_id=1,
            chain_name="Ethereum",
            transactions=[
                TransactionRecord(
                    hash="0xfeed",
                    from_address=OTHER_ADDRESS,
                    to_address=TARGET_ADDRESS,
                    value=str(10**18),
                    direction=TransactionDirection.RECEIVED,
                    status=TransactionStatus.CONFIRMED,
                    chain_id=1,
                    chain_name="Ethereum",
                    block_number=10,
                    gas_used="21000",
                    gas_price="20",
                    timestamp=1_700_000_000,
                )
            ],
        ),
        ChainScanResult(
            chain_id=137,
            chain_name="Polygon",
            error=ErrorKind.CONFIGURATION,
            error_message="RPC URL not configured for Polygon",
        ),
    ]

    async def fake_fetch(registry, address, chain_ids, limit):
        calls.append((address, chain_ids, limit))
        return [result for result in results if result.chain_id in chain_ids]

    monkeypatch.setattr(main, "_fetch", fake_fetch)
    return calls


def test_list_chains():
    result = runner.invoke(main.app, ["list-chains"])

    assert result.exit_code == 0
    assert "Ethereum" in result.output
    assert "Polygon" in result.output
    assert "No RPC URL" in result.output


def test_select_chain_persists():
    result = runner.invoke(main.app, ["select-chain", "137"])

    assert result.exit_code == 0
    assert "Polygon" in result.output
    assert PreferenceStore().get_selected_chain() == 137


def test_select_unknown_chain_fails():
    result = runner.invoke(main.app, ["select-chain", "5"])

    assert result.exit_code == 1
    assert "Unsupported chain" in result.output


def test_invalid_address_is_reported():
    result = runner.invoke(main.app, ["transactions", "not-an-address"])

    assert result.exit_code == 1
    assert "Invalid wallet address" in result.output


def test_transactions_json(fetched):
    result = runner.invoke(main.app, ["transactions", TARGET_ADDRESS, "-c", "1", "-c", "137", "--format", "json"])

    assert result.exit_code == 0
    assert fetched == [(TARGET_ADDRESS, [1, 137], 10)]
    assert '"hash": "0xfeed"' in result.output
    assert '"direction": "received"' in result.output
    assert '"error": "configuration"' in result.output


def test_transactions_table_warns_about_skipped_chains(fetched):
    result = runner.invoke(main.app, ["transactions", TARGET_ADDRESS, "--all", "--limit", "5"])

    assert result.exit_code == 0
    assert fetched == [(TARGET_ADDRESS, [1, 137, 42161], 5)]
    assert "Skipped Polygon" in result.output


def test_transactions_uses_selected_chain(fetched):
    PreferenceStore().set_selected_chain(1)

    result = runner.invoke(main.app, ["transactions", TARGET_ADDRESS])

    assert result.exit_code == 0
    assert fetched[0][1] == [1]


def test_single_failing_chain_exits_with_error(fetched):
    result = runner.invoke(main.app, ["transactions", TARGET_ADDRESS, "-c", "137"])

    assert result.exit_code == 1
    assert "RPC URL not configured for Polygon" in result.output
