"""Tests for Pydantic data models."""

import pydantic
import pytest
from conftest import TARGET_ADDRESS, make_chain

from chain_tx_tracker.core.errors import ErrorKind
from chain_tx_tracker.core.models import (
    Block,
    ChainDescriptor,
    ChainScanResult,
    NativeCurrency,
    TransactionDirection,
    TransactionReceipt,
    TransactionRecord,
    TransactionStatus,
    parse_quantity,
)


def test_parse_quantity():
    assert parse_quantity("0x0") == 0
    assert parse_quantity("0x") == 0
    assert parse_quantity("0xff") == 255
    assert parse_quantity("42") == 42
    assert parse_quantity(7) == 7
    assert parse_quantity(None) is None

    with pytest.raises(ValueError):
        parse_quantity(1.5)


def test_chain_descriptor():
    chain = make_chain(1, "Ethereum")

    assert chain.is_configured
    assert chain.explorer_tx_url("0xabc") == "https://explorer.ethereum.example/tx/0xabc"
    assert not make_chain(2, "Empty", rpc_url="  ").is_configured


def test_chain_descriptor_without_explorer():
    chain = ChainDescriptor(chain_id=5, name="Devnet", native_currency=NativeCurrency(name="Ether", symbol="ETH"))

    assert chain.explorer_tx_url("0xabc") == ""
    assert chain.native_currency.decimals == 18


def test_chain_descriptor_requires_positive_id():
    with pytest.raises(pydantic.ValidationError):
        make_chain(0, "Zero")


def test_transaction_record_is_immutable():
    record = TransactionRecord(
        hash="0xabc",
        from_address=TARGET_ADDRESS,
        direction=TransactionDirection.SENT,
        status=TransactionStatus.PENDING,
        chain_id=1,
        chain_name="Ethereum",
        timestamp=1_700_000_000,
    )

    assert record.to_address == ""
    assert record.value == "0"
    assert record.block_number is None
    with pytest.raises(pydantic.ValidationError):
        record.status = TransactionStatus.CONFIRMED


def test_block_parses_hex_and_skips_hash_only_transactions():
    block = Block.model_validate(
        {
            "number": "0x1b4",
            "timestamp": "0x5f5e100",
            "transactions": [
                "0xhashonly",
                {"hash": "0xfull", "from": TARGET_ADDRESS, "to": None, "value": "0xde0b6b3a7640000"},
            ],
        }
    )

    assert block.number == 436
    assert block.timestamp == 100_000_000
    [tx] = block.transactions
    assert tx.hash == "0xfull"
    assert tx.value == 10**18
    assert tx.gas_price is None


def test_receipt_status():
    assert TransactionReceipt.model_validate({"transactionHash": "0x1", "status": "0x1"}).succeeded
    assert not TransactionReceipt.model_validate({"transactionHash": "0x1", "status": "0x0"}).succeeded
    # Receipts from before status codes existed were mined successfully
    assert TransactionReceipt.model_validate({"transactionHash": "0x1", "root": "0xabc"}).succeeded


def test_chain_scan_result():
    ok = ChainScanResult(chain_id=1, chain_name="Ethereum")
    failed = ChainScanResult(chain_id=999, error=ErrorKind.CONFIGURATION, error_message="no RPC URL")

    assert ok.ok
    assert ok.transactions == []
    assert not failed.ok


def test_enum_values():
    assert TransactionDirection.SENT.value == "sent"
    assert TransactionDirection.RECEIVED.value == "received"
    assert TransactionStatus.PENDING.value == "pending"
    assert TransactionStatus.CONFIRMED.value == "confirmed"
    assert TransactionStatus.FAILED.value == "failed"
