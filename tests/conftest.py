"""Pytest configuration and fakes for chain-tx-tracker tests."""

import pytest

from chain_tx_tracker.core.errors import TrackerError, UnsupportedChainError
from chain_tx_tracker.core.models import Block, ChainDescriptor, NativeCurrency, TransactionReceipt
from chain_tx_tracker.core.registry import ChainRegistry
from chain_tx_tracker.rpc.retry import RetryConfig, RetryExecutor

TARGET_ADDRESS = "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"  # vitalik.eth
OTHER_ADDRESS = "0x1111111111111111111111111111111111111111"
THIRD_ADDRESS = "0x2222222222222222222222222222222222222222"

ETH = NativeCurrency(name="Ether", symbol="ETH", decimals=18)


def make_chain(chain_id: int, name: str, rpc_url: str = "https://rpc.example") -> ChainDescriptor:
    """Build a chain descriptor for tests."""
    return ChainDescriptor(
        chain_id=chain_id,
        name=name,
        rpc_url=rpc_url,
        block_explorer=f"https://explorer.{name.lower()}.example",
        native_currency=ETH,
    )


def make_tx(tx_hash: str, sender: str, receiver: str | None, value: int = 10**18, gas_price: int = 20) -> dict:
    """Build a raw block transaction as returned by eth_getBlockByNumber."""
    return {"hash": tx_hash, "from": sender, "to": receiver, "value": hex(value), "gasPrice": hex(gas_price)}


class FakeChainClient:
    """
    In-memory chain client.

    Parameters
    ----------
    chain : ChainDescriptor
        Chain served by the client
    height : int
        Current block height
    blocks : dict[int, dict] | None
        Block number to raw block overrides; other blocks are empty
    receipts : dict[str, dict] | None
        Transaction hash to raw receipt; missing hashes are pending

    """

    def __init__(
        self,
        chain: ChainDescriptor,
        height: int = 100,
        blocks: dict[int, dict] | None = None,
        receipts: dict[str, dict] | None = None,
    ) -> None:
        self.chain = chain
        self.height = height
        self.blocks = blocks or {}
        self.receipts = receipts or {}
        self.height_error: Exception | None = None
        self.block_error: Exception | None = None
        self.receipt_error: Exception | None = None
        self.height_calls = 0
        self.block_calls: list[int] = []
        self.receipt_calls: list[str] = []

    async def current_block_height(self) -> int:
        self.height_calls += 1
        if self.height_error:
            raise self.height_error
        return self.height

    async def get_block_with_transactions(self, number: int) -> Block | None:
        self.block_calls.append(number)
        if self.block_error:
            raise self.block_error
        if number > self.height:
            return None
        raw = self.blocks.get(number, {"number": hex(number), "timestamp": hex(1_700_000_000 + number)})
        return Block.model_validate({"transactions": [], **raw})

    async def get_transaction_receipt(self, tx_hash: str) -> TransactionReceipt | None:
        self.receipt_calls.append(tx_hash)
        if self.receipt_error:
            raise self.receipt_error
        raw = self.receipts.get(tx_hash)
        return TransactionReceipt.model_validate(raw) if raw else None


class FakeClientPool:
    """Client source backed by a dict of fake clients."""

    def __init__(self, registry: ChainRegistry, clients: dict[int, FakeChainClient], errors=None) -> None:
        self.registry = registry
        self.clients = clients
        self.errors: dict[int, TrackerError] = errors or {}
        self.closed = False

    def get(self, chain_id: int) -> FakeChainClient:
        if chain_id in self.errors:
            raise self.errors[chain_id]
        if chain_id not in self.registry:
            raise UnsupportedChainError(chain_id)
        return self.clients[chain_id]

    async def aclose(self) -> None:
        self.closed = True


class RecordingSleep:
    """Async sleep replacement recording requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def retry(sleep: RecordingSleep) -> RetryExecutor:
    return RetryExecutor(RetryConfig(max_attempts=3, base_delay=1.0), sleep=sleep)


@pytest.fixture
def ethereum() -> ChainDescriptor:
    return make_chain(1, "Ethereum")


@pytest.fixture
def registry() -> ChainRegistry:
    return ChainRegistry(
        [
            make_chain(1, "Ethereum"),
            make_chain(137, "Polygon"),
            make_chain(42161, "Arbitrum"),
            make_chain(999, "Unconfigured", rpc_url=""),
        ]
    )
