"""Data models for chains, transactions and raw JSON-RPC payloads."""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator

from chain_tx_tracker.core.errors import ErrorKind


def parse_quantity(value: Any) -> int | None:
    """
    Parse a JSON-RPC quantity into an integer.

    Parameters
    ----------
    value : Any
        Hex string (``0x1a``), decimal string, integer or None

    Returns
    -------
    int | None
        Parsed integer, None if value is None

    """
    if value is None or isinstance(value, int):
        return value
    if isinstance(value, str):
        if value.lower().startswith("0x"):
            return int(value, 16) if len(value) > 2 else 0
        return int(value)
    msg = f"Cannot parse quantity from {value!r}"
    raise ValueError(msg)


class TransactionDirection(StrEnum):
    """Direction of a transaction relative to the queried address."""

    SENT = "sent"
    RECEIVED = "received"


class TransactionStatus(StrEnum):
    """Confirmation status derived from the transaction receipt."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"


class NativeCurrency(BaseModel):
    """
    Native currency of a chain.

    Attributes
    ----------
    name : str
        Currency name (e.g., 'Ether')
    symbol : str
        Ticker symbol (e.g., 'ETH')
    decimals : int
        Decimal precision of the smallest unit

    """

    model_config = ConfigDict(frozen=True)

    name: str
    symbol: str
    decimals: int = Field(default=18, ge=0)


class ChainDescriptor(BaseModel):
    """
    Connection parameters for one chain.

    Attributes
    ----------
    chain_id : int
        Numeric chain identifier, unique across the registry
    name : str
        Display name
    rpc_url : str
        JSON-RPC endpoint; empty means registered but unusable
    block_explorer : str
        Block explorer base URL
    native_currency : NativeCurrency
        Native currency descriptor

    """

    model_config = ConfigDict(frozen=True)

    chain_id: PositiveInt
    name: str
    rpc_url: str = ""
    block_explorer: str = ""
    native_currency: NativeCurrency

    @property
    def is_configured(self) -> bool:
        """Whether an endpoint URL is available."""
        return bool(self.rpc_url.strip())

    def explorer_tx_url(self, tx_hash: str) -> str:
        """Build the block explorer link for a transaction."""
        if not self.block_explorer:
            return ""
        return f"{self.block_explorer.rstrip('/')}/tx/{tx_hash}"


class TransactionRecord(BaseModel):
    """
    Normalized transaction touching the queried address.

    Attributes
    ----------
    hash : str
        Transaction hash (unique within a chain)
    from_address : str
        Sender address
    to_address : str
        Receiver address, empty for contract creation
    value : str
        Transferred value in the smallest native unit
    direction : TransactionDirection
        Sent or received, relative to the queried address
    status : TransactionStatus
        Pending, confirmed or failed
    chain_id : int
        Originating chain identifier
    chain_name : str
        Originating chain display name
    block_number : int | None
        Containing block, None while pending
    gas_used : str | None
        Gas consumed, None while pending
    gas_price : str | None
        Gas price paid, None while pending
    timestamp : int
        Unix timestamp (seconds) of the containing block

    """

    model_config = ConfigDict(frozen=True)

    hash: str
    from_address: str
    to_address: str = ""
    value: str = "0"
    direction: TransactionDirection
    status: TransactionStatus
    chain_id: int
    chain_name: str
    block_number: int | None = None
    gas_used: str | None = None
    gas_price: str | None = None
    timestamp: int


class ChainScanResult(BaseModel):
    """
    Outcome of fetching one chain within a multi-chain request.

    Attributes
    ----------
    chain_id : int
        Requested chain identifier
    chain_name : str | None
        Display name when the chain is registered
    transactions : list[TransactionRecord]
        Transactions found, empty on failure
    error : ErrorKind | None
        Failure category, None on success
    error_message : str | None
        Failure description, None on success

    """

    chain_id: int
    chain_name: str | None = None
    transactions: list[TransactionRecord] = Field(default_factory=list)
    error: ErrorKind | None = None
    error_message: str | None = None

    @property
    def ok(self) -> bool:
        """Whether the chain was fetched without error."""
        return self.error is None


class BlockTransaction(BaseModel):
    """Transaction object embedded in an ``eth_getBlockByNumber`` response."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    hash: str
    from_address: str = Field(default="", alias="from")
    to_address: str | None = Field(default=None, alias="to")
    value: int = 0
    gas_price: int | None = Field(default=None, alias="gasPrice")

    @field_validator("value", "gas_price", mode="before")
    @classmethod
    def _parse_quantity(cls, value: Any) -> int | None:
        return parse_quantity(value)


class Block(BaseModel):
    """Block with its full transaction objects."""

    model_config = ConfigDict(extra="ignore")

    number: int
    timestamp: int
    transactions: list[BlockTransaction] = Field(default_factory=list)

    @field_validator("number", "timestamp", mode="before")
    @classmethod
    def _parse_quantity(cls, value: Any) -> int | None:
        return parse_quantity(value)

    @field_validator("transactions", mode="before")
    @classmethod
    def _only_full_transactions(cls, value: Any) -> list:
        # Hash-only entries appear when the node ignores the full-transactions flag
        return [tx for tx in value or [] if isinstance(tx, dict | BlockTransaction)]


class TransactionReceipt(BaseModel):
    """Post-execution outcome of a mined transaction."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    transaction_hash: str = Field(alias="transactionHash")
    status: int | None = None
    gas_used: int | None = Field(default=None, alias="gasUsed")
    effective_gas_price: int | None = Field(default=None, alias="effectiveGasPrice")

    @field_validator("status", "gas_used", "effective_gas_price", mode="before")
    @classmethod
    def _parse_quantity(cls, value: Any) -> int | None:
        return parse_quantity(value)

    @property
    def succeeded(self) -> bool:
        """Receipts without a status field predate status codes and were mined."""
        return self.status is None or self.status == 1
