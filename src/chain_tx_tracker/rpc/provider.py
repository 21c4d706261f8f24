"""Async JSON-RPC client and per-chain client pool."""

import itertools
import logging
from typing import Any, Protocol

import httpx

from chain_tx_tracker.core.errors import (
    RATE_LIMIT_RPC_CODES,
    ConfigurationError,
    RateLimitError,
    RPCResponseError,
    TransportError,
    UnsupportedChainError,
    is_rate_limit_message,
)
from chain_tx_tracker.core.models import Block, ChainDescriptor, TransactionReceipt, parse_quantity
from chain_tx_tracker.core.registry import ChainRegistry

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class ChainClient(Protocol):
    """
    Read-only chain queries needed by the block scanner.

    Attributes
    ----------
    chain : ChainDescriptor
        Chain the client talks to

    """

    chain: ChainDescriptor

    async def current_block_height(self) -> int:
        """Latest block number."""
        ...

    async def get_block_with_transactions(self, number: int) -> Block | None:
        """Block with full transactions, None if the node does not know it."""
        ...

    async def get_transaction_receipt(self, tx_hash: str) -> TransactionReceipt | None:
        """Receipt of a transaction, None while it is not mined."""
        ...


class JsonRpcClient:
    """
    JSON-RPC client for one chain over ``httpx.AsyncClient``.

    Parameters
    ----------
    chain : ChainDescriptor
        Chain to connect to
    timeout : float
        Request timeout in seconds
    transport : httpx.AsyncBaseTransport | None
        Custom transport (tests use ``httpx.MockTransport``)

    Raises
    ------
    ConfigurationError
        If the chain has no endpoint URL

    """

    def __init__(
        self,
        chain: ChainDescriptor,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not chain.is_configured:
            msg = f"RPC URL not configured for {chain.name}"
            raise ConfigurationError(msg, chain_id=chain.chain_id)

        self.chain = chain
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._id_counter = itertools.count(1)

    async def make_request(self, method: str, params: list[Any]) -> Any:
        """
        Make a single JSON-RPC request.

        Parameters
        ----------
        method : str
            RPC method name (e.g., 'eth_blockNumber')
        params : list[Any]
            Method parameters

        Returns
        -------
        Any
            The ``result`` member of the response

        Raises
        ------
        RateLimitError
            If the endpoint throttles the request
        TransportError
            If the endpoint cannot be reached or answers with an HTTP error
        ConfigurationError
            If the configured endpoint URL is malformed
        RPCResponseError
            If the endpoint answers with a JSON-RPC error or garbage

        """
        chain_id = self.chain.chain_id
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._id_counter),
            "method": method,
            "params": params,
        }

        try:
            response = await self.client.post(self.chain.rpc_url, json=payload)
        except httpx.TimeoutException as e:
            msg = f"Request to {self.chain.name} timed out: {e}"
            raise TransportError(msg, chain_id=chain_id) from e
        except httpx.HTTPError as e:
            msg = f"Network connection to {self.chain.name} failed: {e}"
            raise TransportError(msg, chain_id=chain_id) from e
        except httpx.InvalidURL as e:
            msg = f"Invalid RPC URL configured for {self.chain.name}: {e}"
            raise ConfigurationError(msg, chain_id=chain_id) from e

        if response.status_code == 429:
            raise RateLimitError(chain_id=chain_id)

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            msg = f"HTTP error {e.response.status_code} from {self.chain.name}"
            raise TransportError(msg, status_code=e.response.status_code, chain_id=chain_id) from e

        try:
            data = response.json()
        except ValueError as e:
            msg = f"Invalid JSON-RPC response from {self.chain.name}"
            raise RPCResponseError(msg, chain_id=chain_id) from e

        error = data.get("error") if isinstance(data, dict) else None
        if error:
            code = error.get("code") if isinstance(error, dict) else None
            message = error.get("message", "") if isinstance(error, dict) else str(error)
            if code in RATE_LIMIT_RPC_CODES or is_rate_limit_message(message):
                raise RateLimitError(chain_id=chain_id)
            msg = f"{method} failed on {self.chain.name}: {message}"
            raise RPCResponseError(msg, code=code, chain_id=chain_id)

        if not isinstance(data, dict):
            msg = f"Invalid JSON-RPC response from {self.chain.name}"
            raise RPCResponseError(msg, chain_id=chain_id)

        return data.get("result")

    async def current_block_height(self) -> int:
        """Get the latest block number."""
        result = await self.make_request("eth_blockNumber", [])
        msg = f"Invalid block number from {self.chain.name}: {result!r}"
        try:
            height = parse_quantity(result)
        except (TypeError, ValueError) as e:
            raise RPCResponseError(msg, chain_id=self.chain.chain_id) from e
        if height is None:
            raise RPCResponseError(msg, chain_id=self.chain.chain_id)
        return height

    async def get_block_with_transactions(self, number: int) -> Block | None:
        """
        Get a block with its full transaction objects.

        Parameters
        ----------
        number : int
            Block number

        Returns
        -------
        Block | None
            Parsed block, None if the node reports no such block

        """
        result = await self.make_request("eth_getBlockByNumber", [hex(number), True])
        if result is None:
            return None
        return Block.model_validate(result)

    async def get_transaction_receipt(self, tx_hash: str) -> TransactionReceipt | None:
        """
        Get a transaction receipt.

        Parameters
        ----------
        tx_hash : str
            Transaction hash

        Returns
        -------
        TransactionReceipt | None
            Parsed receipt, None while the transaction is not mined

        """
        result = await self.make_request("eth_getTransactionReceipt", [tx_hash])
        if result is None:
            return None
        return TransactionReceipt.model_validate(result)

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> "JsonRpcClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Async context manager exit."""
        await self.aclose()


class ChainClientPool:
    """
    Lazily constructs and reuses one JSON-RPC client per chain.

    Parameters
    ----------
    registry : ChainRegistry
        Registry used to resolve endpoints
    timeout : float
        Request timeout in seconds for every client
    transport : httpx.AsyncBaseTransport | None
        Custom transport shared by every client

    """

    def __init__(
        self,
        registry: ChainRegistry,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.registry = registry
        self.timeout = timeout
        self.transport = transport
        self._clients: dict[int, JsonRpcClient] = {}

    def get(self, chain_id: int) -> JsonRpcClient:
        """
        Get the client for a chain, creating it on first use.

        Raises
        ------
        UnsupportedChainError
            If the chain is not registered
        ConfigurationError
            If the chain has no endpoint URL

        """
        client = self._clients.get(chain_id)
        if client is not None:
            return client

        chain = self.registry.describe(chain_id)
        if chain is None:
            raise UnsupportedChainError(chain_id)

        client = JsonRpcClient(chain, timeout=self.timeout, transport=self.transport)
        self._clients[chain_id] = client
        logger.debug("Created RPC client for %s (%d)", chain.name, chain_id)
        return client

    async def aclose(self) -> None:
        """Close every client created so far."""
        clients = list(self._clients.values())
        self._clients.clear()
        for client in clients:
            await client.aclose()

    async def __aenter__(self) -> "ChainClientPool":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Async context manager exit."""
        await self.aclose()
