"""Transaction aggregator orchestrating discovery across chains."""

import asyncio
import logging
from collections.abc import Iterable
from functools import partial
from operator import attrgetter
from typing import Protocol

from eth_utils import is_address

from chain_tx_tracker.core.errors import ErrorKind, TrackerError, ValidationError, get_error_message
from chain_tx_tracker.core.models import ChainScanResult, TransactionRecord
from chain_tx_tracker.core.registry import ChainRegistry
from chain_tx_tracker.core.scanner import BlockScanner
from chain_tx_tracker.rpc.cache import TransactionCache
from chain_tx_tracker.rpc.provider import ChainClient, ChainClientPool
from chain_tx_tracker.rpc.retry import RetryExecutor

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10


class ClientSource(Protocol):
    """Anything that hands out a chain client by chain identifier."""

    def get(self, chain_id: int) -> ChainClient:
        """Return the client for a chain, raising TrackerError if unusable."""
        ...

    async def aclose(self) -> None:
        """Release network resources."""
        ...


def validate_address(address: str) -> str:
    """
    Check that ``address`` is a well-formed account address.

    Raises
    ------
    ValidationError
        If the address is malformed

    """
    if not isinstance(address, str) or not is_address(address):
        msg = "Invalid wallet address"
        raise ValidationError(msg)
    return address


def validate_limit(limit: int) -> int:
    """Check that ``limit`` is a positive integer."""
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        msg = f"Limit must be a positive integer, got {limit!r}"
        raise ValidationError(msg)
    return limit


def merge_results(results: Iterable[ChainScanResult], limit: int) -> list[TransactionRecord]:
    """
    Merge per-chain results into one list, newest first.

    The sort is stable, so equal timestamps keep the order of ``results``.

    Parameters
    ----------
    results : Iterable[ChainScanResult]
        Per-chain results in request order
    limit : int
        Maximum number of transactions to return

    Returns
    -------
    list[TransactionRecord]
        Merged transactions

    """
    merged = [tx for result in results for tx in result.transactions]
    merged.sort(key=attrgetter("timestamp"), reverse=True)
    return merged[:limit]


class TransactionAggregator:
    """
    Fronts the discovery engine for one or more chains.

    Workflow per chain:
    1. Return the cached scan if it has not expired
    2. Otherwise scan recent blocks through the retry executor
    3. Cache the full scan result unless the block walk degraded, then truncate

    Chains are fetched concurrently and failures stay isolated to their chain.

    Parameters
    ----------
    registry : ChainRegistry
        Supported chains
    clients : ClientSource | None
        Source of chain clients. Uses a ChainClientPool over registry if None.
    scanner : BlockScanner | None
        Block scanner. Uses one sharing ``retry`` if None.
    cache : TransactionCache | None
        Result cache owned by this aggregator
    retry : RetryExecutor | None
        Retry executor around each chain scan

    """

    def __init__(
        self,
        registry: ChainRegistry,
        clients: ClientSource | None = None,
        scanner: BlockScanner | None = None,
        cache: TransactionCache | None = None,
        retry: RetryExecutor | None = None,
    ) -> None:
        self.registry = registry
        self.clients = clients or ChainClientPool(registry)
        self.retry = retry or RetryExecutor()
        self.scanner = scanner or BlockScanner(retry=self.retry)
        # An empty cache is falsy
        self.cache = cache if cache is not None else TransactionCache()

    async def fetch(
        self,
        address: str,
        chain_ids: Iterable[int] | None = None,
        limit: int = DEFAULT_LIMIT,
    ) -> list[TransactionRecord]:
        """
        Get the most recent transactions of an address across chains.

        Parameters
        ----------
        address : str
            Account address
        chain_ids : Iterable[int] | None
            Chains to query, every registered chain if None
        limit : int
            Maximum number of transactions to return

        Returns
        -------
        list[TransactionRecord]
            Transactions ordered newest first

        Raises
        ------
        ValidationError
            If the address or limit is malformed

        """
        results = await self.fetch_by_chain(address, chain_ids, limit)
        return merge_results(results, limit)

    async def fetch_by_chain(
        self,
        address: str,
        chain_ids: Iterable[int] | None = None,
        limit: int = DEFAULT_LIMIT,
    ) -> list[ChainScanResult]:
        """
        Fetch every requested chain and report each outcome separately.

        Returns
        -------
        list[ChainScanResult]
            One result per requested chain, in request order

        """
        validate_address(address)
        validate_limit(limit)

        requested = self.registry.list_chain_ids() if chain_ids is None else list(chain_ids)
        return list(await asyncio.gather(*(self._fetch_isolated(address, chain_id, limit) for chain_id in requested)))

    async def fetch_chain(self, address: str, chain_id: int, limit: int = DEFAULT_LIMIT) -> list[TransactionRecord]:
        """
        Fetch a single chain, surfacing its failure.

        Raises
        ------
        ValidationError
            If the address or limit is malformed
        UnsupportedChainError
            If the chain is not registered
        ConfigurationError
            If the chain has no endpoint
        TransportError
            If the endpoint cannot be reached

        """
        validate_address(address)
        validate_limit(limit)

        cached = self.cache.get(address, chain_id)
        if cached is not None:
            logger.debug("Cache hit for %s on chain %d", address, chain_id)
            return cached[:limit]

        client = self.clients.get(chain_id)
        outcome = await self.retry.execute(partial(self.scanner.scan_detailed, client, address, limit))

        if outcome.degraded:
            logger.debug("Not caching degraded scan for %s on chain %d", address, chain_id)
        else:
            self.cache.put(address, chain_id, outcome.transactions)
        return outcome.transactions[:limit]

    async def _fetch_isolated(self, address: str, chain_id: int, limit: int) -> ChainScanResult:
        chain = self.registry.describe(chain_id)
        chain_name = chain.name if chain else None

        try:
            transactions = await self.fetch_chain(address, chain_id, limit)
        except TrackerError as e:
            logger.warning("Chain %d (%s) failed with %s error: %s", chain_id, chain_name, e.kind, e.message)
            return ChainScanResult(
                chain_id=chain_id,
                chain_name=chain_name,
                error=e.kind,
                error_message=e.message,
            )
        except Exception as e:
            logger.exception("Chain %d (%s) failed unexpectedly", chain_id, chain_name)
            return ChainScanResult(
                chain_id=chain_id,
                chain_name=chain_name,
                error=ErrorKind.TRANSPORT,
                error_message=get_error_message(e),
            )

        return ChainScanResult(chain_id=chain_id, chain_name=chain_name, transactions=transactions)

    def evict(self, address: str, chain_id: int | None = None) -> int:
        """Drop cached results of an address, for one chain or all of them."""
        return self.cache.evict(address, chain_id)

    def clear_cache(self) -> None:
        """Drop every cached result."""
        self.cache.clear()

    async def aclose(self) -> None:
        """Close the chain clients."""
        await self.clients.aclose()

    async def __aenter__(self) -> "TransactionAggregator":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Async context manager exit."""
        await self.aclose()
