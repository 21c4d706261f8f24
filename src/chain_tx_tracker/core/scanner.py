"""Block scanner for discovering an address's transactions in recent blocks."""

import asyncio
import logging
from functools import partial
from operator import attrgetter
from typing import NamedTuple

from chain_tx_tracker.core.models import (
    Block,
    BlockTransaction,
    ChainDescriptor,
    TransactionDirection,
    TransactionReceipt,
    TransactionRecord,
    TransactionStatus,
)
from chain_tx_tracker.rpc.provider import ChainClient
from chain_tx_tracker.rpc.retry import RetryExecutor

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SIZE = 1000
DEFAULT_BATCH_SIZE = 10


class ScanOutcome(NamedTuple):
    """Transactions found by one scan and whether the block walk failed part-way."""

    transactions: list[TransactionRecord]
    degraded: bool = False


class BlockScanner:
    """
    Walks a bounded window of recent blocks looking for an address.

    Without an indexing service the full history cannot be enumerated, so
    only the last ``window_size`` blocks are searched. Blocks are fetched
    concurrently in batches of ``batch_size`` and scanning stops once
    ``limit`` matches are found.

    Parameters
    ----------
    retry : RetryExecutor | None
        Executor wrapping block and receipt lookups. Uses default config if None.
    window_size : int
        Number of recent blocks to search
    batch_size : int
        Number of blocks fetched concurrently

    """

    def __init__(
        self,
        retry: RetryExecutor | None = None,
        window_size: int = DEFAULT_WINDOW_SIZE,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        self.retry = retry or RetryExecutor()
        self.window_size = window_size
        self.batch_size = batch_size

    async def scan(self, client: ChainClient, address: str, limit: int = 10) -> list[TransactionRecord]:
        """Find the transactions touching ``address`` on one chain, newest first."""
        outcome = await self.scan_detailed(client, address, limit)
        return outcome.transactions

    async def scan_detailed(self, client: ChainClient, address: str, limit: int = 10) -> ScanOutcome:
        """
        Find the transactions touching ``address`` on one chain.

        Failures while fetching the current height propagate unretried, so the
        caller decides whether to retry the whole scan. Failures while
        walking blocks are logged and degrade to an empty result so a single
        chain cannot break a multi-chain query.

        Parameters
        ----------
        client : ChainClient
            Client of the chain to scan
        address : str
            Queried address (any letter case)
        limit : int
            Maximum number of transactions to return

        Returns
        -------
        ScanOutcome
            Matches ordered newest first, flagged as degraded if the walk failed

        """
        if limit <= 0:
            return ScanOutcome([])

        current_height = await client.current_block_height()
        window = min(self.window_size, current_height)
        start_height = max(0, current_height - window)

        logger.debug(
            "Scanning %s blocks %d-%d for %s",
            client.chain.name,
            start_height,
            current_height,
            address,
        )

        try:
            records = await self._walk(client, address.lower(), start_height, current_height, limit)
        except Exception as e:
            logger.warning(
                "Scan of %s failed between blocks %d and %d, returning no transactions: %s",
                client.chain.name,
                start_height,
                current_height,
                e,
            )
            return ScanOutcome([], degraded=True)

        records.sort(key=attrgetter("timestamp"), reverse=True)
        return ScanOutcome(records[:limit])

    async def _walk(
        self,
        client: ChainClient,
        target: str,
        start_height: int,
        end_height: int,
        limit: int,
    ) -> list[TransactionRecord]:
        records: list[TransactionRecord] = []

        for batch_start in range(start_height, end_height + 1, self.batch_size):
            if len(records) >= limit:
                break

            batch_end = min(batch_start + self.batch_size - 1, end_height)
            blocks = await asyncio.gather(
                *(
                    self.retry.execute(partial(client.get_block_with_transactions, number))
                    for number in range(batch_start, batch_end + 1)
                )
            )

            for block in blocks:
                if block is None:
                    continue

                for tx in block.transactions:
                    if len(records) >= limit:
                        break

                    direction = classify_direction(tx, target)
                    if direction is None:
                        continue

                    receipt = await self._resolve_receipt(client, tx.hash)
                    records.append(build_record(client.chain, block, tx, direction, receipt))

        return records

    async def _resolve_receipt(self, client: ChainClient, tx_hash: str) -> TransactionReceipt | None:
        try:
            return await self.retry.execute(partial(client.get_transaction_receipt, tx_hash))
        except Exception as e:
            logger.debug("Receipt lookup for %s failed, treating as pending: %s", tx_hash, e)
            return None


def classify_direction(tx: BlockTransaction, target: str) -> TransactionDirection | None:
    """
    Classify a transaction relative to a lower-cased address.

    Returns
    -------
    TransactionDirection | None
        SENT if the address is the sender, RECEIVED if only the receiver,
        None if the transaction does not touch the address

    """
    if (tx.from_address or "").lower() == target:
        return TransactionDirection.SENT
    if (tx.to_address or "").lower() == target:
        return TransactionDirection.RECEIVED
    return None


def derive_status(receipt: TransactionReceipt | None) -> TransactionStatus:
    """Map a receipt to a confirmation status."""
    if receipt is None:
        return TransactionStatus.PENDING
    return TransactionStatus.CONFIRMED if receipt.succeeded else TransactionStatus.FAILED


def build_record(
    chain: ChainDescriptor,
    block: Block,
    tx: BlockTransaction,
    direction: TransactionDirection,
    receipt: TransactionReceipt | None,
) -> TransactionRecord:
    """Normalize raw chain data into a TransactionRecord."""
    status = derive_status(receipt)
    mined = receipt is not None

    gas_price = None
    if mined:
        price = receipt.effective_gas_price if receipt.effective_gas_price is not None else tx.gas_price
        gas_price = str(price) if price is not None else None

    return TransactionRecord(
        hash=tx.hash,
        from_address=tx.from_address or "",
        to_address=tx.to_address or "",
        value=str(tx.value),
        direction=direction,
        status=status,
        chain_id=chain.chain_id,
        chain_name=chain.name,
        block_number=block.number if mined else None,
        gas_used=str(receipt.gas_used) if mined and receipt.gas_used is not None else None,
        gas_price=gas_price,
        timestamp=block.timestamp,
    )
