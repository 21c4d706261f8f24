"""RPC layer with client pooling, rate-limit retry and result caching."""

from chain_tx_tracker.rpc.cache import CacheEntry, TransactionCache
from chain_tx_tracker.rpc.provider import ChainClient, ChainClientPool, JsonRpcClient
from chain_tx_tracker.rpc.retry import RetryConfig, RetryExecutor

__all__ = [
    "CacheEntry",
    "ChainClient",
    "ChainClientPool",
    "JsonRpcClient",
    "RetryConfig",
    "RetryExecutor",
    "TransactionCache",
]
