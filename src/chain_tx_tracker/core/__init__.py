"""Core models, error kinds and chain registry.

The scanner and aggregator live in ``core.scanner`` and ``core.aggregator``;
they depend on the RPC layer and are not re-exported here.
"""

from chain_tx_tracker.core.errors import (
    ConfigurationError,
    ErrorKind,
    RateLimitError,
    RPCResponseError,
    TrackerError,
    TransportError,
    UnsupportedChainError,
    ValidationError,
)
from chain_tx_tracker.core.models import (
    ChainDescriptor,
    ChainScanResult,
    NativeCurrency,
    TransactionDirection,
    TransactionRecord,
    TransactionStatus,
)
from chain_tx_tracker.core.registry import ChainRegistry

__all__ = [
    "ChainDescriptor",
    "ChainRegistry",
    "ChainScanResult",
    "ConfigurationError",
    "ErrorKind",
    "NativeCurrency",
    "RPCResponseError",
    "RateLimitError",
    "TrackerError",
    "TransactionDirection",
    "TransactionRecord",
    "TransactionStatus",
    "TransportError",
    "UnsupportedChainError",
    "ValidationError",
]
