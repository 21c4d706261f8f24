"""TTL-based cache for scanned transaction lists."""

import logging
import threading
import time
from collections.abc import Callable

from chain_tx_tracker.core.models import TransactionRecord

logger = logging.getLogger(__name__)

DEFAULT_TTL = 120

CacheKey = tuple[str, int]


class CacheEntry:
    """
    Cache entry with TTL support.

    Parameters
    ----------
    transactions : list[TransactionRecord]
        Cached scan result
    ttl : float
        Time-to-live in seconds
    created_at : float
        Creation timestamp

    """

    def __init__(self, transactions: list[TransactionRecord], ttl: float, created_at: float) -> None:
        self.transactions = transactions
        self.ttl = ttl
        self.created_at = created_at

    def is_expired(self, now: float) -> bool:
        """
        Check if cache entry has expired.

        Parameters
        ----------
        now : float
            Current time on the same clock as created_at

        Returns
        -------
        bool
            True if expired, False otherwise

        """
        return (now - self.created_at) >= self.ttl


class TransactionCache:
    """
    In-memory cache mapping (address, chain id) to scanned transactions.

    Expiry is checked lazily on read; there is no background sweeping.
    A single lock guards the map and is never held across an await.

    Parameters
    ----------
    ttl : float
        Time-to-live in seconds for cache entries
    clock : Callable[[], float]
        Time source in seconds

    """

    def __init__(self, ttl: float = DEFAULT_TTL, clock: Callable[[], float] = time.time) -> None:
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[CacheKey, CacheEntry] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _make_key(address: str, chain_id: int) -> CacheKey:
        return address.lower(), chain_id

    def get(self, address: str, chain_id: int) -> list[TransactionRecord] | None:
        """
        Get cached transactions if present and not expired.

        Parameters
        ----------
        address : str
            Queried address (any letter case)
        chain_id : int
            Chain identifier

        Returns
        -------
        list[TransactionRecord] | None
            Cached transactions, None on miss or expiry

        """
        key = self._make_key(address, chain_id)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            if entry.is_expired(self._clock()):
                # Clean up expired entry
                del self._entries[key]
                logger.debug("Cache entry for %s on chain %d expired", key[0], chain_id)
                return None

            return list(entry.transactions)

    def put(self, address: str, chain_id: int, transactions: list[TransactionRecord]) -> None:
        """Store transactions, replacing any existing entry."""
        key = self._make_key(address, chain_id)
        with self._lock:
            self._entries[key] = CacheEntry(list(transactions), self.ttl, self._clock())

    def evict(self, address: str, chain_id: int | None = None) -> int:
        """
        Remove entries for an address.

        Parameters
        ----------
        address : str
            Address whose entries to remove (any letter case)
        chain_id : int | None
            Single chain to evict, or every chain if None

        Returns
        -------
        int
            Number of entries removed

        """
        address = address.lower()
        with self._lock:
            if chain_id is not None:
                return 1 if self._entries.pop((address, chain_id), None) is not None else 0
            keys = [key for key in self._entries if key[0] == address]
            for key in keys:
                del self._entries[key]
            return len(keys)

    def clear(self) -> None:
        """Clear all cached entries."""
        with self._lock:
            self._entries.clear()

    def cleanup_expired(self) -> int:
        """
        Remove all expired entries from cache.

        Returns
        -------
        int
            Number of entries removed

        """
        now = self._clock()
        with self._lock:
            expired_keys = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired_keys:
                del self._entries[key]
        return len(expired_keys)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
