"""Configuration loading and persisted preferences."""

from chain_tx_tracker.data.loader import get_config_path, load_chains, resolve_rpc_url
from chain_tx_tracker.data.preferences import PreferenceStore

__all__ = [
    "PreferenceStore",
    "get_config_path",
    "load_chains",
    "resolve_rpc_url",
]
