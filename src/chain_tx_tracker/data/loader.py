"""Chain configuration loader."""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

CONFIG_PATH_ENV = "CHAIN_TX_TRACKER_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).parent / "chains.yaml"


def get_config_path() -> Path:
    """
    Resolve the chain configuration file.

    Returns
    -------
    Path
        ``$CHAIN_TX_TRACKER_CONFIG`` if set, otherwise the packaged chains.yaml

    """
    override = os.environ.get(CONFIG_PATH_ENV)
    return Path(override) if override else DEFAULT_CONFIG_PATH


def load_chains(path: Path | None = None) -> list[dict[str, Any]]:
    """
    Load chain entries from YAML, preserving file order.

    Parameters
    ----------
    path : Path | None
        Configuration file. Uses get_config_path() if None.

    Returns
    -------
    list[dict[str, Any]]
        Raw chain entries

    """
    path = path or get_config_path()
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return list(data.get("chains") or [])


def resolve_rpc_url(entry: Mapping[str, Any], environ: Mapping[str, str] | None = None) -> str:
    """
    Resolve the endpoint URL of a chain entry.

    The environment variable named by ``rpc_env`` wins; a literal ``rpc_url``
    is the fallback. An empty string means the chain is unconfigured.

    Parameters
    ----------
    entry : Mapping[str, Any]
        Raw chain entry
    environ : Mapping[str, str] | None
        Environment to read. Uses os.environ if None.

    Returns
    -------
    str
        Endpoint URL or empty string

    """
    environ = os.environ if environ is None else environ
    env_name = entry.get("rpc_env")
    if env_name and environ.get(env_name):
        return environ[env_name].strip()
    return (entry.get("rpc_url") or "").strip()
