"""Persisted user preferences (last selected chain)."""

import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

HOME_ENV = "CHAIN_TX_TRACKER_HOME"
SELECTED_CHAIN_KEY = "wallet_dashboard_selected_chain"


def default_preferences_path() -> Path:
    """Preferences file under ``$CHAIN_TX_TRACKER_HOME`` or ``~/.chain-tx-tracker``."""
    home = os.environ.get(HOME_ENV)
    base = Path(home) if home else Path.home() / ".chain-tx-tracker"
    return base / "preferences.json"


class PreferenceStore:
    """
    Small JSON key-value store holding the last selected chain.

    Parameters
    ----------
    path : Path | None
        Preferences file. Uses default_preferences_path() if None.

    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or default_preferences_path()

    def _read(self) -> dict:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable preferences file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def get_selected_chain(self) -> int | None:
        """Return the stored chain id, None when absent or malformed."""
        value = self._read().get(SELECTED_CHAIN_KEY)
        try:
            return int(value) if value is not None else None
        except (TypeError, ValueError):
            return None

    def set_selected_chain(self, chain_id: int) -> None:
        """Persist the selected chain id."""
        data = self._read()
        data[SELECTED_CHAIN_KEY] = str(chain_id)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        logger.debug("Saved selected chain %s to %s", chain_id, self.path)
