"""Chain registry mapping chain identifiers to connection parameters."""

from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path

from chain_tx_tracker.core.models import ChainDescriptor, NativeCurrency
from chain_tx_tracker.data.loader import load_chains, resolve_rpc_url


class ChainRegistry:
    """
    Read-only registry of supported chains.

    Chains keep their registration order, which is also the default display
    order. Unknown identifiers resolve to None and mean "unsupported chain".

    Parameters
    ----------
    chains : Iterable[ChainDescriptor]
        Chain descriptors in registration order

    Raises
    ------
    ValueError
        If two descriptors share a chain identifier

    """

    def __init__(self, chains: Iterable[ChainDescriptor]) -> None:
        self._chains: dict[int, ChainDescriptor] = {}
        for chain in chains:
            if chain.chain_id in self._chains:
                msg = f"Chain {chain.chain_id} is registered more than once"
                raise ValueError(msg)
            self._chains[chain.chain_id] = chain

    @classmethod
    def from_config(
        cls,
        path: Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "ChainRegistry":
        """
        Build the registry from the YAML chain configuration.

        Parameters
        ----------
        path : Path | None
            Configuration file. Uses the packaged chains.yaml if None.
        environ : Mapping[str, str] | None
            Environment used to resolve endpoint URLs. Uses os.environ if None.

        Returns
        -------
        ChainRegistry
            Registry with endpoints resolved

        """
        chains = []
        for entry in load_chains(path):
            chains.append(
                ChainDescriptor(
                    chain_id=entry["chain_id"],
                    name=entry["name"],
                    rpc_url=resolve_rpc_url(entry, environ),
                    block_explorer=entry.get("block_explorer", ""),
                    native_currency=NativeCurrency(**entry["native_currency"]),
                )
            )
        return cls(chains)

    def describe(self, chain_id: int) -> ChainDescriptor | None:
        """Get the descriptor of a chain, None if unsupported."""
        return self._chains.get(chain_id)

    def list_chain_ids(self) -> list[int]:
        """Get chain identifiers in registration order."""
        return list(self._chains)

    def __contains__(self, chain_id: object) -> bool:
        return chain_id in self._chains

    def __iter__(self) -> Iterator[ChainDescriptor]:
        return iter(self._chains.values())

    def __len__(self) -> int:
        return len(self._chains)
