"""CLI for chain transaction tracker."""

import asyncio
import json
import logging
from enum import StrEnum

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from rich.traceback import install

from chain_tx_tracker.cli.formatting import format_address, format_amount, format_timestamp
from chain_tx_tracker.core import ChainRegistry, TrackerError
from chain_tx_tracker.core.aggregator import DEFAULT_LIMIT, TransactionAggregator, merge_results
from chain_tx_tracker.core.errors import get_error_message
from chain_tx_tracker.core.models import ChainScanResult, TransactionDirection, TransactionRecord, TransactionStatus
from chain_tx_tracker.data import PreferenceStore, get_config_path
from chain_tx_tracker.pricing import PlaceholderPricing

# Install rich traceback handler
install(show_locals=False)

app = typer.Typer(
    name="chain-tx-tracker",
    help="Find recent transactions of an address across chains using plain JSON-RPC endpoints",
    add_completion=False,
)

console = Console()


class OutputFormat(StrEnum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


STATUS_STYLES = {
    TransactionStatus.CONFIRMED: "green",
    TransactionStatus.PENDING: "yellow",
    TransactionStatus.FAILED: "red",
}


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=debug)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug else logging.WARNING)


def _load_registry() -> ChainRegistry:
    try:
        return ChainRegistry.from_config()
    except (OSError, KeyError, ValueError) as e:
        console.print(f"[bold red]Failed to load chain configuration from {get_config_path()}:[/bold red] {e}")
        raise typer.Exit(code=1)


def _resolve_chain_ids(
    registry: ChainRegistry,
    chain: list[int] | None,
    all_chains: bool,
    preferences: PreferenceStore,
) -> list[int]:
    """
    Decide which chains to query.

    Explicit ``--chain`` options win, then ``--all``, then the persisted
    selection, then every registered chain.

    """
    if chain:
        return chain
    if all_chains:
        return registry.list_chain_ids()

    selected = preferences.get_selected_chain()
    if selected is not None and selected in registry:
        return [selected]
    return registry.list_chain_ids()


async def _fetch(registry: ChainRegistry, address: str, chain_ids: list[int], limit: int) -> list[ChainScanResult]:
    async with TransactionAggregator(registry) as aggregator:
        return await aggregator.fetch_by_chain(address, chain_ids, limit)


@app.command()
def transactions(
    address: str = typer.Argument(..., help="Account address to query"),
    chain: list[int] | None = typer.Option(None, "--chain", "-c", help="Chain ID to query (repeatable)"),
    all_chains: bool = typer.Option(False, "--all", "-a", help="Query every registered chain"),
    limit: int = typer.Option(DEFAULT_LIMIT, "--limit", "-n", min=1, help="Maximum transactions to show"),
    format: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--format",
        "-f",
        help="Output format",
    ),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug output"),
) -> None:
    """
    Show the most recent transactions of an address.

    Examples:

        # Query the selected chain (or every chain)
        chain-tx-tracker transactions 0xABC...

        # Query Ethereum and Arbitrum
        chain-tx-tracker transactions 0xABC... -c 1 -c 42161

        # Output as JSON
        chain-tx-tracker transactions 0xABC... --format json
    """
    _configure_logging(debug)
    registry = _load_registry()
    chain_ids = _resolve_chain_ids(registry, chain, all_chains, PreferenceStore())

    if format == OutputFormat.TABLE:
        console.print(f"\n[bold cyan]Fetching transactions for:[/bold cyan] {address}")

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task(f"Scanning {len(chain_ids)} chain(s)...", total=None)
            results = asyncio.run(_fetch(registry, address, chain_ids, limit))
    except TrackerError as e:
        console.print(f"[bold red]Error:[/bold red] {get_error_message(e)}")
        raise typer.Exit(code=1)

    failed = [result for result in results if not result.ok]
    if len(results) == 1 and failed:
        console.print(f"[bold red]Error:[/bold red] {failed[0].error_message}")
        raise typer.Exit(code=1)

    records = merge_results(results, limit)

    if format == OutputFormat.JSON:
        _output_json(registry, records, failed)
    else:
        for result in failed:
            label = result.chain_name or f"Chain {result.chain_id}"
            console.print(f"[yellow]Skipped {label} ({result.error}): {result.error_message}[/yellow]")
        _output_table(registry, address, records)


@app.command()
def list_chains() -> None:
    """List all supported chains."""
    registry = _load_registry()
    selected = PreferenceStore().get_selected_chain()

    table = Table(title="Supported Chains", show_header=True, header_style="bold magenta")
    table.add_column("Chain ID", style="cyan", justify="right")
    table.add_column("Name", style="blue")
    table.add_column("Currency", style="yellow")
    table.add_column("Status", style="green")

    for descriptor in registry:
        status = "✓ Configured" if descriptor.is_configured else "[red]✗ No RPC URL[/red]"
        name = f"{descriptor.name} (selected)" if descriptor.chain_id == selected else descriptor.name
        table.add_row(str(descriptor.chain_id), name, descriptor.native_currency.symbol, status)

    console.print(table)


@app.command()
def select_chain(chain_id: int = typer.Argument(..., help="Chain ID to use by default")) -> None:
    """Remember a chain as the default for `transactions`."""
    registry = _load_registry()
    descriptor = registry.describe(chain_id)
    if descriptor is None:
        console.print(f"[bold red]Unsupported chain:[/bold red] {chain_id}")
        raise typer.Exit(code=1)

    store = PreferenceStore()
    try:
        store.set_selected_chain(chain_id)
    except OSError as e:
        console.print(f"[bold red]Failed to save selected chain:[/bold red] {e}")
        raise typer.Exit(code=1)

    console.print(f"✓ Selected {descriptor.name} ({chain_id})")


def _output_table(registry: ChainRegistry, address: str, records: list[TransactionRecord]) -> None:
    """Output transactions as rich table."""
    if not records:
        console.print("\n[yellow]No transactions found in recent blocks[/yellow]")
        return

    pricing = PlaceholderPricing()
    table = Table(
        title=f"Recent transactions for {format_address(address)}",
        show_header=True,
        header_style="bold magenta",
    )

    table.add_column("Time", style="white")
    table.add_column("Chain", style="blue")
    table.add_column("Type", style="cyan")
    table.add_column("Counterparty", style="white")
    table.add_column("Amount", style="bold white", justify="right")
    table.add_column("USD (approx.)", style="green", justify="right")
    table.add_column("Status")
    table.add_column("Hash", style="dim")

    for record in records:
        descriptor = registry.describe(record.chain_id)
        currency = descriptor.native_currency if descriptor else None
        decimals = currency.decimals if currency else 18
        symbol = currency.symbol if currency else ""

        sent = record.direction == TransactionDirection.SENT
        counterparty = record.to_address if sent else record.from_address
        style = STATUS_STYLES[record.status]

        table.add_row(
            format_timestamp(record.timestamp),
            record.chain_name,
            "↑ sent" if sent else "↓ received",
            format_address(counterparty) or "-",
            f"{format_amount(record.value, decimals)} {symbol}".strip(),
            pricing.format_usd(record.value, decimals),
            f"[{style}]{record.status.value}[/{style}]",
            format_address(record.hash),
        )

    console.print("\n")
    console.print(table)
    console.print("[dim]USD values use a fixed placeholder price[/dim]\n")


def _output_json(registry: ChainRegistry, records: list[TransactionRecord], failed: list[ChainScanResult]) -> None:
    """Output transactions as JSON."""
    items = []
    for record in records:
        data = record.model_dump(mode="json")
        descriptor = registry.describe(record.chain_id)
        data["explorer_url"] = descriptor.explorer_tx_url(record.hash) if descriptor else ""
        items.append(data)

    payload = {
        "transactions": items,
        "errors": [result.model_dump(mode="json", exclude={"transactions"}) for result in failed],
    }
    console.print_json(json.dumps(payload))


if __name__ == "__main__":
    app()
