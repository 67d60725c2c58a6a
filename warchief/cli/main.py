# warchief/cli/main.py
"""
CLI for inspecting and extending the Warchief transaction ledger.
"""

import os
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from warchief import __version__
from warchief.chain.state import State
from warchief.core.errors import InsufficientBalanceError, LedgerError
from warchief.core.genesis import load_genesis
from warchief.core.types import Account, MAX_VALUE, Tx
from warchief.crypto.hashing import Snapshot
from warchief.verify.verifier import LogVerifier

app = typer.Typer(
    name="wb",
    help="Warchief Blockchain CLI",
    add_completion=False,
    no_args_is_help=True,
)
balances_app = typer.Typer(help="Interact with balances (list...)", no_args_is_help=True)
tx_app = typer.Typer(help="Interact with transactions (add...)", no_args_is_help=True)
app.add_typer(balances_app, name="balances")
app.add_typer(tx_app, name="tx")

console = Console()

DEFAULT_DATA_DIR = Path("database")


def resolve_path(flag: Optional[Path], env_var: str, default_name: str) -> Path:
    """Resolve a data file path in this order:
    1. command line flag
    2. environment variable
    3. Default: ./database/<default_name>
    """
    if flag:
        return flag.resolve()
    env_path = os.environ.get(env_var)
    if env_path:
        return Path(env_path).resolve()
    return (Path.cwd() / DEFAULT_DATA_DIR / default_name).resolve()


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def load_state(ctx: typer.Context) -> State:
    genesis_path, log_path = ctx.obj["genesis"], ctx.obj["log"]

    if not genesis_path.exists():
        console.print(f"[red]Genesis file not found: {genesis_path}[/]")
        console.print("[yellow]Use --genesis or set WB_GENESIS_PATH.[/]")
        raise typer.Exit(1)
    if not log_path.exists():
        console.print(f"[red]Transaction log not found: {log_path}[/]")
        console.print("[yellow]Create an empty file first (the log is never created automatically).[/]")
        raise typer.Exit(1)

    try:
        return State.from_disk(genesis_path, log_path)
    except (OSError, LedgerError) as e:
        console.print(f"[red]Failed to load state: {str(e)}[/]")
        raise typer.Exit(1)


@app.callback()
def main(
    ctx: typer.Context,
    genesis: Optional[Path] = typer.Option(
        None, "--genesis", help="Path to genesis.json (overrides WB_GENESIS_PATH env var)",
    ),
    log: Optional[Path] = typer.Option(
        None, "--log", help="Path to the transaction log (overrides WB_TX_DB_PATH env var)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show ledger activity logs"),
):
    """Manage the Warchief ledger."""
    configure_logging(verbose)
    ctx.obj = {
        "genesis": resolve_path(genesis, "WB_GENESIS_PATH", "genesis.json"),
        "log": resolve_path(log, "WB_TX_DB_PATH", "tx.db"),
    }


@app.command()
def version():
    """Describes version."""
    console.print(f"Version: {__version__}")


@balances_app.command("list")
def balances_list(ctx: typer.Context):
    """Lists all balances."""
    state = load_state(ctx)
    try:
        balances = state.balances
        snapshot = state.latest_snapshot()
    finally:
        state.close()

    console.print(f"Accounts balances at [bold]{snapshot}[/]:")

    table = Table(title="Balances")
    table.add_column("Account")
    table.add_column("Balance", justify="right")
    for account in sorted(balances):
        table.add_row(account, str(balances[account]))

    console.print(table)


@tx_app.command("add")
def tx_add(
    ctx: typer.Context,
    from_account: str = typer.Option(..., "--from", help="Account to send tokens from"),
    to_account: str = typer.Option(..., "--to", help="Account to send tokens to"),
    value: int = typer.Option(..., "--value", min=0, max=MAX_VALUE, help="Amount of tokens to send"),
    data: str = typer.Option("", "--data", help="Possible values: 'reward'"),
):
    """Adds a new transaction and persists it to the log."""
    tx = Tx(Account(from_account), Account(to_account), value, data)

    state = load_state(ctx)
    try:
        state.add(tx)
        snapshot = state.persist()
    except InsufficientBalanceError as e:
        console.print(f"[red]Transaction rejected: {str(e)}[/]")
        raise typer.Exit(1)
    except OSError as e:
        console.print(f"[red]Failed to persist transaction: {str(e)}[/]")
        raise typer.Exit(1)
    finally:
        state.close()

    console.print("[green]TX successfully added to the ledger.[/]")
    console.print(f"New snapshot: {snapshot}")


@app.command()
def verify(
    ctx: typer.Context,
    snapshot: Optional[str] = typer.Option(None, "--snapshot", help="Expected snapshot (hex) of the log"),
):
    """Replay the transaction log offline and report every inconsistency."""
    genesis_path, log_path = ctx.obj["genesis"], ctx.obj["log"]

    try:
        genesis = load_genesis(genesis_path)
    except (OSError, LedgerError) as e:
        console.print(f"[red]Failed to load genesis: {str(e)}[/]")
        raise typer.Exit(1)

    expected = None
    if snapshot:
        try:
            expected = Snapshot.from_hex(snapshot)
        except ValueError as e:
            console.print(f"[red]Invalid snapshot: {str(e)}[/]")
            raise typer.Exit(1)

    result = LogVerifier(genesis).verify_file(log_path, expected_snapshot=expected)

    if result.is_valid:
        console.print(f"[green]✓ Transaction log '{log_path}' is valid[/]")
        console.print(f"  Snapshot: {result.snapshot}")
    else:
        console.print(f"[red]✗ Verification failed for '{log_path}'[/]")
        for failure in result.failures:
            console.print(f"  • [{failure.index}] {failure.category}: {failure.message}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
