import logging
import typer
from pathlib import Path
from typing import Optional
from datetime import date

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape
from rich.text import Text

from wallet_ledger.domain.enums import TransactionType
from wallet_ledger.logging_setup import configure_logging
from wallet_ledger.services.ledger_manager import LedgerManager
from wallet_ledger.services.models import ImportResult

app = typer.Typer(
    name="wallet-ledger",
    help="Track wallets, balances and monthly spending",
    add_completion=False,
)

console = Console()

class State:
    verbose: bool = False
    manager: Optional[LedgerManager] = None


state = State()

@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose output",
    )
):
    """
    Wallet Ledger - Load wallets from CSV and report on them.
    """
    configure_logging("DEBUG" if verbose else None, default=logging.WARNING)

    if state.manager is None:
        state.manager = LedgerManager()

    state.verbose = verbose


def _print_import_result(result: ImportResult) -> None:
    if result.has_warnings:
        console.print(Panel(
            Text(result.message),
            title=f"[bold yellow]CSV loaded with {len(result.error_messages)} warnings[/bold yellow]",
            border_style="yellow",
        ))
    else:
        console.print("[green]✓[/green] CSV loaded.")


def _populate(filepath: Optional[Path], sample: bool) -> None:
    """Fill the in-memory ledger from a CSV file or the demo data set"""
    if sample:
        state.manager.generate_sample_data()
        console.print("[green]✓[/green] Sample data generated.")
        return

    if filepath is None:
        raise typer.BadParameter("Provide a CSV path or use --sample")

    result = state.manager.load_from_csv(str(filepath))
    if not result.success:
        console.print(f"[bold red]Error:[/bold red] {escape(result.message)}")
        raise typer.Exit(code=1)
    _print_import_result(result)


def _print_wallets() -> None:
    summaries = state.manager.list_wallets()
    if not summaries:
        console.print("[yellow]No wallets.[/yellow]")
        return

    table = Table(title="Wallets")
    table.add_column("Name", style="cyan")
    table.add_column("Currency", style="magenta")
    table.add_column("Initial", justify="right")
    table.add_column("Current", justify="right")

    for summary in summaries:
        color = "green" if summary.current_balance >= summary.initial_balance else "red"
        table.add_row(
            escape(summary.name),
            escape(summary.currency),
            f"{summary.initial_balance:,.2f}",
            f"[{color}]{summary.current_balance:,.2f}[/{color}]",
        )

    console.print(table)


@app.command(name="load")
def load(
    filepath: Path = typer.Argument(
        ...,
        help="Path to the wallet CSV file",
    ),
):
    """
    Load wallets from a CSV file and show the result.

    Examples:
        wallet-ledger load wallets.csv
    """
    try:
        _populate(filepath, sample=False)
        _print_wallets()
    except (typer.Exit, typer.BadParameter):
        raise
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        if state.verbose:
            console.print_exception()
        raise typer.Exit(code=1)


@app.command(name="wallets")
def wallets(
    filepath: Optional[Path] = typer.Argument(
        None,
        help="Path to the wallet CSV file",
    ),
    sample: bool = typer.Option(
        False,
        "--sample",
        help="Use the built-in sample data instead of a CSV file",
    ),
):
    """
    List wallets with their initial and current balances.

    Examples:
        wallet-ledger wallets wallets.csv
        wallet-ledger wallets --sample
    """
    try:
        _populate(filepath, sample)
        _print_wallets()
    except (typer.Exit, typer.BadParameter):
        raise
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        if state.verbose:
            console.print_exception()
        raise typer.Exit(code=1)


@app.command(name="report")
def report(
    filepath: Optional[Path] = typer.Argument(
        None,
        help="Path to the wallet CSV file",
    ),
    sample: bool = typer.Option(
        False,
        "--sample",
        help="Use the built-in sample data instead of a CSV file",
    ),
    month: Optional[int] = typer.Option(
        None,
        "--month", "-m",
        help="Month (1-12)",
        min=1,
        max=12
    ),
    year: Optional[int] = typer.Option(
        None,
        "--year", "-y",
        help="Year",
        min=1,
    ),
    top: int = typer.Option(
        3,
        "--top", "-t",
        help="Number of largest expenses to list",
    ),
):
    """
    Generate a monthly report for every wallet.

    Examples:
        wallet-ledger report wallets.csv --month 9 --year 2025
        wallet-ledger report --sample -m 9 -y 2025 --top 5
    """
    try:
        if month is None:
            month = date.today().month

        if year is None:
            year = date.today().year

        _populate(filepath, sample)
        reports = state.manager.monthly_report(year=year, month=month, top_n=top)

        if not reports:
            console.print("[yellow]No wallets.[/yellow]")
            return

        for wallet_report in reports:
            month_name = wallet_report.start_date.strftime("%B %Y")
            console.print(
                f"\n[bold cyan]=== Wallet: {escape(wallet_report.wallet_name)} "
                f"({escape(wallet_report.currency)}) - {month_name} ===[/bold cyan]"
            )
            console.print(
                f"Initial balance: {wallet_report.initial_balance:,.2f}, "
                f"Current balance: {wallet_report.current_balance:,.2f}"
            )

            if not wallet_report.groups:
                console.print(Panel(
                    "[yellow]No transactions for this month[/yellow]",
                    title="Empty Report",
                    border_style="yellow"
                ))
            else:
                for group in wallet_report.groups:
                    color = "green" if group.type == TransactionType.INCOME else "red"
                    group_table = Table(
                        title=f"[{color}]{group.type.value}[/{color}] : Total = {group.total:,.2f}",
                        show_header=True,
                        padding=(0, 1),
                    )
                    group_table.add_column("Date", style="cyan", width=12)
                    group_table.add_column("Amount", justify="right", width=12)
                    group_table.add_column("Description", style="white", max_width=40)

                    for txn in group.transactions:
                        group_table.add_row(
                            str(txn.date),
                            f"[{color}]{txn.amount:,.2f}[/{color}]",
                            escape(txn.description),
                        )
                    console.print(group_table)

            console.print(f"\n[bold]Top {top} expenses for month[/bold]")
            if not wallet_report.top_expenses:
                console.print("  [dim]No expenses.[/dim]")
            for rank, txn in enumerate(wallet_report.top_expenses, start=1):
                console.print(
                    f"  {rank}. {txn.date} | [red]{txn.amount:,.2f}[/red] | {escape(txn.description)}"
                )

        if state.verbose:
            console.print(f"\n[dim]→ Report generated successfully[/dim]")

    except (typer.Exit, typer.BadParameter):
        raise
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        if state.verbose:
            console.print_exception()
        raise typer.Exit(code=1)


def cli_main():
    """Entry point for the CLI"""
    app()


if __name__ == "__main__":
    cli_main()
