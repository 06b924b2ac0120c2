"""Rich console dashboard for the formatted statistics."""

from __future__ import annotations

from rich.columns import Columns
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table

from .formatter import FormattedIndexResponse, FormattedShieldedValue, FormattedSupply


def _truncate(text: str, width: int = 16) -> str:
    if len(text) <= width:
        return text
    return f"{text[:10]}...{text[-4:]}"


def _supply_panel(title: str, supply: FormattedSupply, style: str) -> Panel:
    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("Key", style="dim")
    table.add_column("Value", justify="right", style=style)
    table.add_row("Total", supply.total)
    table.add_row("Unstaked", supply.unstaked)
    table.add_row("Staked", supply.staked)
    table.add_row("Auction", supply.auction)
    table.add_row("Dex", supply.dex)
    return Panel(table, title=f"[bold]{title}[/]", border_style=style)


def _deposit_panel(title: str, value: FormattedShieldedValue) -> Panel:
    table = Table(expand=True, show_lines=False)
    table.add_column("Asset", style="cyan", no_wrap=True)
    table.add_column("Total", justify="right")
    table.add_column("Current", justify="right", style="green")

    for deposit in value.by_asset:
        table.add_row(deposit.asset, deposit.total, deposit.current)
    for deposit in value.unknown_asset:
        table.add_row(
            f"[dim]{_truncate(deposit.asset)}[/]",
            f"[dim]{deposit.total}[/]",
            f"[dim]{deposit.current}[/]",
        )
    if not value.by_asset and not value.unknown_asset:
        table.add_row("[dim]<none>[/]", "", "")

    return Panel(table, title=f"[bold]{title}[/]", border_style="cyan")


def format_report_table(
    formatted: FormattedIndexResponse, console: Console | None = None
) -> None:
    """Print the formatted statistics as a dashboard.

    Unknown assets are listed dimmed after the known ones, with raw amounts.
    """
    console = console or Console()

    top_row = Columns(
        [
            _supply_panel("Supply", formatted.supply, "green"),
            _supply_panel("USDC Equivalent", formatted.usdc_equivalent_supply, "yellow"),
        ],
        equal=True,
        expand=True,
    )

    depositors = Panel(
        f"[bold]{formatted.depositors.total}[/] unique depositors",
        border_style="blue",
    )

    outer_panel = Panel(
        Group(
            top_row,
            depositors,
            _deposit_panel("Shielded", formatted.shielded),
            _deposit_panel("Unshielded", formatted.unshielded),
        ),
        title="[bold white]Ledger Stats[/]",
        border_style="white",
        padding=(1, 2),
    )

    console.print()
    console.print(outer_panel)
    console.print()
