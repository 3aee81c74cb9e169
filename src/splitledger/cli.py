"""CLI for SplitLedger using Typer."""

import logging
import sys
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from .config import Settings, load_settings
from .models import BalanceReport, Dashboard, GroupId, MemberId, SplitType
from .service import LedgerService
from .splits import compute_shares
from .store import load_snapshot

app = typer.Typer(
    name="splitledger",
    help="Group expense balances, settle-up payments and spending analytics",
)

console = Console()

LEDGER_OPTION = typer.Option(
    None, "--ledger", "-l", help="Path to the JSON ledger snapshot"
)
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Verbose output")


def setup_logging(verbose: bool = False, level: str = "WARNING"):
    """Setup logging configuration."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _build_service(ledger: Path | None, verbose: bool) -> tuple[LedgerService, Settings]:
    settings = load_settings()
    setup_logging(verbose, settings.log_level)
    store = load_snapshot(ledger or settings.ledger_path)
    return LedgerService(store, settings), settings


def _fail(e: Exception, verbose: bool):
    console.print(f"\n[bold red]Error:[/bold red] {e}")
    if verbose:
        raise e
    sys.exit(1)


def format_money(amount: Decimal, use_color: bool = True) -> str:
    """
    Format money in accounting style with alignment.

    Negative amounts use parentheses: ($85.02)
    Positive amounts have spaces:      $85.02
    The spaces ensure decimal points align in tables.
    """
    abs_amount = abs(amount)
    if amount < 0:
        if use_color:
            return f"($[red]{abs_amount:,.2f}[/red])"
        return f"(${abs_amount:,.2f})"
    if use_color:
        return f" [green]${abs_amount:,.2f}[/green] "
    return f" ${abs_amount:,.2f} "


def display_balances(report: BalanceReport, currency: str):
    """Display member balances and settle-up payments."""
    table = Table(
        title=f"Balances ({currency})", show_header=True, header_style="bold magenta"
    )
    table.add_column("Member", style="cyan")
    table.add_column("Balance", justify="right", width=14)
    table.add_column("Status", style="dim")

    for entry in report.member_balances:
        if entry.balance > Decimal("0.01"):
            status = "is owed"
        elif entry.balance < Decimal("-0.01"):
            status = "owes"
        else:
            status = "settled up"
        table.add_row(entry.member_id, format_money(entry.balance), status)

    console.print(table)
    console.print()
    display_debts(report)


def display_debts(report: BalanceReport):
    """Display the simplified payments of a balance report."""
    if not report.simplified_debts:
        console.print("[green]✓ Everyone is settled up[/green]")
        return

    table = Table(title="Settle Up", show_header=True, header_style="bold magenta")
    table.add_column("From", style="cyan")
    table.add_column("To", style="cyan")
    table.add_column("Amount", justify="right", width=14)
    for debt in report.simplified_debts:
        table.add_row(debt.from_member, debt.to_member, format_money(debt.amount))
    console.print(table)


def display_dashboard(member_id: str, dashboard: Dashboard):
    """Display a member's dashboard."""
    stats = dashboard.stats

    console.print(f"\n[bold]Dashboard for {member_id}:[/bold]")
    console.print(f"  Total spent: {format_money(stats.total_spent)}")
    console.print(f"  You are owed: {format_money(stats.total_owed)}")
    console.print(f"  You owe: {format_money(-stats.total_owing)}")
    console.print(f"  Net balance: {format_money(stats.net_balance)}")
    console.print(f"  Groups: {stats.group_count}  Expenses: {stats.expense_count}")
    console.print()

    categories = Table(title="By Category", show_header=True, header_style="bold magenta")
    categories.add_column("Category", style="yellow")
    categories.add_column("Your share", justify="right", width=14)
    for entry in dashboard.category_data:
        categories.add_row(entry.category.value, format_money(entry.amount))
    console.print(categories)
    console.print()

    monthly = Table(title="Monthly Spend", show_header=True, header_style="bold magenta")
    monthly.add_column("Month", style="cyan")
    monthly.add_column("Paid", justify="right", width=14)
    for entry in dashboard.monthly_data:
        monthly.add_row(entry.month, format_money(entry.spent))
    console.print(monthly)


@app.command()
def balances(
    group_id: str = typer.Argument(..., help="Group to report on"),
    ledger: Path | None = LEDGER_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of tables"),
    verbose: bool = VERBOSE_OPTION,
):
    """
    Show net balances and the payments that settle a group.
    """
    try:
        service, settings = _build_service(ledger, verbose)
        report = service.get_group_balances(GroupId(group_id))

        if as_json:
            typer.echo(report.model_dump_json(indent=2))
            return

        group = service.store.get_group(GroupId(group_id))
        display_balances(report, group.currency or settings.default_currency)

    except Exception as e:
        _fail(e, verbose)


@app.command("settle-up")
def settle_up(
    group_id: str = typer.Argument(..., help="Group to settle"),
    ledger: Path | None = LEDGER_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """
    List the payments that would settle all debts in a group.
    """
    try:
        service, _settings = _build_service(ledger, verbose)
        display_debts(service.get_group_balances(GroupId(group_id)))
    except Exception as e:
        _fail(e, verbose)


@app.command()
def dashboard(
    member_id: str | None = typer.Argument(
        None, help="Member to report on (defaults to SPLITLEDGER_MEMBER_ID)"
    ),
    ledger: Path | None = LEDGER_OPTION,
    today: str | None = typer.Option(
        None, "--today", help="Reference date (YYYY-MM-DD) for the monthly series"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of tables"),
    verbose: bool = VERBOSE_OPTION,
):
    """
    Show spending totals, category breakdown and monthly spend for a member.
    """
    try:
        service, settings = _build_service(ledger, verbose)
        member = member_id or settings.member_id
        if not member:
            raise typer.BadParameter(
                "Pass a member id or set SPLITLEDGER_MEMBER_ID", param_hint="MEMBER_ID"
            )
        reference = datetime.strptime(today, "%Y-%m-%d").date() if today else date.today()

        result = service.get_dashboard(MemberId(member), today=reference)

        if as_json:
            typer.echo(result.model_dump_json(indent=2))
            return

        display_dashboard(member, result)

    except Exception as e:
        _fail(e, verbose)


@app.command()
def split(
    amount: str = typer.Argument(..., help="Expense amount"),
    members: list[str] = typer.Argument(..., help="Participants, first takes any remainder"),
    split_type: SplitType = typer.Option(
        SplitType.EQUAL, "--type", "-t", help="How to split the amount"
    ),
    values: list[str] | None = typer.Option(
        None,
        "--value",
        help="Per-member exact amount, percentage or weight (repeat per member)",
    ),
    verbose: bool = VERBOSE_OPTION,
):
    """
    Preview how an expense would be split between members.
    """
    setup_logging(verbose)

    try:
        try:
            total = Decimal(amount)
            parsed = [Decimal(v) for v in values] if values else None
        except InvalidOperation as e:
            raise typer.BadParameter(f"Not a number: {e}") from e

        participants = compute_shares(
            total, [MemberId(m) for m in members], split_type, parsed
        )

        table = Table(
            title=f"{split_type.value.title()} split of {total}",
            show_header=True,
            header_style="bold magenta",
        )
        table.add_column("Member", style="cyan")
        table.add_column("Share", justify="right", width=14)
        for participant in participants:
            table.add_row(participant.member_id, format_money(participant.share))
        console.print(table)

        share_total = sum((p.share for p in participants), Decimal("0"))
        if share_total == total:
            console.print("  [green]✓ Shares add up to the amount[/green]")
        else:
            console.print(
                f"  [yellow]⚠️  Shares add up to {share_total}, amount is {total}[/yellow]"
            )

    except Exception as e:
        _fail(e, verbose)


if __name__ == "__main__":
    app()
