"""Summary commands."""

import click
from accountshelper.domain.enums import Currency
from accountshelper.domain.errors import DomainError
from accountshelper.domain.reconciliation import (
    category_breakdown,
    category_breakdown_including_splits,
    summarize,
)
from accountshelper.domain.transaction import TransactionService
from accountshelper.cli.error_handling import handle_domain_error
from accountshelper.cli.resolution import parse_date_or_exit, resolve_account_or_exit
from accountshelper.utils.amounts import format_amount
from accountshelper.utils.date_parser import get_date_range


@click.command("summary")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--period", help="Named period: this-month, this-year, last-month, last-year or YYYY-MM")
@click.option("--account", help="Only include one account")
@click.option("--include-splits", is_flag=True, help="Divide split transactions between their categories (GBP totals)")
@click.option("--show-zero", is_flag=True, help="List categories with no transactions too")
@click.pass_context
def summary(
    ctx,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    account: str | None,
    include_splits: bool,
    show_zero: bool,
):
    """Show category summary."""
    db = ctx.obj["db"]
    service = TransactionService(db)

    if period and (start_date or end_date):
        click.echo("Error: --period cannot be combined with --start-date or --end-date.", err=True)
        ctx.exit(1)

    start = None
    end = None
    if period:
        try:
            start, end = get_date_range(period)
        except DomainError as e:
            handle_domain_error(ctx, e)
    else:
        if start_date:
            start = parse_date_or_exit(ctx, start_date, "start date")
        if end_date:
            end = parse_date_or_exit(ctx, end_date, "end date")

    txn_account = resolve_account_or_exit(ctx, account) if account else None
    transactions = service.list_transactions(start_date=start, end_date=end, account=txn_account)

    if not transactions:
        click.echo("No transactions found.")
        return

    if include_splits:
        totals = category_breakdown_including_splits(transactions)
        heading = "Category Summary (GBP, splits divided):"
    else:
        totals = category_breakdown(transactions)
        heading = "Category Summary:"

    rows = [(category, total) for category, total in totals.items() if show_zero or total != 0]
    # Largest totals first, then by name for ties
    rows.sort(key=lambda row: (-abs(row[1]), row[0].description))

    # Raw totals mix currencies unless every transaction shares one
    currencies = {txn.currency for txn in transactions}
    show_symbol = include_splits or len(currencies) == 1
    currency = Currency.GBP if include_splits or len(currencies) != 1 else currencies.pop()

    def fmt(value):
        return format_amount(value, currency, show_symbol=show_symbol)

    click.echo(f"\n{heading}")
    click.echo("-" * 60)
    click.echo(f"{'Category':<40} {'Total':>19}")
    click.echo("-" * 60)
    for category, total in rows:
        click.echo(f"{category.description:<40} {fmt(total):>19}")

    overall = summarize(transactions, in_base_currency=include_splits)
    click.echo("-" * 60)
    click.echo(f"{'Debits':<40} {fmt(overall.total_debits):>19}")
    click.echo(f"{'Credits':<40} {fmt(overall.total_credits):>19}")
    click.echo(f"{'Net':<40} {fmt(overall.net_total):>19}")
    click.echo(f"Count: {len(transactions)}")


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
