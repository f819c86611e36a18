"""Statement reconciliation commands."""

import click
from accountshelper.domain.entities import AccountingPeriod
from accountshelper.domain.errors import DomainError
from accountshelper.domain.reconciliation import ReconciliationService
from accountshelper.cli.error_handling import handle_domain_error
from accountshelper.cli.resolution import (
    parse_amount_or_exit,
    parse_date_or_exit,
    parse_period_or_exit,
    resolve_account_or_exit,
)
from accountshelper.utils.amounts import format_amount


@click.group()
def reconcile_group():
    """Reconcile accounts against statements."""
    pass


@reconcile_group.command("create")
@click.option("--account", required=True, help="Account name or code")
@click.option("--period", help="Accounting period (YYYY-MM); defaults to the statement date's month")
@click.option("--statement-date", required=True, help="Statement date")
@click.option("--balance", required=True, help="Statement ending balance")
@click.pass_context
def create_reconciliation(ctx, account: str, period: str | None, statement_date: str, balance: str):
    """Record a statement's ending balance for an account.

    Examples:
        accountshelper reconcile create --account "BofS PV" --statement-date 2025-09-30 --balance 1234.56
    """
    service = ReconciliationService(ctx.obj["db"])
    rec_account = resolve_account_or_exit(ctx, account)
    rec_date = parse_date_or_exit(ctx, statement_date, "statement date")
    rec_period = parse_period_or_exit(ctx, period) if period else AccountingPeriod.containing(rec_date)
    rec_balance = parse_amount_or_exit(ctx, balance, "balance")

    try:
        rec = service.create_reconciliation(rec_account, rec_period, rec_date, rec_balance)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Reconciliation {rec.id}: {rec.account.description} {rec.period.display_string}")
    click.echo(f"  Statement date: {rec.statement_date}")
    click.echo(f"  Statement balance: {format_amount(rec.statement_ending_balance, rec.currency)}")


@reconcile_group.command("list")
@click.option("--account", help="Account name or code")
@click.option("--period", help="Accounting period (YYYY-MM)")
@click.pass_context
def list_reconciliations(ctx, account: str | None, period: str | None):
    """List reconciliations."""
    service = ReconciliationService(ctx.obj["db"])
    rec_account = resolve_account_or_exit(ctx, account) if account else None
    rec_period = parse_period_or_exit(ctx, period) if period else None

    recs = service.list_reconciliations(period=rec_period, account=rec_account)
    if not recs:
        click.echo("No reconciliations found.")
        return

    click.echo(f"{'ID':<6} {'Key':<20} {'Period':<18} {'Statement':<12} {'Balance':>14} {'Gap':>12} Status")
    click.echo("-" * 95)
    for rec in recs:
        gap = service.reconciliation_gap(rec)
        status = "closed" if rec.closed else "open"
        click.echo(
            f"{rec.id:<6} {rec.period_key:<20} {rec.period.display_string:<18} "
            f"{str(rec.statement_date):<12} "
            f"{format_amount(rec.statement_ending_balance, rec.currency, zero='0.00'):>14} "
            f"{format_amount(gap, rec.currency):>12} {status}"
        )


@reconcile_group.command("show")
@click.argument("reconciliation_id", type=int)
@click.pass_context
def show_reconciliation(ctx, reconciliation_id: int):
    """Show balances and transactions for a reconciliation."""
    service = ReconciliationService(ctx.obj["db"])
    try:
        rec = service.require_reconciliation(reconciliation_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    summary = service.summary(rec)
    gap = service.reconciliation_gap(rec)
    start, end = service.transaction_window(rec)

    def fmt(value):
        return format_amount(value, rec.currency, zero="0.00")

    click.echo(f"{rec.account.description} - {rec.period.display_string} ({rec.period_key})")
    click.echo(f"  Window: {start} to {end}")
    click.echo(f"  Start balance:     {fmt(summary.start_balance):>14}")
    click.echo(f"  Credits:           {fmt(summary.total_credits):>14}")
    click.echo(f"  Debits:            {fmt(summary.total_debits):>14}")
    click.echo(f"  Ending balance:    {fmt(summary.ending_balance):>14}")
    click.echo(f"  Statement balance: {fmt(rec.statement_ending_balance):>14}")
    click.echo(f"  Gap:               {fmt(gap):>14}")
    click.echo(f"  Status: {'closed' if rec.closed else 'open'}")

    blockers = [] if rec.closed else service.close_blockers(rec)
    if blockers:
        click.echo(f"  Cannot close yet: {', '.join(blockers)}")

    transactions = service.transactions_for(rec)
    if transactions:
        click.echo(f"\n{len(transactions)} transaction(s):")
        for txn in transactions:
            marker = " " if txn.is_valid() else "!"
            click.echo(
                f"{marker} {txn.id:<6} {str(txn.transaction_date):<12} "
                f"{format_amount(txn.amount, txn.currency):>14} {txn.payee or ''}"
            )


@reconcile_group.command("close")
@click.argument("reconciliation_id", type=int)
@click.pass_context
def close_reconciliation(ctx, reconciliation_id: int):
    """Close a balanced reconciliation and its transactions."""
    service = ReconciliationService(ctx.obj["db"])
    try:
        rec = service.close(reconciliation_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Closed {rec.period_key}")


@reconcile_group.command("reopen")
@click.argument("reconciliation_id", type=int)
@click.pass_context
def reopen_reconciliation(ctx, reconciliation_id: int):
    """Reopen a closed reconciliation and its transactions."""
    service = ReconciliationService(ctx.obj["db"])
    try:
        rec = service.reopen(reconciliation_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Reopened {rec.period_key}")


@reconcile_group.command("delete")
@click.argument("reconciliation_id", type=int)
@click.pass_context
def delete_reconciliation(ctx, reconciliation_id: int):
    """Delete an open reconciliation."""
    service = ReconciliationService(ctx.obj["db"])
    try:
        service.delete_reconciliation(reconciliation_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted reconciliation {reconciliation_id}")


def register_commands(cli):
    """Register reconcile commands with main CLI."""
    cli.add_command(reconcile_group, name="reconcile")
